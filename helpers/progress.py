import asyncio
from typing import Optional

from tqdm import tqdm


class ProgressSink:
    """Drains a queue of integer increments into a tqdm bar."""

    def __init__(self, queue: asyncio.Queue, enabled: bool = True, desc: str = "deleted"):
        self.queue = queue
        self.total = 0
        self.bar: Optional[tqdm] = None
        if enabled:
            self.bar = tqdm(total=None, desc=desc, unit="obj", dynamic_ncols=True)

    async def run(self) -> int:
        try:
            while True:
                try:
                    increment = await self.queue.get()
                except asyncio.QueueShutDown:
                    break
                self.total += increment
                if self.bar is not None:
                    self.bar.update(increment)
        finally:
            if self.bar is not None:
                self.bar.close()
        return self.total
