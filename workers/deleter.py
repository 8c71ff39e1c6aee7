import asyncio
from typing import List, Optional

from helpers.errors import DeletionError
from helpers.models import ObjectIdentifier, MAX_BATCH_SIZE
from storage.s3 import S3Backend
from workers.stack import ObjectStack


class DeletionWorker:
    """
    Drains a shared queue of identifiers into batched delete calls.

    Several workers read the same input queue, each identifier goes to exactly
    one of them. `deleted` only ever counts what the backend confirmed and is
    owned by this worker alone.
    """

    def __init__(
        self,
        service: S3Backend,
        bucket: str,
        queue: asyncio.Queue,
        progress: Optional[asyncio.Queue] = None,
        failures: Optional[asyncio.Queue] = None,
        batch_size: int = MAX_BATCH_SIZE,
        debug: bool = False,
    ):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch size must be between 1 and {MAX_BATCH_SIZE}")
        self.service = service
        self.bucket = bucket
        self.queue = queue
        self.progress = progress
        self.failures = failures
        self.stack = ObjectStack(batch_size)
        self.debug = debug

        self.deleted = 0
        self.failed = 0
        self.batches = 0

    async def run(self) -> int:
        while True:
            try:
                obj = await self.queue.get()
            except asyncio.QueueShutDown:
                break

            self.stack.push(obj)
            if self.stack.is_full():
                await self.flush()

        # input is closed, whatever is left goes out as a short batch
        await self.flush()
        return self.deleted

    async def flush(self) -> None:
        if len(self.stack) == 0:
            return

        batch = list(self.stack.queue)
        call = asyncio.ensure_future(self.service.delete_objects(self.bucket, batch))
        try:
            confirmed = await asyncio.shield(call)
        except asyncio.CancelledError:
            # the request is already out, let it land so the count stays right
            if not call.done():
                await asyncio.wait([call])
            if not call.cancelled() and call.exception() is None:
                self._reconcile(call.result())
            raise
        except Exception as e:
            raise DeletionError(self.bucket, len(batch)) from e

        self._reconcile(confirmed)

    def _reconcile(self, confirmed: List[ObjectIdentifier]) -> None:
        missing = self.stack.find_missing_from(confirmed)
        count = len(self.stack) - len(missing)
        if len(confirmed) > count:
            print(
                f"[WARN] {self.bucket}: backend confirmed {len(confirmed) - count} objects that were not requested"
            )

        self.deleted += count
        self.failed += len(missing)
        self.batches += 1

        if self.progress is not None and count:
            self.progress.put_nowait(count)
        if missing:
            if self.debug:
                print(
                    f"[WARN] {self.bucket}: {len(missing)} of {len(self.stack)} objects not confirmed deleted"
                )
            if self.failures is not None:
                self.failures.put_nowait(missing)

        self.stack.reset()


async def delete_from_queue(
    service: S3Backend,
    bucket: str,
    queue: asyncio.Queue,
    progress: Optional[asyncio.Queue] = None,
    failures: Optional[asyncio.Queue] = None,
) -> int:
    return await DeletionWorker(service, bucket, queue, progress, failures).run()
