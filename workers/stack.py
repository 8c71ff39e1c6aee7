from typing import Iterable, List

from helpers.models import ObjectIdentifier, MAX_BATCH_SIZE


class ObjectStack:
    """A worker's pending batch. Never shared between workers."""

    def __init__(self, capacity: int = MAX_BATCH_SIZE):
        self.capacity = capacity
        self.queue: List[ObjectIdentifier] = []

    def push(self, obj: ObjectIdentifier) -> None:
        if len(self.queue) >= self.capacity:
            raise OverflowError(f"batch is already at capacity ({self.capacity})")
        self.queue.append(obj)

    def reset(self) -> None:
        self.queue = []

    def is_full(self) -> bool:
        return len(self.queue) >= self.capacity

    def __len__(self) -> int:
        return len(self.queue)

    def find_missing_from(
        self, confirmed: Iterable[ObjectIdentifier]
    ) -> List[ObjectIdentifier]:
        # keeps batch order, compared by (key, version)
        confirmed_set = set(confirmed)
        return [obj for obj in self.queue if obj not in confirmed_set]
