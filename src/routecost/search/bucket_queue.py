# search/bucket_queue.py
import math
from collections import deque
from collections.abc import Callable

DEFAULT_BUCKET_COUNT = 4096
_OVERFLOW = -1


class BucketQueue:
    """
    Approximate-sort priority queue over integer label indices.

    Buckets cover ``[min_cost, min_cost + bucket_count * unit_size)``; a label
    lands in bucket ``floor((cost - min_cost) / unit_size)``. Labels past the
    last bucket wait in an overflow tier that is folded back in once the
    near-term buckets drain. Within a bucket labels come out FIFO, so costs
    closer than ``unit_size`` are treated as tied.

    ``cost_of(label)`` must return the label's current sort cost. Costs are
    expected to be non-decreasing as the queue is consumed; anything cheaper
    than the scan position is clamped into the current bucket.
    """

    def __init__(
        self,
        cost_of: Callable[[int], float],
        unit_size: float,
        *,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
        min_cost: float = 0.0,
    ):
        if not unit_size > 0.0:
            raise ValueError(f"unit_size must be > 0, got {unit_size}")
        if bucket_count < 1:
            raise ValueError(f"bucket_count must be >= 1, got {bucket_count}")
        self._cost_of = cost_of
        self.unit_size = float(unit_size)
        self._buckets: list[deque[int]] = [deque() for _ in range(bucket_count)]
        self._overflow: deque[int] = deque()
        self._base_cost = float(min_cost)
        self._min_cost = self._base_cost
        self._current = 0
        self._where: dict[int, int] = {}

    @classmethod
    def for_range(cls, cost_of: Callable[[int], float], unit_size: float, cost_range: float, **kw) -> "BucketQueue":
        return cls(cost_of, unit_size, bucket_count=max(1, math.ceil(cost_range / unit_size)), **kw)

    def __len__(self) -> int:
        return len(self._where)

    def __contains__(self, label: int) -> bool:
        return label in self._where

    def empty(self) -> bool:
        return not self._where

    @property
    def bucket_range(self) -> float:
        return len(self._buckets) * self.unit_size

    def _index(self, cost: float) -> int:
        i = math.floor((cost - self._min_cost) / self.unit_size)
        if i < self._current:
            return self._current
        if i >= len(self._buckets):
            return _OVERFLOW
        return i

    def _slot(self, i: int) -> deque[int]:
        return self._overflow if i == _OVERFLOW else self._buckets[i]

    def push(self, label: int) -> None:
        if label in self._where:
            raise ValueError(f"label {label} is already queued")
        i = self._index(self._cost_of(label))
        self._slot(i).append(label)
        self._where[label] = i

    def decrease_cost(self, label: int, new_cost: float) -> None:
        """Move a queued label to the bucket for ``new_cost``.

        The caller stores ``new_cost`` on the label as well, so later overflow
        folds see the same value.
        """
        try:
            old = self._where[label]
        except KeyError:
            raise ValueError(f"label {label} is not queued") from None
        new = self._index(new_cost)
        if new == old:
            return
        self._slot(old).remove(label)
        self._slot(new).append(label)
        self._where[label] = new

    def pop_min(self) -> int:
        if not self._where:
            raise IndexError("pop from an empty BucketQueue")
        while True:
            for i in range(self._current, len(self._buckets)):
                bucket = self._buckets[i]
                if bucket:
                    self._current = i
                    label = bucket.popleft()
                    del self._where[label]
                    return label
            self._fold_overflow()

    def _fold_overflow(self) -> None:
        # near-term buckets are empty here, so everything queued is in overflow
        lowest = min(self._cost_of(label) for label in self._overflow)
        self._min_cost = math.floor(lowest / self.unit_size) * self.unit_size
        self._current = 0
        pending, self._overflow = self._overflow, deque()
        for label in pending:
            i = self._index(self._cost_of(label))
            self._slot(i).append(label)
            self._where[label] = i

    def clear(self) -> None:
        for bucket in self._buckets:
            bucket.clear()
        self._overflow.clear()
        self._where.clear()
        self._current = 0
        self._min_cost = self._base_cost
