"""Priority queue shared by the kd-tree searches.

A single heap serves both orderings: the best-first nearest search pops the
smallest lower bound, while the k-nearest search keeps the current worst
candidate on top so it can be evicted.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Binary heap of ``(priority, item)`` pairs.

    Items are never compared with each other. Equal priorities are ordered
    by insertion: a min queue pops the oldest first, a max queue keeps the
    newest on top. A bounded max queue therefore evicts a newcomer that only
    ties the current worst.

    Example:
        >>> queue = PriorityQueue[str](largest_on_top=True, capacity=2)
        >>> for priority, item in [(3.0, "a"), (1.0, "b"), (2.0, "c")]:
        ...     _ = queue.push(priority, item)
        >>> [item for _, item in queue.drain()]
        ['c', 'b']
    """

    def __init__(self, largest_on_top: bool = False, capacity: int | None = None) -> None:
        """Initialize an empty queue.

        Args:
            largest_on_top: Pop the largest priority first instead of the
                smallest.
            capacity: Maximum number of entries kept. None means unbounded.
        """
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.largest_on_top = largest_on_top
        self.capacity = capacity
        self._heap: list[tuple[float, int, T]] = []
        self._counter = itertools.count()

    def _key(self, priority: float) -> tuple[float, int]:
        order = next(self._counter)
        if self.largest_on_top:
            return -priority, -order
        return priority, order

    @staticmethod
    def _unkey(entry: tuple[float, int, T], largest_on_top: bool) -> tuple[float, T]:
        priority, _, item = entry
        return (-priority if largest_on_top else priority), item

    def push(self, priority: float, item: T) -> tuple[float, T] | None:
        """Insert an entry, evicting the top entry if over capacity.

        Returns:
            The evicted ``(priority, item)`` pair, or None.
        """
        key, order = self._key(priority)
        heapq.heappush(self._heap, (key, order, item))
        if self.capacity is not None and len(self._heap) > self.capacity:
            return self.pop()
        return None

    def pop(self) -> tuple[float, T]:
        """Remove and return the top ``(priority, item)`` pair.

        Raises:
            IndexError: If the queue is empty.
        """
        if not self._heap:
            raise IndexError("pop from empty priority queue")
        return self._unkey(heapq.heappop(self._heap), self.largest_on_top)

    def peek(self) -> tuple[float, T]:
        """Return the top ``(priority, item)`` pair without removing it."""
        if not self._heap:
            raise IndexError("peek at empty priority queue")
        return self._unkey(self._heap[0], self.largest_on_top)

    def top_priority(self) -> float:
        """Priority of the top entry."""
        return self.peek()[0]

    def is_full(self) -> bool:
        """Whether a bounded queue holds ``capacity`` entries."""
        return self.capacity is not None and len(self._heap) >= self.capacity

    def drain(self) -> Iterator[tuple[float, T]]:
        """Pop every entry in queue order."""
        while self._heap:
            yield self.pop()

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def __repr__(self) -> str:
        order = "max" if self.largest_on_top else "min"
        return f"PriorityQueue({order}, size={len(self)}, capacity={self.capacity})"
