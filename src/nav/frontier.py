# indexed binary heap for the search frontier
# src/nav/frontier.py
"""
IndexedPriorityQueue: min-heap with an item-key -> heap-position index.

- insert / decrease_or_insert / pop_min: O(log n)
- contains / priority_of: O(1)
- ties are broken by insertion order, so a given sequence of operations
  always pops in the same order.

heapq cannot move an entry in place, which the frontier needs for
decrease-key, so the sift operations are written out here.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

# [priority, insertion_seq, key, item]
_Entry = List


def _default_key(item: object) -> Hashable:
    return getattr(item, "key", item)  # PathNode.key is its coordinate


class IndexedPriorityQueue(Generic[T]):
    """
    Min-priority queue supporting membership tests and decrease-key.

    Items are identified by `key_fn(item)`; two items with the same key are
    the same logical entry. `decrease_or_insert` replaces the stored item
    with the new one when it lowers the priority.
    """

    def __init__(self, key_fn: Callable[[T], Hashable] = _default_key) -> None:
        self._key_fn = key_fn
        self._heap: List[_Entry] = []
        self._index: Dict[Hashable, int] = {}
        self._seq = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    @property
    def count(self) -> int:
        return len(self._heap)

    def contains(self, item: T) -> bool:
        return self._key_fn(item) in self._index

    __contains__ = contains

    def priority_of(self, item: T) -> Optional[float]:
        pos = self._index.get(self._key_fn(item))
        if pos is None:
            return None
        return self._heap[pos][0]

    def peek(self) -> Tuple[T, float]:
        if not self._heap:
            raise IndexError("peek from an empty priority queue")
        entry = self._heap[0]
        return entry[3], entry[0]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, item: T, priority: float) -> None:
        key = self._key_fn(item)
        if key in self._index:
            raise KeyError(f"{key!r} is already queued")
        entry: _Entry = [priority, self._seq, key, item]
        self._seq += 1
        self._heap.append(entry)
        self._index[key] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def decrease_or_insert(self, item: T, priority: float) -> bool:
        """
        Insert `item` if absent, otherwise lower its priority.

        A priority that is not smaller than the stored one is ignored.
        Returns True if the queue changed.
        """
        key = self._key_fn(item)
        pos = self._index.get(key)
        if pos is None:
            self.insert(item, priority)
            return True

        entry = self._heap[pos]
        if priority >= entry[0]:
            return False
        entry[0] = priority
        entry[3] = item
        self._sift_up(pos)
        return True

    def pop_min(self) -> T:
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        top = self._heap[0]
        last = self._heap.pop()
        del self._index[top[2]]
        if self._heap:
            self._heap[0] = last
            self._index[last[2]] = 0
            self._sift_down(0)
        return top[3]

    def clear(self) -> None:
        self._heap.clear()
        self._index.clear()
        self._seq = 0

    # ------------------------------------------------------------------
    # Heap internals
    # ------------------------------------------------------------------

    @staticmethod
    def _less(a: _Entry, b: _Entry) -> bool:
        return (a[0], a[1]) < (b[0], b[1])

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i][2]] = i
        self._index[heap[j][2]] = j

    def _sift_up(self, pos: int) -> None:
        heap = self._heap
        while pos > 0:
            parent = (pos - 1) >> 1
            if not self._less(heap[pos], heap[parent]):
                break
            self._swap(pos, parent)
            pos = parent

    def _sift_down(self, pos: int) -> None:
        heap = self._heap
        size = len(heap)
        while True:
            left = 2 * pos + 1
            if left >= size:
                break
            smallest = left
            right = left + 1
            if right < size and self._less(heap[right], heap[left]):
                smallest = right
            if not self._less(heap[smallest], heap[pos]):
                break
            self._swap(pos, smallest)
            pos = smallest
