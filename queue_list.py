from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from models import ListNode, SortStrategy
from node_allocator import NodeAllocator
from sort_strategies import get_sorter, reverse_chain

logger = logging.getLogger(__name__)


class StringQueue:
    """
    Singly-linked queue of strings with head and tail pointers.
    insert_head/insert_tail/remove_head/size: O(1)

    sort() and reverse() only relink the existing nodes. The sort algorithm
    is fixed per queue by its SortStrategy.
    """

    def __init__(
        self,
        strategy: SortStrategy = SortStrategy.MERGE_BOTTOM_UP,
        allocator: Optional[NodeAllocator] = None,
    ) -> None:
        if not isinstance(strategy, SortStrategy):
            strategy = SortStrategy.parse(strategy)
        self.strategy = strategy
        self._sorter = get_sorter(strategy)
        self.allocator = allocator if allocator is not None else NodeAllocator()
        # raises OutOfMemory before any state exists
        self.allocator.reserve_queue()
        self._head: Optional[ListNode] = None
        self._tail: Optional[ListNode] = None
        self._size: int = 0

    def insert_head(self, value: str) -> bool:
        # allocate first: an OutOfMemory here leaves the queue untouched
        node = self.allocator.allocate(value)
        node.next = self._head
        self._head = node
        if self._tail is None:
            self._tail = node
        self._size += 1
        return True

    def insert_tail(self, value: str) -> bool:
        node = self.allocator.allocate(value)
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._size += 1
        return True

    def remove_head(self, bufsize: Optional[int] = None) -> Optional[str]:
        """
        Unlink and release the head node and return its value.

        With bufsize, the value comes back cut to bufsize - 1 characters,
        the room a NUL-terminated buffer of that size would leave.
        Returns None when the queue is empty.
        """
        if bufsize is not None and bufsize < 1:
            raise ValueError("bufsize must be >= 1")
        if self._head is None:
            return None

        node = self._head
        value = node.value if bufsize is None else node.value[: bufsize - 1]
        self._head = node.next
        if self._head is None:
            self._tail = None
        self._size -= 1
        self.allocator.release(node)
        return value

    def peek(self) -> Optional[str]:
        return None if self._head is None else self._head.value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def reverse(self) -> None:
        if self._head is None:
            return
        self._head, self._tail = reverse_chain(self._head)

    def sort(self) -> None:
        if self._size < 2:
            return
        logger.debug("Sorting %d nodes with %s", self._size, self.strategy.value)
        self._head, self._tail = self._sorter(self._head)

    def clear(self) -> None:
        """Release every node; the queue is empty (and reusable) afterwards."""
        node = self._head
        self._head = self._tail = None
        self._size = 0
        while node is not None:
            following = node.next
            self.allocator.release(node)
            node = following

    def verify(self) -> bool:
        """Check the head/tail/count invariants by walking the chain."""
        if self._size == 0:
            return self._head is None and self._tail is None
        if self._head is None or self._tail is None:
            return False

        node = self._head
        for _ in range(self._size - 1):
            node = node.next
            if node is None:
                return False
        return node is self._tail and node.next is None

    def __iter__(self) -> Iterator[str]:
        node = self._head
        while node is not None:
            yield node.value
            node = node.next

    def __len__(self) -> int:
        return self._size

    def to_list(self) -> List[str]:
        return list(self)


# -------------------------
# Handle API: a missing queue is a no-op, never an error
# -------------------------
def create(
    strategy: SortStrategy = SortStrategy.MERGE_BOTTOM_UP,
    allocator: Optional[NodeAllocator] = None,
) -> StringQueue:
    return StringQueue(strategy=strategy, allocator=allocator)


def insert_head(q: Optional[StringQueue], value: str) -> bool:
    if q is None:
        return False
    return q.insert_head(value)


def insert_tail(q: Optional[StringQueue], value: str) -> bool:
    if q is None:
        return False
    return q.insert_tail(value)


def remove_head(q: Optional[StringQueue], bufsize: Optional[int] = None) -> Optional[str]:
    if q is None:
        return None
    return q.remove_head(bufsize)


def size(q: Optional[StringQueue]) -> int:
    return 0 if q is None else q.size()


def reverse(q: Optional[StringQueue]) -> None:
    if q is not None:
        q.reverse()


def sort(q: Optional[StringQueue]) -> None:
    if q is not None:
        q.sort()


def destroy(q: Optional[StringQueue]) -> None:
    if q is not None:
        q.clear()
