"""
Sorting and reversal of a node chain by relinking only.

Every function here takes ownership of the chain starting at ``head`` and
returns ``(head, tail)`` of the same nodes in their new order, with the
tail's link set to None. No node is created or released and no value moves
between nodes.

Values compare by code point, which for ASCII (and UTF-8) is byte order.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from models import ListNode, SortStrategy
from work_stack import Segment, Stack

logger = logging.getLogger(__name__)

Chain = Tuple[Optional[ListNode], Optional[ListNode]]
SortFn = Callable[[Optional[ListNode]], Chain]


def reverse_chain(head: Optional[ListNode]) -> Chain:
    if head is None:
        return None, None
    # the old head stays put and becomes the tail; its successors are
    # unhooked one at a time and pushed onto the front
    tail = head
    while tail.next is not None:
        target = tail.next
        tail.next = target.next
        target.next = head
        head = target
    return head, tail


# -------------------------
# Partition sort
# -------------------------
def partition_sort(head: Optional[ListNode]) -> Chain:
    """
    Quicksort on links, pivot = first node of each segment.

    Nodes <= pivot go left, the rest go right, so equal values do not keep
    their input order. Segments wait on an explicit stack (left on top,
    then the settled pivot, then right) and are emitted to the output in
    order, which keeps already-sorted input from nesting n calls deep.
    """
    out_head: Optional[ListNode] = None
    out_tail: Optional[ListNode] = None

    stack: Stack[Segment] = Stack()
    stack.push(Segment(head))
    while not stack.is_empty():
        segment = stack.pop()
        node = segment.head
        if node is None:
            continue

        if segment.settled or node.next is None:
            node.next = None
            if out_tail is None:
                out_head = node
            else:
                out_tail.next = node
            out_tail = node
            continue

        pivot = node
        target = pivot.next
        pivot.next = None
        left = left_end = None
        right = right_end = None
        while target is not None:
            following = target.next
            target.next = None
            if target.value <= pivot.value:
                if left_end is None:
                    left = target
                else:
                    left_end.next = target
                left_end = target
            else:
                if right_end is None:
                    right = target
                else:
                    right_end.next = target
                right_end = target
            target = following

        stack.push(Segment(right))
        stack.push(Segment(pivot, settled=True))
        stack.push(Segment(left))

    return out_head, out_tail


# -------------------------
# Radix sort
# -------------------------
_ALPHABET = 26
_BUCKETS = _ALPHABET + 1      # bucket 0: value ended before this index
_ORD_A = ord("a")
_LOWERCASE = re.compile(r"[a-z]*")


def _bucket_of(value: str, index: int) -> int:
    if index >= len(value):
        return 0
    return ord(value[index]) - _ORD_A + 1


def _scatter(head: ListNode, index: int) -> Tuple[List[Optional[ListNode]], List[Optional[ListNode]]]:
    """Split a chain into per-character buckets, keeping input order."""
    heads: List[Optional[ListNode]] = [None] * _BUCKETS
    tails: List[Optional[ListNode]] = [None] * _BUCKETS

    node: Optional[ListNode] = head
    while node is not None:
        following = node.next
        node.next = None
        b = _bucket_of(node.value, index)
        if tails[b] is None:
            heads[b] = node
        else:
            tails[b].next = node
        tails[b] = node
        node = following
    return heads, tails


def radix_sort(head: Optional[ListNode]) -> Chain:
    """
    Most-significant-character bucket sort, stable.

    Values must consist of lowercase ASCII letters only. The whole chain is
    checked before any link moves, so a rejected chain comes back untouched
    (as a ValueError). Buckets still to be split wait on an explicit stack,
    so the length of the values does not limit the depth.
    """
    node = head
    while node is not None:
        if _LOWERCASE.fullmatch(node.value) is None:
            raise ValueError(f"radix sort needs lowercase a-z values, got {node.value!r}")
        node = node.next

    out_head: Optional[ListNode] = None
    out_tail: Optional[ListNode] = None

    stack: Stack[Segment] = Stack()
    stack.push(Segment(head))
    while not stack.is_empty():
        segment = stack.pop()
        chain = segment.head
        if chain is None:
            continue

        if segment.settled or chain.next is None:
            if out_tail is None:
                out_head = chain
            else:
                out_tail.next = chain
            out_tail = chain
            while out_tail.next is not None:
                out_tail = out_tail.next
            continue

        heads, tails = _scatter(chain, segment.index)
        # pushed last-bucket first so the terminator bucket is emitted first;
        # bucket 0 only holds values equal up to their end
        for b in range(_BUCKETS - 1, -1, -1):
            if heads[b] is None:
                continue
            settled = b == 0 or heads[b] is tails[b]
            stack.push(Segment(heads[b], settled=settled, index=segment.index + 1))

    return out_head, out_tail


# -------------------------
# Merge sorts
# -------------------------
def _merge(a: Optional[ListNode], b: Optional[ListNode]) -> Chain:
    """Stable merge of two sorted chains; ties take from ``a``."""
    head: Optional[ListNode] = None
    tail: Optional[ListNode] = None
    while a is not None and b is not None:
        if a.value <= b.value:
            take, a = a, a.next
        else:
            take, b = b, b.next
        if tail is None:
            head = take
        else:
            tail.next = take
        tail = take

    rest = a if a is not None else b
    if rest is not None:
        if tail is None:
            head = rest
        else:
            tail.next = rest
        tail = rest
        while tail.next is not None:
            tail = tail.next
    return head, tail


def _cut_run(head: Optional[ListNode], width: int) -> Optional[ListNode]:
    """Detach the first ``width`` nodes of ``head``; return what follows."""
    if head is None:
        return None
    node = head
    for _ in range(width - 1):
        if node.next is None:
            break
        node = node.next
    rest = node.next
    node.next = None
    return rest


def merge_sort_bottom_up(head: Optional[ListNode]) -> Chain:
    """
    Iterative merge sort: passes of run width 1, 2, 4, ... until a single
    merge covers the whole chain. O(n log n) for any input, no recursion.
    """
    if head is None:
        return None, None

    width = 1
    while True:
        remaining = head
        head = tail = None
        merges = 0
        while remaining is not None:
            left = remaining
            right = _cut_run(left, width)
            remaining = _cut_run(right, width)

            run_head, run_tail = _merge(left, right)
            if tail is None:
                head = run_head
            else:
                tail.next = run_head
            tail = run_tail
            merges += 1

        if merges == 1:
            return head, tail
        width *= 2


def _front_back_split(head: ListNode) -> Optional[ListNode]:
    slow = head
    fast = head.next
    while fast is not None:
        fast = fast.next
        if fast is not None:
            slow = slow.next
            fast = fast.next
    # slow sits on the last node of the front half
    back = slow.next
    slow.next = None
    return back


def merge_sort_top_down(head: Optional[ListNode]) -> Chain:
    """Recursive merge sort, stable, recursion depth ~log2(n)."""
    if head is None or head.next is None:
        return head, head
    back = _front_back_split(head)
    front, _ = merge_sort_top_down(head)
    back, _ = merge_sort_top_down(back)
    return _merge(front, back)


SORTERS: Dict[SortStrategy, SortFn] = {
    SortStrategy.PARTITION: partition_sort,
    SortStrategy.RADIX: radix_sort,
    SortStrategy.MERGE_BOTTOM_UP: merge_sort_bottom_up,
    SortStrategy.MERGE_TOP_DOWN: merge_sort_top_down,
}

STABLE_STRATEGIES = frozenset(
    {SortStrategy.RADIX, SortStrategy.MERGE_BOTTOM_UP, SortStrategy.MERGE_TOP_DOWN}
)

_unimplemented = [s.value for s in SortStrategy if s not in SORTERS]
if _unimplemented:
    raise ImportError(f"sort strategies without an implementation: {', '.join(_unimplemented)}")


def get_sorter(strategy: SortStrategy) -> SortFn:
    try:
        return SORTERS[strategy]
    except KeyError:
        raise ValueError(f"no sorter registered for {strategy!r}") from None
