from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from models import ListNode

T = TypeVar("T")


class Stack(Generic[T]):
    """
    LIFO work stack for sorts that would otherwise recurse once per node
    (partition) or once per character position (radix).
    push/pop: O(1)
    """

    def __init__(self) -> None:
        self._frames: List[T] = []

    def push(self, frame: T) -> None:
        self._frames.append(frame)

    def pop(self) -> Optional[T]:
        if not self._frames:
            return None
        return self._frames.pop()

    def is_empty(self) -> bool:
        return not self._frames


@dataclass
class Segment:
    """
    A chain waiting to be placed in the output.

    settled=True marks a chain already in its final order relative to its
    neighbours on the stack (a partition pivot, or a radix bucket that
    needs no further split). index is the character position a radix
    bucket is split on next.
    """
    head: Optional[ListNode]
    settled: bool = False
    index: int = 0
