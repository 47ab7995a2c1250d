from __future__ import annotations

import logging
import random
from typing import Dict, Optional

from models import ListNode

logger = logging.getLogger(__name__)


class OutOfMemory(MemoryError):
    """Raised when the allocator refuses to hand out a node."""


class NodeAllocator:
    """
    Hands out and takes back queue nodes, counting what is live.

    Every node returned by allocate() must come back through release()
    exactly once. A release of a node that is not live (double release or
    foreign node) raises RuntimeError.

    fail_percent > 0 makes allocate() refuse that share of requests, which
    lets callers exercise their OutOfMemory paths.
    """

    def __init__(self, fail_percent: int = 0, rng: Optional[random.Random] = None) -> None:
        if not 0 <= fail_percent <= 100:
            raise ValueError("fail_percent must be within 0..100")
        self.fail_percent = fail_percent
        self._rng = rng or random.Random()
        self._live: Dict[int, ListNode] = {}
        self.allocations = 0
        self.releases = 0
        self.failures = 0

    def _maybe_refuse(self, what: str) -> None:
        if self.fail_percent and self._rng.randrange(100) < self.fail_percent:
            self.failures += 1
            logger.warning("Refusing %s allocation (fail_percent=%s)", what, self.fail_percent)
            raise OutOfMemory(f"{what} allocation refused")

    def reserve_queue(self) -> None:
        """Account for a new queue header; may raise OutOfMemory. Not counted as live."""
        self._maybe_refuse("queue")

    def allocate(self, value: str) -> ListNode:
        if not isinstance(value, str):
            raise TypeError(f"queue values must be str, not {type(value).__name__}")
        self._maybe_refuse("node")

        node = ListNode(value=value)
        self._live[id(node)] = node
        self.allocations += 1
        return node

    def release(self, node: ListNode) -> None:
        if self._live.pop(id(node), None) is None:
            raise RuntimeError(f"release of a node that is not live: {node.value!r}")
        # a released node links to nothing
        node.next = None
        self.releases += 1

    def owns(self, node: ListNode) -> bool:
        return self._live.get(id(node)) is node

    @property
    def live(self) -> int:
        return len(self._live)
