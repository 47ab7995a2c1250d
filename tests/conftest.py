from typing import Iterable, List, Optional, Tuple

import pytest

from config import get_settings
from models import ListNode


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def build_chain(values: Iterable[str]) -> Tuple[Optional[ListNode], List[ListNode]]:
    nodes = [ListNode(value=v) for v in values]
    for current, following in zip(nodes, nodes[1:]):
        current.next = following
    return (nodes[0] if nodes else None), nodes


def walk(head: Optional[ListNode]) -> List[ListNode]:
    out = []
    node = head
    while node is not None:
        out.append(node)
        node = node.next
    return out
