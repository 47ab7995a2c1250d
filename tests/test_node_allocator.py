import random

import pytest

from node_allocator import NodeAllocator, OutOfMemory


def test_counts_allocations_and_releases():
    allocator = NodeAllocator()
    a = allocator.allocate("a")
    b = allocator.allocate("b")
    assert allocator.live == 2
    assert allocator.owns(a)

    allocator.release(a)
    assert allocator.live == 1
    assert not allocator.owns(a)
    assert allocator.owns(b)
    assert (allocator.allocations, allocator.releases) == (2, 1)


def test_release_drops_the_forward_link():
    allocator = NodeAllocator()
    a = allocator.allocate("a")
    a.next = allocator.allocate("b")
    allocator.release(a)
    assert a.next is None


def test_double_release_is_an_error():
    allocator = NodeAllocator()
    node = allocator.allocate("x")
    allocator.release(node)
    with pytest.raises(RuntimeError):
        allocator.release(node)


def test_full_failure_rate_refuses_every_allocation():
    allocator = NodeAllocator(fail_percent=100)
    with pytest.raises(OutOfMemory):
        allocator.allocate("x")
    assert allocator.failures == 1
    assert allocator.live == 0


def test_partial_failure_rate_is_seedable():
    allocator = NodeAllocator(fail_percent=50, rng=random.Random(7))
    outcomes = []
    for _ in range(40):
        try:
            allocator.allocate("v")
            outcomes.append(True)
        except OutOfMemory:
            outcomes.append(False)
    assert True in outcomes and False in outcomes
    assert allocator.failures == outcomes.count(False)
    assert allocator.live == outcomes.count(True)


def test_out_of_memory_is_a_memory_error():
    assert issubclass(OutOfMemory, MemoryError)


@pytest.mark.parametrize("percent", [-1, 101])
def test_rejects_bad_fail_percent(percent):
    with pytest.raises(ValueError):
        NodeAllocator(fail_percent=percent)


def test_rejects_non_string_values():
    with pytest.raises(TypeError):
        NodeAllocator().allocate(42)


def test_reserve_queue_can_be_refused_without_touching_nodes():
    allocator = NodeAllocator()
    allocator.reserve_queue()
    assert allocator.failures == 0

    allocator.fail_percent = 100
    with pytest.raises(OutOfMemory):
        allocator.reserve_queue()
    assert allocator.failures == 1
    assert allocator.live == 0
    assert allocator.allocations == 0
