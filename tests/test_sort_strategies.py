import random
import string

import pytest

from conftest import build_chain, walk
from models import SortStrategy
from sort_strategies import (
    SORTERS,
    STABLE_STRATEGIES,
    get_sorter,
    merge_sort_bottom_up,
    merge_sort_top_down,
    partition_sort,
    radix_sort,
    reverse_chain,
)

ALL = list(SortStrategy)


def run_sort(strategy, values):
    head, nodes = build_chain(values)
    new_head, new_tail = get_sorter(strategy)(head)
    out = walk(new_head)
    return out, nodes, new_tail


def test_every_strategy_has_a_sorter():
    assert set(SORTERS) == set(SortStrategy)


def test_get_sorter_rejects_unknown():
    with pytest.raises(ValueError):
        get_sorter("bogus")


@pytest.mark.parametrize("strategy", ALL)
def test_sorts_small_scenario(strategy):
    out, _, tail = run_sort(strategy, ["b", "a", "c"])
    assert [n.value for n in out] == ["a", "b", "c"]
    assert tail is out[-1]
    assert tail.next is None


@pytest.mark.parametrize("strategy", ALL)
def test_sorts_alphabet_inserted_descending(strategy):
    values = list(string.ascii_lowercase[::-1])
    out, _, _ = run_sort(strategy, values)
    assert [n.value for n in out] == list(string.ascii_lowercase)


@pytest.mark.parametrize("strategy", ALL)
@pytest.mark.parametrize(
    "values",
    [
        [],
        ["solo"],
        ["a", "b", "c", "d", "e"],
        ["e", "d", "c", "b", "a"],
        ["same"] * 7,
        ["b", "a"],
        ["", "a", "", "aa", "a"],
    ],
)
def test_keeps_node_set_and_orders(strategy, values):
    out, nodes, tail = run_sort(strategy, values)
    assert [n.value for n in out] == sorted(values)
    assert {id(n) for n in out} == {id(n) for n in nodes}
    assert len(out) == len(nodes)
    if nodes:
        assert tail is out[-1] and tail.next is None
    else:
        assert tail is None


@pytest.mark.parametrize("strategy", ALL)
def test_matches_builtin_sorted_on_random_words(strategy):
    rng = random.Random(4111)
    values = [
        "".join(rng.choice("abcde") for _ in range(rng.randint(0, 4)))
        for _ in range(300)
    ]
    out, _, _ = run_sort(strategy, values)
    assert [n.value for n in out] == sorted(values)


@pytest.mark.parametrize("strategy", sorted(STABLE_STRATEGIES, key=lambda s: s.value))
def test_stable_strategies_keep_equal_values_in_input_order(strategy):
    out, nodes, _ = run_sort(strategy, ["b", "a", "b", "a", "c", "a"])
    a_nodes = [n for n in out if n.value == "a"]
    b_nodes = [n for n in out if n.value == "b"]
    assert a_nodes == [nodes[1], nodes[3], nodes[5]]
    assert b_nodes == [nodes[0], nodes[2]]


def test_partition_sort_is_not_stable():
    out, nodes, _ = run_sort(SortStrategy.PARTITION, ["a", "a"])
    # the pivot goes after everything <= it
    assert out == [nodes[1], nodes[0]]


def test_partition_sort_survives_long_sorted_input():
    values = [f"{i:05d}" for i in range(3000)]
    head, _ = build_chain(values)
    new_head, new_tail = partition_sort(head)
    assert [n.value for n in walk(new_head)] == values
    assert new_tail.value == "02999"


def test_bottom_up_merge_handles_odd_run_counts():
    values = [str(i % 10) for i in range(37)][::-1]
    head, _ = build_chain(values)
    new_head, new_tail = merge_sort_bottom_up(head)
    assert [n.value for n in walk(new_head)] == sorted(values)
    assert new_tail is walk(new_head)[-1]


def test_radix_orders_prefixes_before_longer_values():
    head, _ = build_chain(["ab", "a", "", "abc", "b", "aa"])
    new_head, _ = radix_sort(head)
    assert [n.value for n in walk(new_head)] == ["", "a", "aa", "ab", "abc", "b"]


def test_radix_sorts_long_values_sharing_a_prefix():
    long_b = "b" * 2000
    values = [long_b, "a", long_b, long_b + "a", "b" * 1999 + "a"]
    head, nodes = build_chain(values)
    new_head, new_tail = radix_sort(head)
    out = walk(new_head)
    assert [n.value for n in out] == sorted(values)
    # stable: the two equal long values keep their input order
    assert [n for n in out if n.value == long_b] == [nodes[0], nodes[2]]
    assert new_tail is out[-1] and new_tail.next is None


def test_radix_rejects_values_outside_lowercase_without_relinking():
    head, nodes = build_chain(["b", "Zed", "a"])
    with pytest.raises(ValueError):
        radix_sort(head)
    assert walk(head) == nodes


def test_reverse_chain():
    head, nodes = build_chain(["a", "b", "c", "d"])
    new_head, new_tail = reverse_chain(head)
    assert walk(new_head) == nodes[::-1]
    assert new_tail is nodes[0] and new_tail.next is None


def test_reverse_chain_edges():
    assert reverse_chain(None) == (None, None)
    head, nodes = build_chain(["x"])
    assert reverse_chain(head) == (nodes[0], nodes[0])


@pytest.mark.parametrize("sorter", [merge_sort_top_down, merge_sort_bottom_up])
@pytest.mark.parametrize("order", ["ascending", "descending", "shuffled"])
def test_merge_sorts_handle_large_chains(sorter, order):
    values = [f"{i:06d}" for i in range(20000)]
    if order == "descending":
        values.reverse()
    elif order == "shuffled":
        random.Random(20000).shuffle(values)
    head, nodes = build_chain(values)

    new_head, new_tail = sorter(head)

    out = walk(new_head)
    assert len(out) == len(nodes)
    assert [n.value for n in out] == sorted(values)
    assert new_tail is out[-1] and new_tail.next is None


def test_radix_handles_large_chain_of_words():
    rng = random.Random(26)
    values = ["".join(rng.choice(string.ascii_lowercase) for _ in range(rng.randint(1, 6))) for _ in range(20000)]
    head, _ = build_chain(values)
    new_head, _ = radix_sort(head)
    assert [n.value for n in walk(new_head)] == sorted(values)
