"""Tests for the pure graph algorithms."""

from zena_mcp.services.graph import (
    collect_dependents,
    find_cycle,
    reverse_adjacency,
    topological_order,
    with_edge,
)


class TestFindCycle:
    """Tests for depth-first cycle detection."""

    def test_acyclic_chain(self):
        assert find_cycle({"c": ["b"], "b": ["a"], "a": []}) is None

    def test_diamond_is_not_a_cycle(self):
        adjacency = {"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]}
        assert find_cycle(adjacency) is None

    def test_two_node_cycle_returns_closed_path(self):
        cycle = find_cycle({"a": ["b"], "b": ["a"]})
        assert cycle is not None
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}

    def test_self_loop(self):
        assert find_cycle({"a": ["a"]}) == ["a", "a"]

    def test_cycle_behind_acyclic_prefix(self):
        adjacency = {"start": ["x"], "x": ["y"], "y": ["z"], "z": ["x"]}
        cycle = find_cycle(adjacency)
        assert cycle == ["x", "y", "z", "x"]

    def test_long_chain_does_not_recurse(self):
        adjacency = {str(i): [str(i - 1)] for i in range(1, 5000)}
        adjacency["0"] = []
        assert find_cycle(adjacency) is None

    def test_with_edge_closes_cycle(self):
        adjacency = {"a": [], "b": ["a"], "c": ["b"]}
        assert find_cycle(with_edge(adjacency, "a", "c")) is not None
        assert adjacency["a"] == []


class TestTopologicalOrder:
    """Tests for Kahn ordering."""

    def test_dependencies_come_first(self):
        adjacency = {"c": ["b"], "b": ["a"], "a": [], "d": ["a"]}
        ordered, leftover = topological_order(["c", "b", "a", "d"], adjacency)
        assert leftover == []
        assert ordered.index("a") < ordered.index("b") < ordered.index("c")
        assert ordered.index("a") < ordered.index("d")

    def test_independent_nodes_keep_input_order(self):
        ordered, _ = topological_order(["x", "y", "z"], {})
        assert ordered == ["x", "y", "z"]

    def test_edges_outside_node_set_are_ignored(self):
        ordered, leftover = topological_order(["b"], {"b": ["hidden"]})
        assert ordered == ["b"]
        assert leftover == []

    def test_cycle_members_are_left_over(self):
        adjacency = {"a": [], "b": ["a", "c"], "c": ["b"], "d": ["c"]}
        ordered, leftover = topological_order(["a", "b", "c", "d"], adjacency)
        assert ordered == ["a"]
        assert leftover == ["b", "c", "d"]

    def test_self_loop_is_left_over(self):
        ordered, leftover = topological_order(["a"], {"a": ["a"]})
        assert ordered == []
        assert leftover == ["a"]


class TestCollectDependents:
    """Tests for the transitive dependents walk."""

    def test_diamond_reports_each_node_once(self):
        reverse = reverse_adjacency({"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]})
        impacted = collect_dependents("a", reverse)
        assert sorted(i for i, _ in impacted) == ["b", "c", "d"]
        assert dict(impacted)["d"] == 2

    def test_leaf_has_no_dependents(self):
        reverse = reverse_adjacency({"a": [], "b": ["a"]})
        assert collect_dependents("b", reverse) == []

    def test_reverse_adjacency(self):
        reverse = reverse_adjacency({"a": [], "b": ["a"], "c": ["a"]})
        assert reverse == {"a": ["b", "c"], "b": [], "c": []}
