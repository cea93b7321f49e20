"""Tests for DependencyGraph and graph algorithms."""

import pytest

from hintgraph._graph import DependencyGraph, topological_sort


class TestTopologicalSort:
    """Tests for the topological_sort algorithm."""

    def test_empty_graph(self) -> None:
        result = topological_sort({})
        assert result == []

    def test_single_node(self) -> None:
        result = topological_sort({0: []})
        assert result == [0]

    def test_linear_chain(self) -> None:
        # 0 -> 1 -> 2 (2 depends on 1, 1 depends on 0)
        result = topological_sort({0: [1], 1: [2], 2: []})
        assert result == [0, 1, 2]

    def test_diamond_dependency(self) -> None:
        result = topological_sort({0: [1, 2], 1: [3], 2: [3], 3: []})
        assert result == [0, 1, 2, 3]

    def test_ties_broken_by_smallest_id(self) -> None:
        result = topological_sort({5: [0], 3: [0], 0: []})
        assert result == [3, 5, 0]

    def test_successor_without_own_entry(self) -> None:
        result = topological_sort({0: [1]})
        assert result == [0, 1]

    def test_cycle_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({0: [1], 1: [0]})

    def test_self_loop_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({0: [0]})

    def test_longer_cycle(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({0: [1], 1: [2], 2: [0]})


class TestDependencyGraphConstruction:
    """Tests for DependencyGraph construction."""

    def test_empty_graph(self) -> None:
        graph = DependencyGraph.from_dependencies({})
        assert len(graph) == 0
        assert graph.nodes == frozenset()

    def test_isolated_nodes_are_declared(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: []})
        assert graph.nodes == frozenset({0, 1})

    def test_duplicate_dependencies_collapse(self) -> None:
        # x * x reads the same node twice
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 0]})
        assert graph.predecessors(1) == frozenset({0})
        assert graph.successors(0) == frozenset({1})

    def test_contains(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0]})
        assert 0 in graph
        assert 1 in graph
        assert 2 not in graph


class TestDependencyGraphQueries:
    """Tests for direct neighbour queries."""

    @pytest.fixture
    def graph(self) -> DependencyGraph:
        # 0 and 1 are inputs, 2 = 0 + 1, 3 = 2 * 0
        return DependencyGraph.from_dependencies({0: [], 1: [], 2: [0, 1], 3: [2, 0]})

    def test_predecessors(self, graph: DependencyGraph) -> None:
        assert graph.predecessors(2) == frozenset({0, 1})
        assert graph.predecessors(0) == frozenset()

    def test_predecessors_nonexistent_node(self, graph: DependencyGraph) -> None:
        assert graph.predecessors(99) == frozenset()

    def test_successors(self, graph: DependencyGraph) -> None:
        assert graph.successors(0) == frozenset({2, 3})
        assert graph.successors(3) == frozenset()

    def test_roots(self, graph: DependencyGraph) -> None:
        assert graph.roots() == frozenset({0, 1})

    def test_leaves(self, graph: DependencyGraph) -> None:
        assert graph.leaves() == frozenset({3})

    def test_ancestors(self, graph: DependencyGraph) -> None:
        assert graph.ancestors(3) == frozenset({0, 1, 2})
        assert graph.ancestors(0) == frozenset()


class TestDependencyGraphOrdering:
    """Tests for topological and resolution orders."""

    def test_topological_order(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [], 2: [0, 1], 3: [2]})
        assert graph.topological_order() == [0, 1, 2, 3]

    def test_topological_order_rejects_missing_dependency(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 5]})
        with pytest.raises(ValueError, match="missing dependencies"):
            graph.topological_order()

    def test_topological_order_rejects_cycle(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [1], 1: [0]})
        with pytest.raises(ValueError, match="Cycle"):
            graph.topological_order()

    def test_resolution_order_without_problems(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0], 2: [1, 0]})
        order, blocked = graph.resolution_order()
        assert order == [0, 1, 2]
        assert blocked == frozenset()

    def test_resolution_order_blocks_missing_dependency(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 5], 2: [1], 3: [0]})
        order, blocked = graph.resolution_order()
        assert order == [0, 3]
        assert blocked == frozenset({1, 2})

    def test_resolution_order_blocks_cycle_and_dependents(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 2], 2: [1], 3: [2], 4: [0]})
        order, blocked = graph.resolution_order()
        assert order == [0, 4]
        assert blocked == frozenset({1, 2, 3})

    def test_resolution_order_blocks_self_reference(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [0], 1: []})
        order, blocked = graph.resolution_order()
        assert order == [1]
        assert blocked == frozenset({0})


class TestDependencyGraphValidation:
    """Tests for structural validation."""

    def test_valid_graph(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0]})
        assert not graph.has_cycle()
        assert graph.validate() == []

    def test_cycle_detected(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 2], 2: [1]})
        assert graph.has_cycle()
        assert graph.validate() == ["Graph contains a cycle"]

    def test_missing_dependency_is_not_a_cycle(self) -> None:
        graph = DependencyGraph.from_dependencies({0: [], 1: [0, 7]})
        assert not graph.has_cycle()
        assert graph.missing_dependencies() == {1: frozenset({7})}
        assert graph.validate() == ["Node 1 has missing dependencies: [7]"]

    def test_missing_dependency_not_declared_as_node(self) -> None:
        graph = DependencyGraph.from_dependencies({1: [7]})
        assert 7 not in graph
        assert graph.nodes == frozenset({1})
