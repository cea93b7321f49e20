"""Dependency graph over node ids."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ._algorithms import in_degrees, kahn_order, topological_sort


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """A directed graph of "reads from" relationships between node ids.

    This is a pure, immutable data structure with query methods. The set of
    declared nodes is fixed at construction; a dependency on an id that was
    never declared is kept and reported by :meth:`missing_dependencies`.

    - predecessors[b] = {a} means "b reads a"
    - successors[a] = {b} means "a is read by b"

    Attributes:
        _predecessors: Mapping from declared node to its direct dependencies.
        _successors: Mapping from node to the declared nodes that read it.

    """

    _predecessors: dict[int, frozenset[int]] = field(default_factory=dict)
    _successors: dict[int, frozenset[int]] = field(default_factory=dict)

    @classmethod
    def from_dependencies(cls, dependencies: Mapping[int, Iterable[int]]) -> DependencyGraph:
        """Build a graph from each node's list of dependencies.

        Every key of ``dependencies`` is a declared node, including nodes with
        no dependencies and nodes nothing depends on.

        Example:
            >>> graph = DependencyGraph.from_dependencies({0: [], 1: [], 2: [0, 1]})
            >>> graph.predecessors(2)
            frozenset({0, 1})

        """
        successors: defaultdict[int, set[int]] = defaultdict(set)
        predecessors: dict[int, frozenset[int]] = {}

        for node, deps in dependencies.items():
            deps_set = frozenset(deps)
            predecessors[node] = deps_set
            successors.setdefault(node, set())
            for dep in deps_set:
                successors[dep].add(node)

        return cls(
            _predecessors=predecessors,
            _successors={k: frozenset(v) for k, v in successors.items()},
        )

    @property
    def nodes(self) -> frozenset[int]:
        """All declared nodes in the graph."""
        return frozenset(self._predecessors)

    def predecessors(self, node: int) -> frozenset[int]:
        """Get direct dependencies of a node (nodes it reads)."""
        return self._predecessors.get(node, frozenset())

    def successors(self, node: int) -> frozenset[int]:
        """Get direct dependents of a node (nodes that read it)."""
        return self._successors.get(node, frozenset())

    def roots(self) -> frozenset[int]:
        """Get declared nodes with no dependencies (inputs and constants)."""
        return frozenset(n for n, deps in self._predecessors.items() if not deps)

    def leaves(self) -> frozenset[int]:
        """Get declared nodes that nothing depends on."""
        return frozenset(n for n in self._predecessors if not self._successors.get(n))

    def ancestors(self, node: int) -> frozenset[int]:
        """Get all transitive dependencies of a node.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes that this node transitively reads.

        """
        visited: set[int] = set()
        stack = list(self.predecessors(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self.predecessors(current))
        return frozenset(visited)

    def missing_dependencies(self) -> dict[int, frozenset[int]]:
        """Map each declared node to the dependencies that were never declared."""
        declared = self.nodes
        missing: dict[int, frozenset[int]] = {}
        for node, deps in self._predecessors.items():
            undeclared = deps - declared
            if undeclared:
                missing[node] = undeclared
        return missing

    def topological_order(self) -> list[int]:
        """Return nodes in topological order (dependencies before dependents).

        Raises:
            ValueError: If the graph contains a cycle or a missing dependency.

        """
        missing = self.missing_dependencies()
        if missing:
            msg = f"Graph has missing dependencies: {missing}"
            raise ValueError(msg)
        return topological_sort(self._successors)

    def resolution_order(self) -> tuple[list[int], frozenset[int]]:
        """Split declared nodes into an evaluation order and a blocked set.

        A node is blocked when it sits on a cycle, reads an undeclared id, or
        transitively reads a blocked node. Every other declared node appears in
        the returned order after all of its dependencies.

        Returns:
            Tuple of (ordered resolvable nodes, blocked nodes).

        """
        successors = self._declared_successors()
        indegree = in_degrees(successors)
        for node, undeclared in self.missing_dependencies().items():
            # Never released: the missing producer is not in the graph.
            indegree[node] += len(undeclared)

        order = kahn_order(successors, indegree)
        return order, self.nodes - frozenset(order)

    def has_cycle(self) -> bool:
        """Check if the declared part of the graph contains a cycle."""
        successors = self._declared_successors()
        return len(kahn_order(successors, in_degrees(successors))) != len(successors)

    def _declared_successors(self) -> dict[int, frozenset[int]]:
        declared = self.nodes
        return {n: self._successors.get(n, frozenset()) & declared for n in declared}

    def validate(self) -> list[str]:
        """Validate the graph and return a list of error messages.

        Checks for:
        - Cycles in the graph
        - Missing nodes (dependencies on ids that were never declared)

        Returns:
            List of error messages. Empty list if graph is valid.

        """
        errors: list[str] = []

        if self.has_cycle():
            errors.append("Graph contains a cycle")

        for node, missing in sorted(self.missing_dependencies().items()):
            errors.append(f"Node {node} has missing dependencies: {sorted(missing)}")

        return errors

    def __len__(self) -> int:
        """Return the number of declared nodes in the graph."""
        return len(self._predecessors)

    def __contains__(self, node: object) -> bool:
        """Check if a node is declared in the graph."""
        return node in self._predecessors
