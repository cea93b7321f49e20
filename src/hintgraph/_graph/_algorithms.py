"""Graph algorithms for dependency graph operations."""

import heapq
from collections.abc import Collection, Mapping, MutableMapping


def in_degrees(successors: Mapping[int, Collection[int]]) -> dict[int, int]:
    """Count incoming edges for every node mentioned in ``successors``."""
    indegree: dict[int, int] = {}
    for node, deps in successors.items():
        indegree.setdefault(node, 0)
        for dep in deps:
            indegree[dep] = indegree.get(dep, 0) + 1
    return indegree


def kahn_order(
    successors: Mapping[int, Collection[int]],
    indegree: MutableMapping[int, int],
) -> list[int]:
    """Emit nodes whose in-degree drops to zero, smallest id first.

    ``indegree`` is consumed. Nodes that never reach in-degree zero (members of
    a cycle, their dependents, or nodes given an artificially raised in-degree)
    are left out of the result.

    Args:
        successors: Mapping from node to the nodes that depend on it.
        indegree: Number of unsatisfied dependencies per node.

    Returns:
        Nodes in dependency order. Ties are broken by the smaller node id so the
        result is stable across runs.

    """
    ready = [node for node, deg in indegree.items() if deg == 0]
    heapq.heapify(ready)
    order: list[int] = []

    while ready:
        node = heapq.heappop(ready)
        order.append(node)
        for successor in successors.get(node, ()):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                heapq.heappush(ready, successor)

    return order


def topological_sort(successors: Mapping[int, Collection[int]]) -> list[int]:
    """Sort a graph topologically (dependencies before dependents).

    Args:
        successors: Mapping from node to collection of nodes that depend on it.
            An edge (a -> b) means "b depends on a".

    Returns:
        List of nodes in topological order.

    Raises:
        ValueError: If the graph contains a cycle.

    Example:
        >>> # 0 -> 1 -> 2 means 2 depends on 1, 1 depends on 0
        >>> topological_sort({0: [1], 1: [2], 2: []})
        [0, 1, 2]

    """
    indegree = in_degrees(successors)
    total = len(indegree)
    order = kahn_order(successors, indegree)

    if len(order) != total:
        msg = "Cycle detected in graph"
        raise ValueError(msg)

    return order
