"""Core evaluation engine for arithmetic graphs."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import assert_never

from hintgraph._errors import MissingInputError, UnresolvableGraphError
from hintgraph._graph import DependencyGraph
from hintgraph._ir import AddNode, ConstantNode, HintNode, InputNode, MulNode, Node, NodeKind
from hintgraph._uint32 import validate_uint32, wrapping_add, wrapping_mul

from ._checker import ConstraintViolation
from ._resolution import collect_dependency_values, run_hint

logger = logging.getLogger(__name__)


class EvaluationStrategy(StrEnum):
    """How the evaluator orders node resolution.

    Both strategies produce the same values and raise the same error kinds.
    """

    TOPOLOGICAL = auto()  # One pass in dependency order
    RELAXATION = auto()  # Repeated passes until no node makes progress


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Result of evaluating a graph and checking its constraints.

    Attributes:
        values: Mapping from every node id to its value.
        violations: Constraints that do not hold under ``values``, in assertion order.

    """

    values: dict[int, int] = field(default_factory=dict)
    violations: list[ConstraintViolation] = field(default_factory=list)

    @property
    def satisfied(self) -> bool:
        """Check if every constraint holds."""
        return len(self.violations) == 0

    def get_value(self, node: Node | int) -> int:
        """Get a computed value by node or node id.

        Raises:
            KeyError: If no value exists for the node.

        """
        node_id = node if isinstance(node, int) else node.id
        return self.values[node_id]


def _seed_inputs(nodes: Mapping[int, Node], inputs: Mapping[int, int]) -> dict[int, int]:
    """Check that every input node has a value and start the working assignment.

    Values supplied for ids that are not input nodes are ignored.
    """
    input_ids = [node_id for node_id, node in nodes.items() if node.kind == NodeKind.INPUT]

    missing = [node_id for node_id in input_ids if node_id not in inputs]
    if missing:
        raise MissingInputError(missing)

    return {
        node_id: validate_uint32(inputs[node_id], what=f"value for input node {node_id}")
        for node_id in input_ids
    }


def _resolve_node(node: Node, values: Mapping[int, int]) -> int | None:
    """Compute a node's value, or return None if a prerequisite is missing."""
    match node:
        case InputNode(id=node_id):
            return values.get(node_id)
        case ConstantNode(value=value):
            return value
        case AddNode(left=left, right=right):
            if left in values and right in values:
                return wrapping_add(values[left], values[right])
            return None
        case MulNode(left=left, right=right):
            if left in values and right in values:
                return wrapping_mul(values[left], values[right])
            return None
        case HintNode(dependencies=dependencies):
            dependency_values = collect_dependency_values(dependencies, values)
            if dependency_values is None:
                return None
            return run_hint(node, dependency_values)
        case _:
            assert_never(node)


def _evaluate_relaxation(nodes: Mapping[int, Node], values: dict[int, int]) -> set[int]:
    """Resolve nodes by repeated full passes until a pass makes no progress.

    Returns:
        Ids of the nodes left without a value.

    """
    pending = [node_id for node_id in nodes if node_id not in values]
    passes = 0

    while pending:
        passes += 1
        still_pending: list[int] = []
        for node_id in pending:
            value = _resolve_node(nodes[node_id], values)
            if value is None:
                still_pending.append(node_id)
                continue
            values[node_id] = value
            logger.debug("Set %%%d = %d", node_id, value)

        logger.debug("Relaxation pass %d resolved %d node(s)", passes, len(pending) - len(still_pending))
        if len(still_pending) == len(pending):
            break
        pending = still_pending

    logger.debug("Relaxation finished after %d pass(es)", passes)
    return set(pending)


def _evaluate_topological(nodes: Mapping[int, Node], values: dict[int, int]) -> set[int]:
    """Resolve nodes in one pass over a topological order.

    Returns:
        Ids of the nodes left without a value.

    """
    graph = DependencyGraph.from_dependencies({node_id: node.dependencies for node_id, node in nodes.items()})
    order, blocked = graph.resolution_order()
    unresolved = set(blocked)

    for node_id in order:
        if node_id in values:
            continue
        value = _resolve_node(nodes[node_id], values)
        if value is None:
            unresolved.add(node_id)
            continue
        values[node_id] = value
        logger.debug("Set %%%d = %d", node_id, value)

    return unresolved


def evaluate_nodes(
    nodes: Iterable[Node],
    inputs: Mapping[int, int],
    *,
    strategy: EvaluationStrategy = EvaluationStrategy.TOPOLOGICAL,
) -> dict[int, int]:
    """Compute a value for every node, given values for the input nodes.

    This is a pure function: ``nodes`` and ``inputs`` are not modified, and the
    working assignment belongs to this call only.

    Args:
        nodes: The nodes of the graph.
        inputs: Values for input nodes. Must cover every input node; entries
            for other ids are ignored.
        strategy: Resolution order to use. Plain strings such as
            ``"relaxation"`` are accepted.

    Returns:
        Mapping from every node id to its value, ordered by id.

    Raises:
        ValueError: If ``strategy`` is not a known strategy.
        MissingInputError: If an input node has no supplied value.
        InvalidValueError: If a supplied input value is not a uint32.
        HintEvaluationError: If a hint computation fails.
        UnresolvableGraphError: If some node can never be resolved (a cycle,
            or a dependency on an id that is not in ``nodes``).

    Example:
        >>> builder = GraphBuilder()
        >>> x = builder.init()
        >>> y = builder.mul(x, x)
        >>> evaluate_nodes(builder.nodes, {x.id: 3})
        {0: 3, 1: 9}

    """
    strategy = EvaluationStrategy(strategy)
    nodes_by_id: dict[int, Node] = {node.id: node for node in nodes}
    values = _seed_inputs(nodes_by_id, inputs)

    logger.debug("Starting %s evaluation with %d nodes", strategy, len(nodes_by_id))

    match strategy:
        case EvaluationStrategy.TOPOLOGICAL:
            unresolved = _evaluate_topological(nodes_by_id, values)
        case EvaluationStrategy.RELAXATION:
            unresolved = _evaluate_relaxation(nodes_by_id, values)
        case _:
            assert_never(strategy)

    if unresolved:
        raise UnresolvableGraphError(unresolved)

    return {node_id: values[node_id] for node_id in sorted(nodes_by_id)}
