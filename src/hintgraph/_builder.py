from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar, overload

from ._errors import ForeignNodeError
from ._eval_engine import (
    ConstraintViolation,
    EvaluationResult,
    EvaluationStrategy,
    check_constraints,
    evaluate_nodes,
    find_violations,
)
from ._graph import DependencyGraph
from ._ir import AddNode, ConstantNode, Constraint, HintNode, InputNode, MulNode, Node, NodeKind
from ._uint32 import validate_uint32

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from ._ir import HintFunction, NodeID

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=Node)


@dataclass(slots=True)
class GraphBuilder:
    """Builds an arithmetic graph over unsigned 32-bit integers.

    Every construction method appends a node (or constraint) and returns it.
    The returned node is the handle used to wire later nodes; node ids are
    issued by this builder in creation order starting at 0, so a node can only
    refer to nodes created before it.

    Example:
        f(x) = x^2 + x + 5

        >>> builder = GraphBuilder("polynomial")
        >>> x = builder.init(label="x")
        >>> result = builder.add(builder.add(builder.mul(x, x), x), builder.constant(5))
        >>> builder.fill_nodes({x.id: 3})[result.id]
        17

    """

    name: str = "graph"
    _nodes: list[Node] = field(default_factory=list)
    _constraints: list[Constraint] = field(default_factory=list)
    _labels: dict[NodeID, str] = field(default_factory=dict)
    _ids_by_label: dict[str, NodeID] = field(default_factory=dict)

    # -- construction -------------------------------------------------------

    def init(self, *, label: str | None = None) -> InputNode:
        """Create an input node; its value is supplied to every evaluation."""
        node = InputNode(id=self._next_id())
        return self._register(node, label)

    def constant(self, value: int, *, label: str | None = None) -> ConstantNode:
        """Create a node holding a fixed value.

        Raises:
            InvalidValueError: If ``value`` is not an integer in ``[0, 2**32)``.

        """
        value = validate_uint32(value, what="constant")
        node = ConstantNode(id=self._next_id(), value=value)
        return self._register(node, label)

    def add(self, a: Node, b: Node, *, label: str | None = None) -> AddNode:
        """Create a node computing ``a + b`` with 32-bit wraparound."""
        node = AddNode(id=self._next_id(), left=self._owned_id(a), right=self._owned_id(b))
        return self._register(node, label)

    def mul(self, a: Node, b: Node, *, label: str | None = None) -> MulNode:
        """Create a node computing ``a * b`` with 32-bit wraparound."""
        node = MulNode(id=self._next_id(), left=self._owned_id(a), right=self._owned_id(b))
        return self._register(node, label)

    @overload
    def hint(
        self,
        dependencies: Iterable[Node],
        compute_fn: HintFunction,
        *,
        label: str | None = None,
    ) -> HintNode: ...

    @overload
    def hint(
        self,
        dependencies: Iterable[Node],
        compute_fn: None = None,
        *,
        label: str | None = None,
    ) -> Callable[[HintFunction], HintNode]: ...

    def hint(
        self,
        dependencies: Iterable[Node],
        compute_fn: HintFunction | None = None,
        *,
        label: str | None = None,
    ) -> HintNode | Callable[[HintFunction], HintNode]:
        """Create a node whose value is computed outside the graph.

        ``compute_fn`` receives a mapping from each dependency's id to its
        value, and its result is trusted without verification. Pair every hint
        with :meth:`assert_equal` constraints that pin down the correct answer.

        Can also be used as a decorator, in which case the decorated name is
        bound to the new node:

            >>> @builder.hint([b], label="b / 8")
            ... def c(values):
            ...     return values[b.id] // 8

        """
        dependency_ids = tuple(self._owned_id(dep) for dep in dependencies)

        def register(func: HintFunction) -> HintNode:
            node = HintNode(id=self._next_id(), dependencies=dependency_ids, compute_fn=func)
            return self._register(node, label)

        if compute_fn is None:
            return register
        return register(compute_fn)

    def assert_equal(self, a: Node, b: Node) -> Constraint:
        """Record that ``a`` and ``b`` must evaluate to the same value.

        Nothing is checked until :meth:`check_constraints` is called.
        """
        constraint = Constraint(left=self._owned_id(a), right=self._owned_id(b))
        self._constraints.append(constraint)
        logger.debug("Added constraint %s to graph '%s'", constraint, self.name)
        return constraint

    # -- evaluation ---------------------------------------------------------

    def fill_nodes(
        self,
        inputs: Mapping[NodeID, int],
        *,
        strategy: EvaluationStrategy = EvaluationStrategy.TOPOLOGICAL,
    ) -> dict[NodeID, int]:
        """Compute every node's value from values for the input nodes.

        See :func:`hintgraph.evaluate_nodes` for the full contract.
        """
        return evaluate_nodes(self._nodes, inputs, strategy=strategy)

    def check_constraints(self, values: Mapping[NodeID, int]) -> bool:
        """Check that every asserted equality holds under ``values``."""
        return check_constraints(self._constraints, values)

    def find_violations(self, values: Mapping[NodeID, int]) -> list[ConstraintViolation]:
        """List every asserted equality that does not hold under ``values``."""
        return find_violations(self._constraints, values)

    def evaluate(
        self,
        inputs: Mapping[NodeID, int],
        *,
        strategy: EvaluationStrategy = EvaluationStrategy.TOPOLOGICAL,
    ) -> EvaluationResult:
        """Fill the graph and check its constraints in one call."""
        values = self.fill_nodes(inputs, strategy=strategy)
        return EvaluationResult(values=values, violations=self.find_violations(values))

    # -- introspection ------------------------------------------------------

    @property
    def nodes(self) -> tuple[Node, ...]:
        """All nodes, in id order."""
        return tuple(self._nodes)

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        """All constraints, in assertion order."""
        return tuple(self._constraints)

    @property
    def labels(self) -> dict[NodeID, str]:
        """Mapping from node id to label, for labelled nodes only."""
        return dict(self._labels)

    def get_node(self, node_id: NodeID) -> Node:
        """Get a node by its id.

        Raises:
            KeyError: If no node has the given id.

        """
        if not 0 <= node_id < len(self._nodes):
            msg = f"No node with id {node_id} in graph '{self.name}'"
            raise KeyError(msg)
        return self._nodes[node_id]

    def get_nodes_by_kind(self, kind: NodeKind) -> list[Node]:
        """Get all nodes of a specific kind, in id order."""
        return [node for node in self._nodes if node.kind == kind]

    def input_nodes(self) -> list[InputNode]:
        """Get all input nodes, in id order."""
        return [node for node in self._nodes if isinstance(node, InputNode)]

    def hint_nodes(self) -> list[HintNode]:
        """Get all hint nodes, in id order."""
        return [node for node in self._nodes if isinstance(node, HintNode)]

    def label_of(self, node: Node | NodeID) -> str | None:
        """Get the label of a node, or None if it has none."""
        node_id = node if isinstance(node, int) else node.id
        return self._labels.get(node_id)

    def display_name(self, node: Node | NodeID) -> str:
        """Get the label of a node, falling back to ``%<id>``."""
        node_id = node if isinstance(node, int) else node.id
        return self._labels.get(node_id, f"%{node_id}")

    def lookup(self, label: str) -> Node:
        """Get a node by its label.

        Raises:
            KeyError: If no node has the given label.

        """
        if label not in self._ids_by_label:
            msg = f"No node labelled '{label}' in graph '{self.name}'"
            raise KeyError(msg)
        return self._nodes[self._ids_by_label[label]]

    def dependency_graph(self) -> DependencyGraph:
        """Build the dependency graph induced by operation parents and hint dependencies."""
        return DependencyGraph.from_dependencies({node.id: node.dependencies for node in self._nodes})

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: object) -> bool:
        """Check if a node handle was created by this builder."""
        node_id = getattr(node, "id", None)
        return isinstance(node_id, int) and 0 <= node_id < len(self._nodes) and self._nodes[node_id] is node

    # -- internals ----------------------------------------------------------

    def _next_id(self) -> NodeID:
        return len(self._nodes)

    def _owned_id(self, node: Node) -> NodeID:
        if node not in self:
            msg = f"{node!r} was not created by graph '{self.name}'"
            raise ForeignNodeError(msg)
        return node.id

    def _register(self, node: N, label: str | None) -> N:
        if label is not None:
            if label.startswith("%"):
                msg = f"Label '{label}' may not start with '%', which is reserved for node ids"
                raise ValueError(msg)
            if label in self._ids_by_label:
                msg = f"Label '{label}' is already used by node {self._ids_by_label[label]} in graph '{self.name}'"
                raise ValueError(msg)
            self._labels[node.id] = label
            self._ids_by_label[label] = node.id
        self._nodes.append(node)
        logger.debug("Added %s node %d to graph '%s'", node.kind, node.id, self.name)
        return node
