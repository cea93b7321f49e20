"""Node types for arithmetic graphs."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import ClassVar

NodeID = int
HintFunction = Callable[[Mapping[NodeID, int]], int]


class NodeKind(StrEnum):
    """The kind of node in the arithmetic graph."""

    INPUT = auto()  # Value supplied for every evaluation
    CONSTANT = auto()  # Literal known at construction time
    ADD = auto()
    MUL = auto()
    HINT = auto()  # Value computed outside the graph, checked only by constraints


# Nodes compare and hash by identity: the node object returned by the builder
# is the handle, and two builders may hand out nodes with equal fields.


@dataclass(frozen=True, slots=True, eq=False)
class InputNode:
    """A node whose value must be supplied to every evaluation."""

    id: NodeID
    kind: ClassVar[NodeKind] = NodeKind.INPUT

    @property
    def dependencies(self) -> tuple[NodeID, ...]:
        return ()


@dataclass(frozen=True, slots=True, eq=False)
class ConstantNode:
    """A node holding a fixed unsigned 32-bit value."""

    id: NodeID
    value: int
    kind: ClassVar[NodeKind] = NodeKind.CONSTANT

    @property
    def dependencies(self) -> tuple[NodeID, ...]:
        return ()


@dataclass(frozen=True, slots=True, eq=False)
class _BinaryNode:
    id: NodeID
    left: NodeID
    right: NodeID

    @property
    def dependencies(self) -> tuple[NodeID, ...]:
        return (self.left, self.right)


@dataclass(frozen=True, slots=True, eq=False)
class AddNode(_BinaryNode):
    """``left + right`` modulo 2**32."""

    kind: ClassVar[NodeKind] = NodeKind.ADD


@dataclass(frozen=True, slots=True, eq=False)
class MulNode(_BinaryNode):
    """``left * right`` modulo 2**32."""

    kind: ClassVar[NodeKind] = NodeKind.MUL


@dataclass(frozen=True, slots=True, eq=False)
class HintNode:
    """A node whose value is computed by a caller-supplied function.

    The function receives a mapping from each declared dependency id to its
    value and returns the node's value. Its result is trusted as-is; only the
    equality constraints asserted on the node can expose a wrong answer.

    Attributes:
        id: Unique identifier for this node.
        dependencies: Ids of the nodes the function reads, in declaration order.
        compute_fn: The hint computation. Must be a pure function of its input.

    Example:
        Integer division of node 2 by eight:

        >>> HintNode(id=4, dependencies=(2,), compute_fn=lambda v: v[2] // 8)

    """

    id: NodeID
    dependencies: tuple[NodeID, ...]
    compute_fn: HintFunction = field(repr=False)
    kind: ClassVar[NodeKind] = NodeKind.HINT


Node = InputNode | ConstantNode | AddNode | MulNode | HintNode
