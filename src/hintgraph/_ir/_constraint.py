"""Equality constraints between nodes."""

from dataclasses import dataclass

from ._nodes import NodeID


@dataclass(frozen=True, slots=True)
class Constraint:
    """An assertion that two nodes evaluate to the same value.

    The pair is stored in the order it was asserted; equality itself is
    symmetric.
    """

    left: NodeID
    right: NodeID

    def __str__(self) -> str:
        return f"%{self.left} == %{self.right}"
