"""Intermediate Representation (IR) module for hintgraph.

This module provides pure data structures for arithmetic graphs. Nodes and
constraints carry no behavior; the builder creates them and the evaluation
engine interprets them.

Key types:
- NodeKind: Enum for node types (INPUT, CONSTANT, ADD, MUL, HINT)
- Node: Union of the five node dataclasses
- Constraint: Equality assertion between two nodes
"""

from ._constraint import Constraint
from ._nodes import (
    AddNode,
    ConstantNode,
    HintFunction,
    HintNode,
    InputNode,
    MulNode,
    Node,
    NodeID,
    NodeKind,
)

__all__ = [
    "AddNode",
    "ConstantNode",
    "Constraint",
    "HintFunction",
    "HintNode",
    "InputNode",
    "MulNode",
    "Node",
    "NodeID",
    "NodeKind",
]
