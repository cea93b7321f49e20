"""Arithmetic graphs over unsigned 32-bit integers, with hints and equality constraints."""

__all__ = [
    "UINT32_MAX",
    "AddNode",
    "ConfigError",
    "ConstantNode",
    "Constraint",
    "ConstraintViolation",
    "DependencyGraph",
    "EvaluationError",
    "EvaluationResult",
    "EvaluationStrategy",
    "ForeignNodeError",
    "GraphBuilder",
    "HintEvaluationError",
    "HintFunction",
    "HintGraphError",
    "HintNode",
    "InputNode",
    "InvalidValueError",
    "MissingInputError",
    "MulNode",
    "Node",
    "NodeID",
    "NodeKind",
    "UnresolvableGraphError",
    "check_constraints",
    "evaluate_nodes",
    "export_values_to_toml",
    "find_violations",
    "load_inputs_from_toml",
    "topological_sort",
]

from ._builder import GraphBuilder
from ._errors import (
    ConfigError,
    EvaluationError,
    ForeignNodeError,
    HintEvaluationError,
    HintGraphError,
    InvalidValueError,
    MissingInputError,
    UnresolvableGraphError,
)
from ._eval_engine import (
    ConstraintViolation,
    EvaluationResult,
    EvaluationStrategy,
    check_constraints,
    evaluate_nodes,
    find_violations,
)
from ._graph import DependencyGraph, topological_sort
from ._io import export_values_to_toml, load_inputs_from_toml
from ._ir import (
    AddNode,
    ConstantNode,
    Constraint,
    HintFunction,
    HintNode,
    InputNode,
    MulNode,
    Node,
    NodeID,
    NodeKind,
)
from ._uint32 import UINT32_MAX
