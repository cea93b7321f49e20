"""Evaluation engine module for hintgraph.

This module provides pure functions for evaluating arithmetic graphs and
checking their constraints. Nothing here mutates the graph; every evaluation
works on its own value mapping.

Key types:
- EvaluationResult: Values plus constraint violations
- EvaluationStrategy: Topological single pass or repeated relaxation
- evaluate_nodes: Resolve every node's value from input values
- check_constraints / find_violations: Check equality constraints
"""

from ._checker import ConstraintViolation, check_constraints, find_violations
from ._engine import EvaluationResult, EvaluationStrategy, evaluate_nodes

__all__ = [
    "ConstraintViolation",
    "EvaluationResult",
    "EvaluationStrategy",
    "check_constraints",
    "evaluate_nodes",
    "find_violations",
]
