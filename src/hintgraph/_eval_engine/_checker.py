"""Equality constraint checking."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from hintgraph._ir import Constraint


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    """A constraint that does not hold under some assignment.

    Attributes:
        constraint: The violated constraint.
        left_value: Value of the left node, or None if it had no value.
        right_value: Value of the right node, or None if it had no value.

    """

    constraint: Constraint
    left_value: int | None
    right_value: int | None

    @property
    def reason(self) -> str:
        """Human-readable description of why the constraint fails."""
        missing = [
            f"%{node_id}"
            for node_id, value in ((self.constraint.left, self.left_value), (self.constraint.right, self.right_value))
            if value is None
        ]
        if missing:
            return f"no value for {', '.join(missing)}"
        return f"{self.left_value} != {self.right_value}"


def _violation(constraint: Constraint, values: Mapping[int, int]) -> ConstraintViolation | None:
    left_value = values.get(constraint.left)
    right_value = values.get(constraint.right)
    if left_value is None or right_value is None or left_value != right_value:
        return ConstraintViolation(constraint=constraint, left_value=left_value, right_value=right_value)
    return None


def check_constraints(constraints: Iterable[Constraint], values: Mapping[int, int]) -> bool:
    """Check that every constraint holds.

    Stops at the first violation. A constraint whose nodes are missing from
    ``values`` counts as violated.

    Args:
        constraints: Constraints to check.
        values: Assignment from node id to value, typically from evaluation.

    Returns:
        True if all constraints hold, False otherwise.

    """
    return all(_violation(constraint, values) is None for constraint in constraints)


def find_violations(constraints: Iterable[Constraint], values: Mapping[int, int]) -> list[ConstraintViolation]:
    """Collect every constraint that does not hold, in assertion order."""
    return [
        violation
        for constraint in constraints
        if (violation := _violation(constraint, values)) is not None
    ]
