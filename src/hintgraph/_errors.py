"""Exception hierarchy for hintgraph."""

from collections.abc import Iterable


class HintGraphError(Exception):
    """Base class for all hintgraph errors."""


class EvaluationError(HintGraphError):
    """An evaluation call could not produce a complete assignment.

    Evaluation errors are terminal: no partial values are returned.
    """


class MissingInputError(EvaluationError):
    """One or more input nodes were not given a value."""

    def __init__(self, node_ids: Iterable[int]) -> None:
        self.node_ids: tuple[int, ...] = tuple(sorted(node_ids))
        ids = ", ".join(str(node_id) for node_id in self.node_ids)
        super().__init__(f"Missing value for input node(s): {ids}")


class UnresolvableGraphError(EvaluationError):
    """Evaluation stopped making progress while some nodes had no value.

    This indicates a structural problem: a cycle, or a node that depends on an
    id which does not exist in the graph.
    """

    def __init__(self, node_ids: Iterable[int]) -> None:
        self.node_ids: tuple[int, ...] = tuple(sorted(node_ids))
        ids = ", ".join(str(node_id) for node_id in self.node_ids)
        super().__init__(f"Unable to compute values for node(s): {ids}")


class HintEvaluationError(EvaluationError):
    """A hint computation raised or returned something other than an integer."""

    def __init__(self, node_id: int, reason: str) -> None:
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"Hint at node {node_id} failed: {reason}")


class ForeignNodeError(HintGraphError, ValueError):
    """A node handle that does not belong to the builder was used."""


class InvalidValueError(HintGraphError, ValueError):
    """A value is not an unsigned 32-bit integer."""


class ConfigError(HintGraphError):
    """Error in hintgraph configuration."""
