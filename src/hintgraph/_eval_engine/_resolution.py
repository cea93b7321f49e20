"""Value resolution utilities for the evaluation engine."""

import logging
import operator
from collections.abc import Iterable, Mapping

from hintgraph._errors import HintEvaluationError
from hintgraph._ir import HintNode
from hintgraph._uint32 import truncate

logger = logging.getLogger(__name__)


def collect_dependency_values(
    dependencies: Iterable[int],
    values: Mapping[int, int],
) -> dict[int, int] | None:
    """Gather the values of ``dependencies`` from the working assignment.

    Args:
        dependencies: Node ids to look up.
        values: Values computed so far.

    Returns:
        A new mapping from each dependency id to its value, or ``None`` if any
        dependency has no value yet.

    """
    collected: dict[int, int] = {}
    for dep in dependencies:
        if dep not in values:
            return None
        collected[dep] = values[dep]
    return collected


def run_hint(node: HintNode, dependency_values: dict[int, int]) -> int:
    """Invoke a hint's computation and bring its result into the uint32 domain.

    The hint only sees its declared dependencies. Reading any other id is a
    mistake in the hint that this layer does not detect beyond whatever the
    hint itself does with the missing key.

    Raises:
        HintEvaluationError: If the computation raises, or returns something
            that is not an integer.

    """
    logger.debug("Calling hint %d with %r", node.id, dependency_values)
    try:
        result = node.compute_fn(dependency_values)
    except Exception as e:  # noqa: BLE001
        # Hints are arbitrary user code, including I/O.
        raise HintEvaluationError(node.id, f"{type(e).__name__}: {e}") from e

    try:
        value = operator.index(result)
    except TypeError as e:
        raise HintEvaluationError(node.id, f"returned {type(result).__name__}, expected int") from e

    return truncate(value)
