from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import TypeAdapter, ValidationError

from ._errors import InvalidValueError
from ._ir import NodeKind
from ._uint32 import UInt32

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._builder import GraphBuilder
    from ._eval_engine import ConstraintViolation
    from ._ir import Node, NodeID

logger = logging.getLogger(__name__)

_INPUT_TABLE: TypeAdapter[dict[str, int]] = TypeAdapter(dict[str, UInt32])


def resolve_key(builder: GraphBuilder, key: str) -> Node:
    """Resolve an input table key.

    A key is a node label, or a node id written as ``%<id>`` or as a bare decimal.
    Labels win over bare decimals; ``%<id>`` always means an id, since no label
    may start with ``%``.
    """
    try:
        return builder.lookup(key)
    except KeyError:
        digits = key.removeprefix("%")
        if digits.isdecimal():
            try:
                return builder.get_node(int(digits))
            except KeyError:
                pass
    msg = f"Key '{key}' does not name a node in graph '{builder.name}'"
    raise InvalidValueError(msg)


def parse_inputs(builder: GraphBuilder, table: Mapping[str, Any]) -> dict[NodeID, int]:
    """Convert an ``{label_or_id: value}`` table into evaluator inputs.

    Entries naming nodes that are not inputs are skipped with a warning.

    Raises:
        InvalidValueError: If a key names no node, or a value is not a uint32.

    """
    try:
        validated = _INPUT_TABLE.validate_python(dict(table))
    except ValidationError as e:
        msg = f"Invalid input values: {e}"
        raise InvalidValueError(msg) from e

    inputs: dict[NodeID, int] = {}
    for key, value in validated.items():
        node = resolve_key(builder, key)
        if node.kind != NodeKind.INPUT:
            logger.warning("Ignoring value for '%s': node %d is a %s node, not an input", key, node.id, node.kind)
            continue
        inputs[node.id] = value
    return inputs


def load_inputs_from_toml(builder: GraphBuilder, path: Path) -> dict[NodeID, int]:
    """Load evaluator inputs from the ``[inputs]`` table of a TOML file.

    Example file:

        [inputs]
        a = 15      # by label
        "3" = 7     # by node id

    Raises:
        InvalidValueError: If the file has no ``[inputs]`` table, or an entry is invalid.

    """
    with path.open("rb") as f:
        data = tomllib.load(f)

    table = data.get("inputs")
    if not isinstance(table, dict):
        msg = f"{path} has no [inputs] table"
        raise InvalidValueError(msg)

    inputs = parse_inputs(builder, table)
    logger.debug("Loaded %d input value(s) from %s", len(inputs), path)
    return inputs


def input_template(builder: GraphBuilder, default: int = 0) -> dict[str, Any]:
    """Build an ``[inputs]`` document with one entry per input node.

    Unlabelled inputs are keyed ``%<id>`` so the document reads back unchanged.
    """
    return {
        "inputs": {builder.display_name(node.id): default for node in builder.input_nodes()},
    }


def values_document(
    builder: GraphBuilder,
    values: Mapping[NodeID, int],
    violations: list[ConstraintViolation] | None = None,
) -> dict[str, Any]:
    """Build a TOML-ready document of computed values and constraint status."""
    document: dict[str, Any] = {
        "values": {builder.display_name(node_id): value for node_id, value in values.items()},
    }
    if violations is not None:
        document["constraints"] = {
            "total": len(builder.constraints),
            "satisfied": not violations,
            "violations": [
                f"{builder.display_name(v.constraint.left)} == {builder.display_name(v.constraint.right)}: {v.reason}"
                for v in violations
            ],
        }
    return document


def export_values_to_toml(
    builder: GraphBuilder,
    values: Mapping[NodeID, int],
    path: Path,
    violations: list[ConstraintViolation] | None = None,
) -> None:
    """Write computed values (and optionally constraint status) to a TOML file."""
    document = values_document(builder, values, violations)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(document, f)
    logger.debug("Exported %d value(s) to %s", len(values), path)
