"""Utilities to locate circuits defined in user scripts and modules.

The path-to-module resolution follows `fastapi_cli.discover` of package `fastapi-cli` version 0.0.8 (77e6d1f).
"""

from __future__ import annotations

import importlib
import logging
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hintgraph._builder import GraphBuilder

from .config import ModuleSource, ScriptSource

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

    from .config import CircuitSource

logger = logging.getLogger(__name__)


@dataclass
class ModuleData:
    """Module data for a Python module."""

    module_import_str: str
    extra_sys_path: Path
    module_paths: list[Path]


def get_module_data_from_path(path: Path) -> ModuleData:
    """Get module data from a file path.

    Args:
        path: Path to a Python file or package

    Returns:
        ModuleData containing module import information

    """
    use_path = path.resolve()
    module_path = use_path
    if use_path.is_file() and use_path.stem == "__init__":
        module_path = use_path.parent
    module_paths = [module_path]
    extra_sys_path = module_path.parent
    for parent in module_path.parents:
        if (parent / "__init__.py").is_file():
            module_paths.insert(0, parent)
            extra_sys_path = parent.parent
        else:
            break

    return ModuleData(
        module_import_str=".".join(p.stem for p in module_paths),
        extra_sys_path=extra_sys_path.resolve(),
        module_paths=module_paths,
    )


def _get_circuit(module: ModuleType, module_name: str, circuit_name: str) -> GraphBuilder:
    if not hasattr(module, circuit_name):
        msg = f"Could not find circuit '{circuit_name}' in {module_name}"
        raise ValueError(msg)
    circuit = getattr(module, circuit_name)
    if not isinstance(circuit, GraphBuilder):
        msg = f"'{circuit_name}' in {module_name} is not a GraphBuilder instance"
        raise TypeError(msg)
    return circuit


def load_circuit_from_script(script_path: Path, circuit_name: str | None = None) -> GraphBuilder:
    """Load a circuit from a Python script path.

    Args:
        script_path: Path to the Python script defining the circuit
        circuit_name: Name of the circuit variable. If None, the script must define exactly one GraphBuilder

    Returns:
        The loaded GraphBuilder

    Raises:
        FileNotFoundError: If the script does not exist
        ImportError: If the module cannot be imported
        ValueError: If the named variable doesn't exist, or without a name, if the
            script defines no circuit or more than one
        TypeError: If the named variable is not a GraphBuilder

    """
    if not script_path.is_file():
        msg = f"Circuit script not found: {script_path}"
        raise FileNotFoundError(msg)

    module_data = get_module_data_from_path(script_path)
    sys.path.insert(0, str(module_data.extra_sys_path))

    try:
        module = importlib.import_module(module_data.module_import_str)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    if circuit_name:
        return _get_circuit(module, module_data.module_import_str, circuit_name)
    return _find_single_circuit(module, module_data.module_import_str)


def _find_single_circuit(module: ModuleType, module_name: str) -> GraphBuilder:
    # Aliases of one builder count once.
    found: dict[int, tuple[str, GraphBuilder]] = {}
    for name in dir(module):
        obj = getattr(module, name)
        if isinstance(obj, GraphBuilder):
            found.setdefault(id(obj), (name, obj))

    match list(found.values()):
        case []:
            msg = f"Could not find a GraphBuilder in {module_name}"
            raise ValueError(msg)
        case [(name, circuit)]:
            logger.debug("Found circuit: %s", name)
            return circuit
        case several:
            names = ", ".join(name for name, _ in several)
            msg = f"Found several circuits in {module_name} ({names}), choose one with --circuit"
            raise ValueError(msg)


def load_circuit_from_module_path(module_path: str) -> GraphBuilder:
    """Load a circuit from a module path (e.g., 'examples.division:circuit').

    With an empty variable name ('examples.division:') the module must define
    exactly one GraphBuilder.

    Raises:
        ValueError: If the module path format is invalid, or no single circuit is found
        TypeError: If the named variable is not a GraphBuilder

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, circuit_name = module_path.split(":", 1)
    module = importlib.import_module(module_name)
    if not circuit_name:
        return _find_single_circuit(module, f"module '{module_name}'")
    return _get_circuit(module, f"module '{module_name}'", circuit_name)


def load_circuit_from_source(source: CircuitSource, circuit_name: str | None = None) -> GraphBuilder:
    """Load a circuit from a configured source.

    ``circuit_name`` overrides the variable name of a script source.
    """
    match source:
        case ScriptSource(script=script, name=name):
            return load_circuit_from_script(script, circuit_name or name)
        case ModuleSource(module_path=module_path):
            return load_circuit_from_module_path(module_path)
