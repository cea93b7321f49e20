"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from hintgraph._errors import ConfigError
from hintgraph._eval_engine import EvaluationStrategy

__all__ = [
    "CircuitSource",
    "ConfigError",
    "HintGraphConfig",
    "ModuleSource",
    "ScriptSource",
    "find_pyproject_toml",
    "get_config",
    "load_config",
]


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """Script path with optional variable name."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """Module path with variable name (e.g., 'examples.division:circuit')."""

    module_path: str


CircuitSource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class HintGraphConfig:
    """Configuration loaded from the ``[tool.hintgraph]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    circuit: CircuitSource | None = None
    input: Path | None = None
    output: Path | None = None
    strategy: EvaluationStrategy | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir if start_dir is not None else Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _resolve_path(value: object, key: str, project_root: Path) -> Path:
    if not isinstance(value, str):
        msg = f"Invalid [tool.hintgraph].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    return path if path.is_absolute() else project_root / path


def _parse_circuit_source(value: object, project_root: Path) -> CircuitSource:
    """Parse the circuit field from config.

    Args:
        value: The raw value from TOML (string or table)
        project_root: Project root directory for resolving relative paths

    Returns:
        Parsed CircuitSource

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        return ModuleSource(module_path=value)

    if isinstance(value, dict):
        table = cast("dict[str, object]", value)
        if "script" not in table:
            msg = "Invalid [tool.hintgraph].circuit configuration. Expected string or table with 'script' key."
            raise ConfigError(msg)

        name = table.get("name")
        if name is not None and not isinstance(name, str):
            msg = "Invalid [tool.hintgraph].circuit.name: expected string"
            raise ConfigError(msg)

        return ScriptSource(script=_resolve_path(table["script"], "circuit.script", project_root), name=name)

    msg = "Invalid [tool.hintgraph].circuit configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def _parse_strategy(value: object) -> EvaluationStrategy:
    try:
        return EvaluationStrategy(cast("str", value))
    except ValueError:
        choices = ", ".join(f"'{s}'" for s in EvaluationStrategy)
        msg = f"Invalid [tool.hintgraph].strategy {value!r}: expected one of {choices}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> HintGraphConfig:
    """Load and validate [tool.hintgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed HintGraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section: dict[str, Any] = data.get("tool", {}).get("hintgraph", {})
    if not section:
        return HintGraphConfig(project_root=project_root)

    return HintGraphConfig(
        circuit=_parse_circuit_source(section["circuit"], project_root) if "circuit" in section else None,
        input=_resolve_path(section["input"], "input", project_root) if "input" in section else None,
        output=_resolve_path(section["output"], "output", project_root) if "output" in section else None,
        strategy=_parse_strategy(section["strategy"]) if "strategy" in section else None,
        project_root=project_root,
    )


def get_config() -> HintGraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        HintGraphConfig (may be empty if no pyproject.toml or no [tool.hintgraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return HintGraphConfig()
    return load_config(pyproject_path)
