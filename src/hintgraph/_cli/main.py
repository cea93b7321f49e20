import logging
from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from hintgraph._builder import GraphBuilder
from hintgraph._errors import HintGraphError
from hintgraph._eval_engine import EvaluationStrategy
from hintgraph._io import export_values_to_toml, input_template, load_inputs_from_toml, resolve_key
from hintgraph._uint32 import UINT32_MAX

from .config import ConfigError, HintGraphConfig, get_config
from .discover import load_circuit_from_module_path, load_circuit_from_script, load_circuit_from_source
from .render import render_constraint_table, render_node_detail, render_node_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

PathArgument = Annotated[
    str | None,
    typer.Argument(help="Path to Python script or module path (e.g., examples.division:circuit)"),
]
CircuitOption = Annotated[
    str | None,
    typer.Option("--circuit", help="Name of the circuit variable (for script paths only)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Hintgraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
        force=True,
    )


def _get_config() -> HintGraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_circuit(path: str | None, config: HintGraphConfig, circuit_var: str | None = None) -> GraphBuilder:
    """Load a circuit from the CLI path, falling back to ``[tool.hintgraph].circuit``."""
    if path is None and config.circuit is None:
        msg = "No circuit specified. Provide a path argument or set tool.hintgraph.circuit in pyproject.toml."
        raise typer.BadParameter(msg)

    try:
        if path is None:
            err_console.print("[cyan]Loading circuit from \\[tool.hintgraph] configuration[/cyan]")
            circuit = load_circuit_from_source(config.circuit, circuit_var)
        elif ":" in path:
            err_console.print(f"[cyan]Loading circuit from module:[/cyan] {path}")
            circuit = load_circuit_from_module_path(path)
        else:
            script_path = Path(path)
            err_console.print(f"[cyan]Loading circuit from script:[/cyan] {script_path}")
            circuit = load_circuit_from_script(script_path, circuit_var)
    except (OSError, ImportError, ValueError, TypeError) as e:
        raise _fail(e) from e

    err_console.print(f"[cyan]Circuit:[/cyan] [bold]{escape(circuit.name)}[/bold]")
    logger.debug("Circuit %s has %d nodes and %d constraints", circuit.name, len(circuit), len(circuit.constraints))
    return circuit


def _fail(error: Exception) -> typer.Exit:
    err_console.print(f"[red]✗ {escape(str(error))}[/red]")
    return typer.Exit(code=1)


@app.command(name="eval")
def eval_command(  # noqa: PLR0913
    path: PathArgument = None,
    *,
    input: Annotated[  # noqa: A002
        Path | None,
        typer.Option("-i", "--input", help="Path to input TOML file with an inputs table"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = None,
    circuit_var: CircuitOption = None,
    strategy: Annotated[
        EvaluationStrategy | None,
        typer.Option("--strategy", help="Order in which nodes are resolved"),
    ] = None,
    check: Annotated[
        bool,
        typer.Option("--check", help="Check that all constraints hold (exit non-zero if any fail)"),
    ] = False,
) -> None:
    """Evaluate a circuit from input values and report its constraints."""
    err_console.print()
    config = _get_config()
    circuit = _load_circuit(path, config, circuit_var)

    input_path = input if input is not None else config.input
    output_path = output if output is not None else config.output
    effective_strategy = strategy or config.strategy or EvaluationStrategy.TOPOLOGICAL

    try:
        if input_path is None:
            err_console.print("[dim]No input file given; evaluating with no input values[/dim]")
            inputs = {}
        else:
            if not input_path.exists():
                err_console.print(f"[red]Error: Input file not found: {input_path}[/red]")
                raise typer.Exit(code=1)
            err_console.print(f"[cyan]Loading input from:[/cyan] {input_path}")
            inputs = load_inputs_from_toml(circuit, input_path)

        err_console.print(f"[cyan]Evaluating circuit ({effective_strategy} strategy)...[/cyan]")
        result = circuit.evaluate(inputs, strategy=effective_strategy)
    except HintGraphError as e:
        raise _fail(e) from e
    err_console.print()

    render_node_table(circuit, out_console, result.values)
    err_console.print()

    render_constraint_table(circuit, result.violations, err_console)
    err_console.print()

    if output_path is not None:
        err_console.print(f"[cyan]Exporting results to:[/cyan] {output_path}")
        export_values_to_toml(circuit, result.values, output_path, result.violations)
        err_console.print()

    if check and not result.satisfied:
        err_console.print(f"[red]✗ {len(result.violations)} constraint(s) failed[/red]")
        err_console.print()
        raise typer.Exit(code=1)

    err_console.print("[green]✓ Evaluation complete[/green]")
    err_console.print()


@app.command()
def show(
    path: PathArgument = None,
    *,
    node: Annotated[
        str | None,
        typer.Option("--node", help="Label or id of a node to show with its dependency tree"),
    ] = None,
    circuit_var: CircuitOption = None,
) -> None:
    """Show the nodes and constraints of a circuit without evaluating it."""
    err_console.print()
    circuit = _load_circuit(path, _get_config(), circuit_var)
    err_console.print()

    if node is not None:
        try:
            target = resolve_key(circuit, node)
        except HintGraphError as e:
            raise _fail(e) from e
        render_node_detail(circuit, target, out_console)
        return

    for problem in circuit.dependency_graph().validate():
        err_console.print(f"[yellow]⚠ {escape(problem)}[/yellow]")
    render_node_table(circuit, out_console)


@app.command()
def init(
    path: PathArgument = None,
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ],
    circuit_var: CircuitOption = None,
    default: Annotated[
        int,
        typer.Option("--default", min=0, max=UINT32_MAX, help="Value written for every input"),
    ] = 0,
) -> None:
    """Generate an input TOML file with one entry per input node."""
    err_console.print()
    circuit = _load_circuit(path, _get_config(), circuit_var)
    err_console.print()

    document = input_template(circuit, default)
    err_console.print(f"[cyan]Writing {len(document['inputs'])} input(s) to:[/cyan] {output}")
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("wb") as f:
        tomli_w.dump(document, f)

    err_console.print()
    err_console.print("[green]✓ Input file created[/green]")
    err_console.print()


def main() -> None:
    app()
