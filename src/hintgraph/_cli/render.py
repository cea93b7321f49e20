"""Rich rendering utilities for circuit commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from hintgraph._ir import AddNode, ConstantNode, HintNode, InputNode, MulNode, NodeKind

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from hintgraph._builder import GraphBuilder
    from hintgraph._eval_engine import ConstraintViolation
    from hintgraph._ir import Node, NodeID


def _name(builder: GraphBuilder, node_id: NodeID) -> str:
    return escape(builder.display_name(node_id))


def describe_node(builder: GraphBuilder, node: Node) -> str:
    """Describe the operation a node performs, using labels where available."""
    match node:
        case InputNode():
            return "input"
        case ConstantNode(value=value):
            return str(value)
        case AddNode(left=left, right=right):
            return f"{_name(builder, left)} + {_name(builder, right)}"
        case MulNode(left=left, right=right):
            return f"{_name(builder, left)} * {_name(builder, right)}"
        case HintNode(dependencies=dependencies):
            return f"hint({', '.join(_name(builder, dep) for dep in dependencies)})"
        case _:
            assert_never(node)


def render_node_table(
    builder: GraphBuilder,
    console: Console,
    values: Mapping[NodeID, int] | None = None,
) -> None:
    """Render the nodes of a circuit as a Rich table.

    Args:
        builder: Circuit to render.
        console: Rich Console to output to.
        values: Evaluated values to show alongside each node, if any.

    """
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Label", style="bold")
    table.add_column("Kind")
    table.add_column("Expression")
    if values is not None:
        table.add_column("Value", justify="right", style="yellow")

    for node in builder.nodes:
        kind_style = _get_kind_style(node.kind)
        row = [
            str(node.id),
            escape(builder.label_of(node) or ""),
            f"[{kind_style}]{node.kind.upper()}[/{kind_style}]",
            describe_node(builder, node),
        ]
        if values is not None:
            row.append(str(values[node.id]) if node.id in values else "[dim]-[/dim]")
        table.add_row(*row)

    console.print(table)
    console.print(f"\n[dim]Total: {len(builder)} nodes, {len(builder.constraints)} constraints[/dim]")


def render_constraint_table(
    builder: GraphBuilder,
    violations: list[ConstraintViolation],
    console: Console,
) -> None:
    """Render every constraint with its pass/fail status in a panel."""
    if not builder.constraints:
        console.print("[dim]No constraints asserted[/dim]")
        return

    failed = {id(v.constraint): v for v in violations}

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Constraint", style="dim")
    table.add_column("Result")

    for constraint in builder.constraints:
        text = f"{_name(builder, constraint.left)} == {_name(builder, constraint.right)}"
        violation = failed.get(id(constraint))
        if violation is None:
            table.add_row(text, "[green]✓ PASS[/green]")
        else:
            table.add_row(text, f"[red]✗ FAIL[/red] [dim]({escape(violation.reason)})[/dim]")

    console.print(Panel(table, title="[bold]Constraint Results[/bold]", border_style="cyan"))


def render_node_detail(builder: GraphBuilder, node: Node, console: Console) -> None:
    """Render a node and the tree of nodes its value is computed from."""
    kind_style = _get_kind_style(node.kind)
    console.print(f"[bold]Node:[/bold] {_name(builder, node.id)}")
    console.print(f"[cyan]Kind:[/cyan]       [{kind_style}]{node.kind.upper()}[/{kind_style}]")
    console.print(f"[cyan]Expression:[/cyan] {describe_node(builder, node)}")

    graph = builder.dependency_graph()
    dependents = sorted(graph.successors(node.id))
    if dependents:
        console.print(f"[cyan]Dependents:[/cyan] {', '.join(_name(builder, dep) for dep in dependents)}")
    else:
        console.print("[cyan]Dependents:[/cyan] [dim]None[/dim]")
    console.print()

    rich_tree = Tree(f"[bold]{_name(builder, node.id)}[/bold]")
    _add_tree_children(builder, rich_tree, node, set())
    console.print(rich_tree)


def _add_tree_children(builder: GraphBuilder, parent: Tree, node: Node, seen: set[NodeID]) -> None:
    # Shared sub-expressions are expanded once; later occurrences are marked.
    for dep_id in node.dependencies:
        dep = builder.get_node(dep_id)
        label = f"{_name(builder, dep_id)} [dim]{dep.kind}[/dim]"
        if dep_id in seen:
            parent.add(f"{label} [dim](see above)[/dim]")
            continue
        seen.add(dep_id)
        _add_tree_children(builder, parent.add(label), dep, seen)


def _get_kind_style(kind: NodeKind) -> str:
    match kind:
        case NodeKind.INPUT:
            return "blue"
        case NodeKind.CONSTANT:
            return "white"
        case NodeKind.ADD | NodeKind.MUL:
            return "green"
        case NodeKind.HINT:
            return "yellow"
