"""
Console summary of a synthesis run.

Renders declarations, response aliases, per-operation references and
warnings with rich tables and panels.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.type_table import Origin
from .engine import SynthesisResult

_ORIGIN_STYLES = {
    Origin.COMPONENT: "green",
    Origin.NESTED_EXTRACTION: "cyan",
    Origin.RESPONSE_EXTRACTION: "magenta",
}


def declarations_table(result: SynthesisResult, show_validators: bool = False) -> Table:
    table = Table(
        title="📋 Declarations", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Origin")
    table.add_column("Type")
    if show_validators:
        table.add_column("Validator", style="dim")

    for declaration in result.declarations:
        style = _ORIGIN_STYLES.get(declaration.origin, "white")
        row = [
            escape(declaration.name),
            f"[{style}]{declaration.origin.value}[/{style}]",
            escape(declaration.type.render()),
        ]
        if show_validators:
            row.append(escape(declaration.validator.render()))
        table.add_row(*row)

    return table


def aliases_table(result: SynthesisResult) -> Table:
    table = Table(title="🔗 Response Aliases", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Alias", style="bold")
    table.add_column("Target", style="green")
    table.add_column("Operation", style="dim")

    for alias in result.aliases:
        table.add_row(escape(alias.name), escape(alias.target_expression), escape(alias.operation))
    return table


def operations_table(result: SynthesisResult) -> Table:
    table = Table(title="🧭 Operations", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Operation", style="bold")
    table.add_column("Endpoint", style="dim")
    table.add_column("Request Body")
    table.add_column("Response", style="green")

    for name, refs in result.operations.items():
        body = refs.request_body.render() if refs.request_body is not None else "-"
        response = refs.response.render() if refs.response is not None else "-"
        table.add_row(
            escape(name),
            escape(f"{refs.method} {refs.path}"),
            escape(body),
            escape(response),
        )
    return table


def print_synthesis_report(
    result: SynthesisResult,
    console: Optional[Console] = None,
    show_validators: bool = False,
    show_operations: bool = False,
) -> None:
    """
    Print a summary of a synthesis run.

    Args:
        result: Output of a synthesis run
        console: Target console (a new stdout console if omitted)
        show_validators: Add a validator column to the declarations table
        show_operations: Also list per-operation references
    """
    console = console or Console()

    if not result.success:
        console.print(f"[red]✗ Synthesis failed:[/red] {escape(result.error_message or '')}")
        if result.exception:
            console.print(f"[dim]Details: {escape(str(result.exception))}[/dim]")
        return

    meta = result.metadata
    console.print(
        Panel(
            f"[bold]Operations:[/bold] {meta.get('operation_count', len(result.operations))}\n"
            f"[bold]Declarations:[/bold] {len(result.declarations)}\n"
            f"[bold]Aliases:[/bold] {len(result.aliases)}\n"
            f"[bold]Warnings:[/bold] {len(result.warnings)}",
            title="📊 Synthesis Summary",
            border_style="blue",
        )
    )

    if result.declarations:
        console.print()
        console.print(declarations_table(result, show_validators))

    if result.aliases:
        console.print()
        console.print(aliases_table(result))

    if show_operations and result.operations:
        console.print()
        console.print(operations_table(result))

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {escape(str(warning))}")
        console.print()
