"""
ProxyShield CLI

Command-line helpers for exploring the interception layer.
"""

import ast

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from proxyshield import __version__
from proxyshield.config import configure_logging
from proxyshield.normalize.categories import classify
from proxyshield.normalize.cleanser import clense
from proxyshield.normalize.resolver import resolve
from proxyshield.shield.raw_access import own_keys, raw_get, raw_set
from proxyshield.shield.tracing import trace

app = typer.Typer(
    name="proxyshield",
    help="Hook-free property interception layer",
    add_completion=False,
)

console = Console()


class DemoTarget:
    """Foreign object whose string form is empty."""

    def __str__(self) -> str:
        return ""


@app.callback()
def main():
    """Configure logging before any command runs."""
    configure_logging()


@app.command()
def demo():
    """
    Trace writes through a logging proxy, then write silently.

    Three writes go through a naive logging policy; a fourth uses
    raw_set on the proxy and is never traced.
    """
    target = DemoTarget()
    proxy, tracer = trace(target)

    proxy.a = 1
    proxy.a = 2
    proxy.a = 3
    raw_set(proxy, "asd", 4)

    table = Table(title="Traced Operations")
    table.add_column("#", style="dim")
    table.add_column("Operation", style="cyan")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("OK")

    for index, event in enumerate(tracer.events, start=1):
        table.add_row(
            str(index),
            event.event.value,
            event.key,
            event.value or "-",
            "[green]✓[/green]" if event.success else "[red]✗[/red]",
        )

    console.print(table)
    console.print(Panel.fit(
        f"Own keys: [cyan]{escape(repr(own_keys(target)))}[/cyan]\n"
        f"a = {raw_get(target, 'a')!r}\n"
        f"asd = {raw_get(target, 'asd')!r} [dim](silent raw write)[/dim]\n"
        f"Traced operations: {tracer.stats['operation_count']}",
        title="Target State"
    ))


@app.command()
def inspect(
    value: str = typer.Argument(..., help="Python literal, e.g. 42, 'abc', {'a': 1}"),
):
    """Classify a literal and show its template and cleansed form."""
    try:
        parsed = ast.literal_eval(value)
    except (ValueError, SyntaxError) as e:
        console.print(f"[red]✗ Not a Python literal: {e}[/red]")
        raise typer.Exit(1)

    template = resolve(parsed)
    table = Table(title="Primitive Template")
    table.add_column("Input")
    table.add_column("Category", style="cyan")
    table.add_column("Template")
    table.add_column("Cleansed")

    cleansed = "-" if template is None else repr(clense(parsed))
    table.add_row(
        escape(repr(parsed)),
        classify(parsed).value,
        escape(repr(template)),
        escape(cleansed),
    )
    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"ProxyShield v{__version__}")


if __name__ == "__main__":
    app()
