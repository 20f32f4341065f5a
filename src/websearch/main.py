"""Main entry point for the websearch CLI.

This module provides the command-line interface using Click. Results are
printed as JSON; logs go to stderr.
"""

import asyncio
import sys
from typing import Any

import click
from rich import box
from rich.console import Console
from rich.table import Table

from websearch import __version__
from websearch.config import get_settings
from websearch.logging import setup_logging
from websearch.models import MAX_RESULTS_LIMIT
from websearch.service import get_service
from websearch.tools import ToolResult, build_default_registry

console = Console()
error_console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    settings = get_settings()
    level = "DEBUG" if debug else settings.effective_log_level
    setup_logging(level=level, log_file=settings.log_file)


def _print_result(result: ToolResult) -> None:
    """Print a tool result as JSON, or the error and exit non-zero."""
    if not result.success:
        error_console.print(f"[red bold]Error:[/red bold] {result.error}")
        sys.exit(1)
    console.print_json(data=result.data)


def _run_tool(name: str, params: dict[str, Any]) -> ToolResult:
    registry = build_default_registry(get_service())
    return asyncio.run(registry.call(name, params))


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Enable debug mode (very detailed logging)")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """websearch - search the web and extract page content."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    _configure_logging(debug)


@cli.command()
@click.argument("query")
@click.option(
    "--max-results", "-n",
    type=click.IntRange(1, MAX_RESULTS_LIMIT),
    default=None,
    help="Maximum number of results",
)
@click.option(
    "--date-filter", "-t",
    type=click.Choice(["d", "w", "m", "y"]),
    default=None,
    help="Only results from the last day/week/month/year",
)
def search(query: str, max_results: int | None, date_filter: str | None):
    """Search the web for QUERY."""
    params: dict[str, Any] = {"query": query}
    if max_results is not None:
        params["max_results"] = max_results
    if date_filter is not None:
        params["date_filter"] = date_filter
    _print_result(_run_tool("web_search", params))


@cli.command()
@click.argument("url")
def fetch(url: str):
    """Fetch URL and extract its main content."""
    _print_result(_run_tool("fetch_webpage", {"url": url}))


@cli.command()
def tools():
    """List available tools and their parameters."""
    registry = build_default_registry(get_service())

    table = Table(title="Tools", box=box.ROUNDED)
    table.add_column("Name", style="cyan bold")
    table.add_column("Parameters", style="magenta")
    table.add_column("Description")

    for schema in registry.get_schemas():
        parameters = ", ".join(schema["inputSchema"].get("properties", {}))
        table.add_row(schema["name"], parameters, schema["description"])

    console.print(table)


@cli.command()
def config():
    """Show current configuration."""
    table = Table(title="Configuration", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in get_settings().model_dump_safe().items():
        table.add_row(key, str(value))

    console.print(table)
    console.print("\n[dim]Configuration loaded from:[/dim]")
    console.print("  - Environment variables (WEBSEARCH_*)")
    console.print("  - .env file (if present)")


@cli.command()
def version():
    """Show version information."""
    click.echo(f"websearch version {__version__}")


if __name__ == "__main__":
    cli()
