#!/usr/bin/env python3
"""
recordkit CLI - Versioned record simulations

Main entrypoint for the recordkit command-line tool.
"""

import typer
from typing import Optional
from rich.console import Console
from rich.table import Table

from ..logging_config import setup_logging
from .commands import simulate

# Initialize Typer app
app = typer.Typer(
    name="recordkit",
    help="Versioned record simulations",
    add_completion=False,
)

console = Console()

app.command(name="simulate")(simulate.simulate_command)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override RECORDKIT_LOG_LEVEL"
    ),
):
    """Configure logging before any command runs."""
    setup_logging(level=log_level)


@app.command()
def version():
    """Show version information."""
    from . import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]recordkit[/bold]", f"v{__version__}")
    table.add_row("Ids", "temporary < 0, permanent from backing store")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
