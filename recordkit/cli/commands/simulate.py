"""
Simulate command: run a record script and report the outcome
"""

import json
import typer
from rich.console import Console
from rich.table import Table
from pydantic import ValidationError

from ...core import RecordError
from ...core.canonical import canonical_json_str
from ..script import ScriptError, Simulation, load_script

console = Console()


def simulate_command(
    script_path: str = typer.Argument(..., help="Path to JSON script"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Run a script of create/merge steps and show each record's live version.

    Examples:
        recordkit simulate profile.json
        recordkit simulate profile.json --json
    """
    try:
        sim = Simulation(load_script(script_path)).run()
    except FileNotFoundError:
        _fail(json_output, "Script file not found", script_path)
    except ValidationError as e:
        _fail(json_output, f"Invalid script: {e.error_count()} error(s)", script_path)
    except (ScriptError, RecordError, TypeError) as e:
        _fail(json_output, str(e), script_path)

    rows = sim.summary()
    events = [{"event": f.event, "ref": f.ref, "id": f.record_id} for f in sim.fired]

    if json_output:
        print(canonical_json_str({"records": rows, "events": events}))
        raise typer.Exit(0)

    table = Table(title="Records")
    table.add_column("Ref", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Id", style="yellow")
    table.add_column("New")
    table.add_column("Ready")
    table.add_column("Plain", style="dim")
    for row in rows:
        table.add_row(
            row["ref"],
            row["kind"],
            str(row["id"]),
            "yes" if row["new"] else "no",
            "yes" if row["can_be_created"] else "no",
            json.dumps(row["plain"], sort_keys=True),
        )
    console.print(table)

    if events:
        fired = Table(title="Fired Events")
        fired.add_column("#", justify="right")
        fired.add_column("Event", style="green")
        fired.add_column("Ref", style="cyan")
        fired.add_column("Id", style="yellow")
        for idx, ev in enumerate(events):
            fired.add_row(str(idx), ev["event"], ev["ref"], str(ev["id"]))
        console.print(fired)
    else:
        console.print("[yellow]No events fired[/yellow]")


def _fail(json_output: bool, message: str, path: str) -> None:
    if json_output:
        print(json.dumps({"error": message, "path": path}))
    else:
        console.print(f"[red]✗ {message}[/red] ({path})")
    raise typer.Exit(1)
