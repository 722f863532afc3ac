"""Emergence regime CLI commands.

Read-only helpers for hosts that script the regime overlay. Dwell state is
kept in a JSON file the caller passes back on the next call.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from mirrorline.emergence import (
    RegimeDwellState,
    detect_emergence_regime,
    dwell_seconds,
    track_regime_dwell_time,
)

console = Console()
err_console = Console(stderr=True)
emergence_app = typer.Typer(help="Emergence regime and dwell time commands")


@emergence_app.command("regime")
def regime(
    count: int = typer.Argument(..., help="Active meaning node count"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Classify an active meaning node count."""
    result = detect_emergence_regime(count)
    if output_json:
        typer.echo(json.dumps({"count": count, "regime": result.value}))
    else:
        typer.echo(result.value)


@emergence_app.command("dwell")
def dwell(
    count: int = typer.Option(..., "--count", help="Active meaning node count"),
    session_start: datetime = typer.Option(..., "--session-start", help="Session start (ISO datetime)"),
    current_time: Optional[datetime] = typer.Option(
        None, "--at", help="Observation time (defaults to now)"
    ),
    state_file: Optional[Path] = typer.Option(
        None, "--state", help="Dwell state file, read if present and rewritten"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Advance the dwell state for a session.

    Examples:
        mirrorline emergence dwell --count 3 --session-start 2025-01-06T09:00:00 --state dwell.json
    """
    previous: Optional[RegimeDwellState] = None
    if state_file is not None and state_file.exists():
        try:
            previous = RegimeDwellState.model_validate_json(state_file.read_text())
        except ValidationError as e:
            err_console.print(f"Invalid dwell state in {state_file}: {e.error_count()} error(s)", markup=False)
            raise typer.Exit(code=1)

    state = track_regime_dwell_time(
        detect_emergence_regime(count),
        session_start,
        current_time or datetime.now(),
        previous,
    )

    if state_file is not None:
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(state.model_dump_json(indent=2))

    if output_json:
        typer.echo(state.model_dump_json(indent=2))
        return

    console.print(f"Regime: [bold]{state.current_regime.value}[/bold]")
    console.print(f"Dwell: {dwell_seconds(state):g}s since {state.entry_timestamp.isoformat()}")
