"""Insight engine CLI commands.

Provides commands for:
- Computing a horizon artifact from an events file
- Checking a card against the insight contract
- Narrating the time distribution of reflections

Events files hold a JSON list of event records, or an object with an
``events`` list. Entry text is never printed.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from datetime import timezone as dt_timezone
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mirrorline.configuration.settings import DEFAULT_CONFIG_PATH, Settings, resolve_settings
from mirrorline.distributions import (
    build_distribution_from_reflections,
    classify_distribution,
    generate_distribution_insight,
    generate_narrative,
    inspect_distribution,
)
from mirrorline.distributions.narratives import resolve_scope
from mirrorline.errors import MirrorlineError
from mirrorline.errors.user_messages import format_error_for_cli
from mirrorline.insights.adapters import coerce_events, events_to_reflection_entries
from mirrorline.insights.contract import validate_insight_detailed
from mirrorline.insights.engine import compute_insights_for_window
from mirrorline.insights.time_windows import current_week, normalize_datetime, utc_now
from mirrorline.insights.types import InsightArtifact, InsightCard

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)
insights_app = typer.Typer(help="Insight cards, narratives and distributions")


def _fail(error: MirrorlineError) -> None:
    err_console.print(format_error_for_cli(error), markup=False)
    raise typer.Exit(code=1)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        err_console.print(f"Cannot read {path}: {e}", markup=False)
        raise typer.Exit(code=1)


def _read_events(path: Path) -> List[Any]:
    payload = _read_json(path)
    if isinstance(payload, dict):
        payload = payload.get("events", [])
    if not isinstance(payload, list):
        err_console.print(f"{path} must contain a list of events", markup=False)
        raise typer.Exit(code=1)
    return payload


def _settings(config_path: Path) -> Settings:
    try:
        return resolve_settings(config_path)
    except MirrorlineError as e:
        _fail(e)


def _print_artifact(artifact: InsightArtifact) -> None:
    console.print(
        f"[bold]{artifact.horizon.value.title()} insights[/bold] "
        f"{artifact.window.label}"
    )

    if artifact.cards:
        table = Table(title="Cards")
        table.add_column("Kind", style="cyan")
        table.add_column("Title")
        table.add_column("Evidence", justify="right")
        for card in artifact.cards:
            table.add_row(card.kind.value, card.title, str(len(card.evidence)))
        console.print(table)
    else:
        console.print("[dim]No cards for this window[/dim]")

    for narrative in artifact.narratives or []:
        console.print(f"\n[bold green]{narrative.title}[/bold green] [dim]({narrative.delta_type.value})[/dim]")
        console.print(narrative.body)
        for item in narrative.evidence:
            console.print(f"  • {item.label}")

    debug = artifact.debug
    if debug is not None:
        console.print(
            f"\n[dim]{debug.event_count} events, {debug.entries_in_window} in window, "
            f"{len(debug.rejected_cards)} cards rejected[/dim]"
        )
        if debug.narrative_error:
            console.print(f"[yellow]Narratives skipped: {debug.narrative_error}[/yellow]")


@insights_app.command("compute")
def compute(
    events_file: Path = typer.Argument(..., help="JSON file with event records"),
    horizon: Optional[str] = typer.Option(None, "--horizon", help="weekly, summary or timeline"),
    start: Optional[str] = typer.Option(None, "--start", help="Window start (ISO date or datetime)"),
    end: Optional[str] = typer.Option(None, "--end", help="Window end (ISO date or datetime)"),
    timezone: Optional[str] = typer.Option(None, "--timezone", "--tz", help="IANA timezone"),
    snapshots_file: Optional[Path] = typer.Option(
        None, "--snapshots", help="Snapshots from a previous run"
    ),
    write_snapshots: Optional[Path] = typer.Option(
        None, "--write-snapshots", help="Write updated snapshots to this file"
    ),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    output_json: bool = typer.Option(False, "--json", help="Output artifact as JSON"),
) -> None:
    """Compute the insight artifact for a window.

    Examples:
        mirrorline insights compute events.json
        mirrorline insights compute events.json --horizon summary --start 2025-01-06 --end 2025-01-12
        mirrorline insights compute events.json --snapshots s.json --write-snapshots s.json
    """
    settings = _settings(config_path)
    tz = timezone or settings.cli.timezone
    now = utc_now()

    week = current_week(normalize_datetime(datetime.now(dt_timezone.utc), tz))
    window_start = normalize_datetime(start, tz) if start else week.start
    window_end = normalize_datetime(end, tz) if end else week.end
    # A bare end date covers the whole day
    if end and len(end.strip()) == 10:
        window_end = window_end.replace(hour=23, minute=59, second=59, microsecond=999999)

    previous = _read_json(snapshots_file) if snapshots_file and snapshots_file.exists() else []

    try:
        artifact = compute_insights_for_window(
            horizon or settings.cli.default_horizon,
            _read_events(events_file),
            window_start,
            window_end,
            timezone=tz,
            previous_snapshots=previous,
            now=now,
            config=settings.engine.to_config(),
        )
    except MirrorlineError as e:
        _fail(e)

    if write_snapshots is not None:
        snapshots = [snapshot.model_dump(mode="json") for snapshot in artifact.snapshots or []]
        write_snapshots.parent.mkdir(parents=True, exist_ok=True)
        write_snapshots.write_text(json.dumps(snapshots, indent=2))

    if output_json:
        typer.echo(artifact.model_dump_json(indent=2))
        return

    _print_artifact(artifact)
    if write_snapshots is not None:
        console.print(f"[dim]Snapshots written to {write_snapshots}[/dim]")


@insights_app.command("validate")
def validate(
    card_file: Path = typer.Argument(..., help="JSON file with one insight card"),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Check a card against the insight contract.

    Exits with status 1 when the card would be rejected.
    """
    payload = _read_json(card_file)
    if isinstance(payload, dict):
        payload.setdefault("computed_at", utc_now().isoformat())
    try:
        card = InsightCard.model_validate(payload)
    except ValidationError as e:
        err_console.print(f"Not an insight card: {e.error_count()} validation error(s)", markup=False)
        raise typer.Exit(code=1)

    result = validate_insight_detailed(card)

    if output_json:
        typer.echo(json.dumps({"id": card.id, "ok": result.ok, "reasons": result.reasons}, indent=2))
    elif result.ok:
        console.print(f"[green]✓[/green] {card.id} satisfies the insight contract")
    else:
        console.print(f"[red]✗[/red] {card.id} would be rejected:")
        for reason in result.reasons:
            console.print(f"  - {reason}", markup=False)

    if not result.ok:
        raise typer.Exit(code=1)


@insights_app.command("distribution")
def distribution(
    events_file: Path = typer.Argument(..., help="JSON file with event records"),
    scope: str = typer.Option("week", "--scope", help="week, month or year"),
    bucket: str = typer.Option("day", "--bucket", help="hour, day, week or month"),
    timezone: Optional[str] = typer.Option(None, "--timezone", "--tz", help="IANA timezone"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
) -> None:
    """Classify the time distribution of reflections and narrate it."""
    settings = _settings(config_path)
    tz = timezone or settings.cli.timezone

    try:
        resolve_scope(scope)
        entries = events_to_reflection_entries(coerce_events(_read_events(events_file)), timezone=tz)
        series = build_distribution_from_reflections(entries, bucket)
        shape = classify_distribution(series)
        insight = generate_distribution_insight(series, shape)
        stats = inspect_distribution(series)
        narrative = (
            generate_narrative(
                scope,
                insight,
                stats.total_events,
                high_confidence_min_events=settings.engine.year_high_confidence_min_events,
            )
            if insight is not None
            else None
        )
    except MirrorlineError as e:
        _fail(e)

    if output_json:
        typer.echo(
            json.dumps(
                {
                    "shape": shape.value,
                    "total_events": stats.total_events,
                    "buckets": stats.bucket_count,
                    "insight": insight.model_dump(mode="json") if insight else None,
                    "narrative": narrative.model_dump(mode="json") if narrative else None,
                },
                indent=2,
            )
        )
        return

    console.print(f"Shape: [bold]{shape.value}[/bold] ({stats.total_events:g} events, {stats.bucket_count} buckets)")
    if narrative is None:
        console.print("[dim]Not enough data yet to generate a narrative for this view.[/dim]")
        return
    console.print(f"\n[bold]{narrative.headline}[/bold]")
    console.print(narrative.summary)
    console.print(f"[dim]Confidence: {narrative.confidence.value}[/dim]")
