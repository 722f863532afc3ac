"""CLI commands for managing Mirrorline settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from mirrorline.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)
from mirrorline.errors import ConfigurationError, InvalidConfigError
from mirrorline.errors.user_messages import format_error_for_cli


config_app = typer.Typer(help="Manage Mirrorline configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
    timezone: Optional[str] = typer.Option(None, help="Override IANA timezone"),
    default_horizon: Optional[str] = typer.Option(None, help="Override default horizon"),
    include_stable: Optional[bool] = typer.Option(
        None, "--include-stable/--exclude-stable", help="Surface stable narratives"
    ),
) -> None:
    """Initialize the Mirrorline settings file."""

    overrides: dict = {}
    if timezone:
        overrides.setdefault("cli", {})["timezone"] = timezone
    if default_horizon:
        overrides.setdefault("cli", {})["default_horizon"] = default_horizon
    if include_stable is not None:
        overrides.setdefault("engine", {})["include_stable"] = include_stable

    try:
        settings = bootstrap_settings(path=config_path, overrides=overrides)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Configuration initialized at {config_path}")
    typer.echo(_summarize_settings(settings))


@config_app.command("show")
def show_config(config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config")) -> None:
    """Display the stored configuration."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=1)
    typer.echo(_summarize_settings(settings))


@config_app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key, e.g. engine.persistence_threshold"),
    value: str = typer.Argument(..., help="New value"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Update a configuration value."""

    try:
        settings = load_settings(config_path)
        payload = settings.model_dump(mode="python")
        _assign(payload, key.split("."), value)
        try:
            updated = Settings.model_validate(payload)
        except ValueError as exc:
            raise InvalidConfigError(f"Invalid value for {key}: {value}") from exc
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=1)
    save_settings(updated, config_path)
    typer.echo(f"Updated {key}")


@config_app.command("validate")
def validate_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
) -> None:
    """Validate configuration file for correctness."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        typer.echo(f"❌ Configuration invalid: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"✅ Configuration valid at {config_path}")
    typer.echo(f"   Persistence threshold: {settings.engine.persistence_threshold}")
    typer.echo(f"   Default horizon: {settings.cli.default_horizon}")
    typer.echo(f"   Timezone: {settings.cli.timezone or 'UTC'}")


def _summarize_settings(settings: Settings) -> str:
    data = settings.model_dump(mode="json")
    return json.dumps(data, indent=2)


def _assign(payload: dict, keys: list[str], value: str) -> None:
    current = payload
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value
