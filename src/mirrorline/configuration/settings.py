"""Typed settings management for Mirrorline.

This module wraps user configuration in Pydantic models so CLI commands and
host applications can rely on validated settings. Engine thresholds are
converted into an ``InsightEngineConfig`` with ``EngineSettings.to_config``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from mirrorline.errors import InvalidConfigError, MissingConfigError
from mirrorline.insights.config import InsightEngineConfig


DEFAULT_CONFIG_PATH = Path.home() / ".mirrorline" / "config.json"


class EngineSettings(BaseModel):
    """Thresholds for the insight engine.

    Field names mirror ``InsightEngineConfig`` one to one.
    """

    persistence_threshold: int = Field(3, ge=1, description="Occurrences for a persistent pattern")
    strengthening_threshold: float = Field(0.2, gt=0.0, le=1.0)
    weekly_max_narratives: int = Field(3, ge=0, le=20)
    default_max_narratives: int = Field(2, ge=0, le=20)
    include_stable: bool = Field(False, description="Surface stable narratives")
    spike_min_multiplier: float = Field(2.0, gt=1.0)
    spike_min_count: int = Field(3, ge=1)
    spike_min_days: int = Field(3, ge=1, description="Active days before spikes are analysed")
    cluster_ratio: float = Field(2.0, gt=0.0, description="Entries per active day that read as clustered")
    cluster_ratio_change: float = Field(0.5, gt=0.0)
    pattern_weeks: int = Field(6, ge=1, description="Weeks of history for weekday patterns")
    pattern_min_entries: int = Field(10, ge=1)
    pattern_min_weekly_average: float = Field(2.0, gt=0.0)
    activity_spike_baseline_days: int = Field(14, ge=1)
    activity_spike_min_entries: int = Field(7, ge=1)
    year_high_confidence_min_events: int = Field(100, ge=0)

    def to_config(self) -> InsightEngineConfig:
        return InsightEngineConfig(**self.model_dump())


class CLISettings(BaseModel):
    """Defaults for command line tools."""

    timezone: Optional[str] = Field(default=None, description="IANA zone used to bucket entries")
    default_horizon: str = Field("weekly", description="Horizon used when none is given")
    snapshot_path: Path = Field(default=Path.home() / ".mirrorline" / "snapshots.json")

    @field_validator("default_horizon")
    def _validate_horizon(cls, value: str) -> str:
        if value not in {"weekly", "summary", "timeline"}:
            raise ValueError("default_horizon must be weekly, summary or timeline")
        return value


class Settings(BaseModel):
    """Root configuration state."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    cli: CLISettings = Field(default_factory=CLISettings)


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if invalid."""

    if not path.exists():
        raise MissingConfigError(
            f"Settings file not found at {path}", details={"path": str(path)}
        )
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(
            f"Settings file at {path} is not valid JSON: {exc.msg}",
            details={"path": str(path), "line": exc.lineno},
        ) from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk."""

    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create or load settings respecting environment overrides."""

    overrides = overrides or {}

    if path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()
        save_settings(settings, path)

    merged = settings.model_dump(mode="python")
    merged = _apply_overrides(merged, overrides)
    merged = _apply_env_overrides(merged)

    try:
        resolved = Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc
    save_settings(resolved, path)
    return resolved


def resolve_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings if present, otherwise defaults, with env overrides applied.

    Unlike ``bootstrap_settings`` this never writes to disk.
    """

    settings = load_settings(path) if path.exists() else Settings()
    merged = _apply_env_overrides(settings.model_dump(mode="python"))
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    engine = data.setdefault("engine", {})
    _set_env_override(engine, "persistence_threshold", "MIRRORLINE_PERSISTENCE_THRESHOLD", cast_int=True)
    _set_env_override(engine, "strengthening_threshold", "MIRRORLINE_STRENGTHENING_THRESHOLD", cast_float=True)
    _set_env_override(engine, "weekly_max_narratives", "MIRRORLINE_WEEKLY_MAX_NARRATIVES", cast_int=True)
    _set_env_override(engine, "default_max_narratives", "MIRRORLINE_DEFAULT_MAX_NARRATIVES", cast_int=True)
    _set_env_override(engine, "include_stable", "MIRRORLINE_INCLUDE_STABLE", cast_bool=True)

    cli = data.setdefault("cli", {})
    _set_env_override(cli, "timezone", "MIRRORLINE_TIMEZONE")
    _set_env_override(cli, "default_horizon", "MIRRORLINE_DEFAULT_HORIZON")
    _set_env_override(cli, "snapshot_path", "MIRRORLINE_SNAPSHOT_PATH")
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_bool: bool = False,
    cast_int: bool = False,
    cast_float: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_bool:
        mapping[key] = raw.lower() in {"1", "true", "yes"}
    elif cast_int:
        mapping[key] = int(raw)
    elif cast_float:
        mapping[key] = float(raw)
    else:
        mapping[key] = raw
