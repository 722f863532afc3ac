"""Configuration loading utilities for Mirrorline."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    CLISettings,
    EngineSettings,
    Settings,
    bootstrap_settings,
    load_settings,
    resolve_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CLISettings",
    "EngineSettings",
    "Settings",
    "bootstrap_settings",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
