"""Command line entry points for Mirrorline."""

from typer import Typer

from ..configuration.cli import config_app
from .emergence import emergence_app
from .insights import insights_app


cli = Typer(help="Mirrorline command line tools")
cli.add_typer(insights_app, name="insights")
cli.add_typer(emergence_app, name="emergence")
cli.add_typer(config_app, name="config")

__all__ = ["cli", "config_app", "emergence_app", "insights_app"]
