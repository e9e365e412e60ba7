"""Shared Typer app object, shared option types, and store/session utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.errors import CircuitError
from ..core.session import CoachSession
from ..io.settings_store import SettingsStore, get_default_store
from . import views

# Shared --settings-path option type used across all commands
SettingsPathOption = Annotated[
    Optional[Path],
    typer.Option("--settings-path", "-p", help="Path to settings JSON file"),
]

app = typer.Typer(
    name="circuit-coach",
    help="Guided 8-week calisthenics circuit coach with a work/rest interval timer.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(settings_path: Path | None) -> SettingsStore:
    """Get settings store from path or default location."""
    if settings_path is None:
        return get_default_store()
    return SettingsStore(settings_path)


def get_session(settings_path: Path | None) -> CoachSession:
    """Open a coach session on the given (or default) settings file."""
    try:
        return CoachSession(get_store(settings_path))
    except CircuitError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
