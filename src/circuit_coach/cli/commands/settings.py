"""Settings commands: week, day, rounds, timer, theme, status."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import DAY_IDS, MAX_WEEK, MIN_SEGMENT_SECONDS, MIN_WEEK
from .. import views
from ...io.serializers import ValidationError
from ..app import SettingsPathOption, app, get_session


@app.command()
def week(
    number: Annotated[int, typer.Argument(help=f"Training week ({MIN_WEEK}-{MAX_WEEK})")],
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Select the training week. Rounds and rest reset to the phase defaults.
    """
    session = get_session(settings_path)
    applied = session.set_week(number)
    if applied != number:
        views.print_warning(f"Week {number} is outside {MIN_WEEK}-{MAX_WEEK}; using week {applied}.")
    phase = session.phase
    views.print_success(
        f"Week {applied} selected: {phase.rounds} rounds, rest {phase.rest_seconds}s, "
        f"targets +{phase.bump:.0%}."
    )


@app.command()
def day(
    day_id: Annotated[str, typer.Argument(help="Day template: " + ", ".join(DAY_IDS))],
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Select the day template (A: Push & Core, B: Pull & Lower, C: Full Body).
    """
    session = get_session(settings_path)
    day_id = day_id.strip().upper()
    try:
        session.set_day(day_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Day {day_id} selected: {session.day_label}.")


@app.command()
def rounds(
    count: Annotated[int, typer.Argument(help="Rounds per circuit (at least 1)")],
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Override the number of rounds for the current week.
    """
    session = get_session(settings_path)
    applied = session.set_rounds(count)
    if applied != count:
        views.print_warning(f"Rounds must be at least 1; using {applied}.")
    views.print_success(f"Rounds set to {applied} (phase default {session.phase.rounds}).")


@app.command()
def timer(
    work: Annotated[
        Optional[int],
        typer.Option("--work", "-w", help=f"Work seconds per exercise (min {MIN_SEGMENT_SECONDS})"),
    ] = None,
    rest: Annotated[
        Optional[int],
        typer.Option("--rest", "-r", help=f"Rest seconds after each exercise (min {MIN_SEGMENT_SECONDS})"),
    ] = None,
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Set work and rest durations.
    """
    session = get_session(settings_path)
    if work is None and rest is None:
        s = session.settings
        views.print_info(f"Work {s.work_seconds}s, rest {s.rest_seconds}s.")
        return

    for label, value in (("Work", work), ("Rest", rest)):
        if value is not None and value < MIN_SEGMENT_SECONDS:
            views.print_warning(f"{label} below {MIN_SEGMENT_SECONDS}s; using {MIN_SEGMENT_SECONDS}s.")

    session.set_timer(work_seconds=work, rest_seconds=rest)
    s = session.settings
    views.print_success(f"Timer set: work {s.work_seconds}s, rest {s.rest_seconds}s.")


@app.command()
def theme(settings_path: SettingsPathOption = None) -> None:
    """
    Toggle between dark and light colour themes.
    """
    session = get_session(settings_path)
    dark = session.toggle_theme()
    views.print_success(f"Theme: {'dark' if dark else 'light'}.")


@app.command()
def status(
    settings_path: SettingsPathOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show current settings and progress.
    """
    session = get_session(settings_path)

    if json_out:
        s = session.settings
        phase = session.phase
        out = {
            "week": s.week,
            "day": s.day,
            "day_label": session.day_label,
            "rounds": s.rounds,
            "work_seconds": s.work_seconds,
            "rest_seconds": s.rest_seconds,
            "dark_theme": s.dark_theme,
            "phase": {
                "weeks": [phase.first_week, phase.last_week],
                "rounds": phase.rounds,
                "rest_seconds": phase.rest_seconds,
                "bump": phase.bump,
            },
            "completed": session.tracker.done_count(),
            "total": len(session.plan) * s.rounds,
        }
        print(json.dumps(out, indent=2))
        return

    views.console.print(views.format_status_display(session))
