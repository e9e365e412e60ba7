"""Program commands: plan, phases, exercise."""

import json
from typing import Annotated

import typer

from ...core.errors import UnknownExercise
from ...core.scaling import plan_entry
from .. import views
from ..app import SettingsPathOption, app, get_session


@app.command()
def plan(
    settings_path: SettingsPathOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show the circuit for the selected week and day.
    """
    session = get_session(settings_path)

    if json_out:
        s = session.settings
        out = {
            "week": s.week,
            "day": s.day,
            "rounds": s.rounds,
            "work_seconds": s.work_seconds,
            "rest_seconds": s.rest_seconds,
            "exercises": [
                {
                    "step": i + 1,
                    "key": e.exercise_key,
                    "name": e.name,
                    "kind": e.kind,
                    "target": e.target,
                    "done_rounds": [r for r in range(1, s.rounds + 1) if session.is_done(i, r)],
                }
                for i, e in enumerate(session.plan)
            ],
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return

    views.print_plan(session)


@app.command()
def phases(settings_path: SettingsPathOption = None) -> None:
    """
    Show the 8-week phase table.
    """
    session = get_session(settings_path)
    views.print_phases(session.catalog, session.settings.week, session.settings.dark_theme)


@app.command()
def exercise(
    key: Annotated[str, typer.Argument(help="Exercise key, e.g. pushups, or its step number in today's plan")],
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Show cues, diagram and this week's target for one exercise.
    """
    session = get_session(settings_path)
    week = session.settings.week

    if key.isdigit():
        step = int(key)
        if not 1 <= step <= len(session.plan):
            views.print_error(f"Step must be between 1 and {len(session.plan)}")
            raise typer.Exit(1)
        entry = session.plan[step - 1]
    else:
        try:
            entry = plan_entry(session.catalog.exercise_by_key(key), week, session.catalog)
        except UnknownExercise as e:
            views.print_error(str(e))
            views.print_info(f"Known exercises: {', '.join(session.catalog.exercises)}")
            raise typer.Exit(1)

    views.print_exercise(entry, week, session.settings.dark_theme)
