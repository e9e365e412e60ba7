"""Workout commands: run, check, progress."""

from typing import Annotated, Optional

import typer
from rich.live import Live

from ...core.clock import IntervalClock
from ...core.config import TICK_INTERVAL_SECONDS
from ...core.errors import InvalidIndex
from .. import views
from ..app import SettingsPathOption, app, get_session


@app.command()
def run(
    step: Annotated[
        Optional[int],
        typer.Option("--step", "-s", help="Exercise number to start on (1-based)"),
    ] = None,
    tick_seconds: Annotated[
        float,
        typer.Option("--tick-seconds", help="Seconds between timer ticks", hidden=True),
    ] = TICK_INTERVAL_SECONDS,
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Run the guided circuit timer. Ctrl+C pauses and exits.
    """
    session = get_session(settings_path)

    if step is not None:
        try:
            session.jump_to_step(step - 1)
        except InvalidIndex:
            views.print_error(f"Step must be between 1 and {len(session.plan)}")
            raise typer.Exit(1)

    clock = IntervalClock(tick_seconds)
    with Live(views.render_timer(session), console=views.console, refresh_per_second=4) as live:
        try:
            session.run(clock, on_tick=lambda _state: live.update(views.render_timer(session)))
        except KeyboardInterrupt:
            session.stop(clock)
            live.update(views.render_timer(session))

    state = session.get_circuit_state()
    if session.machine.finished:
        views.print_success(
            f"Circuit complete: {len(session.plan)} exercises × {session.settings.rounds} rounds."
        )
        views.print_info("Mark your rounds with 'circuit-coach check STEP ROUND'.")
    else:
        views.print_info(
            f"Paused at round {state.round_index}, exercise {state.step_index + 1} "
            f"({session.current_entry().name})."
        )


@app.command()
def check(
    step: Annotated[int, typer.Argument(help="Exercise number in today's plan (1-based)")],
    round_number: Annotated[int, typer.Argument(metavar="ROUND", help="Round number (1-based)")],
    settings_path: SettingsPathOption = None,
) -> None:
    """
    Toggle the completion mark for one exercise in one round.
    """
    session = get_session(settings_path)
    try:
        done = session.toggle_done(step - 1, round_number)
    except InvalidIndex:
        views.print_error(
            f"Exercise must be 1-{len(session.plan)} and round 1-{session.settings.rounds}"
        )
        raise typer.Exit(1)

    name = session.plan[step - 1].name
    if done:
        views.print_success(f"Marked {name}, round {round_number} complete.")
    else:
        views.print_info(f"Cleared {name}, round {round_number}.")


@app.command()
def progress(settings_path: SettingsPathOption = None) -> None:
    """
    Show which rounds are marked complete for the selected week and day.
    """
    session = get_session(settings_path)
    views.print_progress(session)
