"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of the circuit, phases, progress and
the live timer panel.  Colours come from the dark or light palette chosen
by the user's theme setting.
"""

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.catalog import ProgramCatalog
from ..core.models import WORK, Phase, PlanEntry
from ..core.session import CoachSession

console = Console()

PALETTES: dict[str, dict[str, str]] = {
    "dark": {
        "accent": "bold cyan",
        "work": "bold green",
        "rest": "bold yellow",
        "done": "green",
        "muted": "dim",
        "current": "bold white on dark_green",
    },
    "light": {
        "accent": "bold blue",
        "work": "bold dark_green",
        "rest": "bold dark_orange3",
        "done": "dark_green",
        "muted": "grey50",
        "current": "bold black on pale_green1",
    },
}


def palette(dark: bool) -> dict[str, str]:
    return PALETTES["dark" if dark else "light"]


def _phase_summary(phase: Phase) -> str:
    return f"Phase weeks {phase.first_week}-{phase.last_week}: {phase.rounds} rounds, rest {phase.rest_seconds}s"


def format_plan_table(session: CoachSession) -> Table:
    """
    Create a Rich table for the day's circuit.

    Args:
        session: Active coach session

    Returns:
        Rich Table object
    """
    s = session.settings
    colors = palette(s.dark_theme)
    table = Table(title=f"Week {s.week} · Day {s.day}: {session.day_label}", title_style=colors["accent"])

    table.add_column("#", justify="right", style=colors["muted"], width=3)
    table.add_column("Exercise")
    table.add_column("Target", justify="right", style="bold")
    table.add_column("Rounds done", justify="left")

    for i, entry in enumerate(session.plan):
        marks = " ".join(
            f"[{colors['done']}]R{r}✓[/]" if session.is_done(i, r) else f"[{colors['muted']}]R{r}[/]"
            for r in range(1, s.rounds + 1)
        )
        table.add_row(str(i + 1), entry.name, entry.target_label, marks)

    return table


def print_plan(session: CoachSession) -> None:
    """Print the day's circuit with phase and timer settings."""
    s = session.settings
    colors = palette(s.dark_theme)
    console.print(format_plan_table(session))
    console.print(f"[{colors['muted']}]{_phase_summary(session.phase)}[/]")
    console.print(
        f"[{colors['muted']}]Timer: work {s.work_seconds}s, rest {s.rest_seconds}s, "
        f"{s.rounds} rounds[/]"
    )


def print_phases(catalog: ProgramCatalog, current_week: int, dark: bool = True) -> None:
    """Print the phase table, highlighting the phase of current_week."""
    colors = palette(dark)
    table = Table(title="Training phases", title_style=colors["accent"])
    table.add_column("Weeks", style="cyan")
    table.add_column("Rounds", justify="right")
    table.add_column("Rest (s)", justify="right")
    table.add_column("Targets", justify="right")

    for phase in catalog.phases:
        style = colors["current"] if phase.contains(current_week) else None
        table.add_row(
            f"{phase.first_week}-{phase.last_week}",
            str(phase.rounds),
            str(phase.rest_seconds),
            f"+{phase.bump:.0%}",
            style=style,
        )
    console.print(table)


def print_exercise(entry: PlanEntry, week: int, dark: bool = True) -> None:
    """Print one exercise with its target, diagram and cues."""
    colors = palette(dark)
    console.print(f"[{colors['accent']}]{entry.name}[/]  ({entry.exercise_key})")
    console.print(f"Target (week {week}): [bold]{entry.target_label}[/bold]")
    if entry.diagram:
        console.print()
        console.print(Text(entry.diagram), style=colors["muted"])
    if entry.cues:
        console.print()
        for cue in entry.cues:
            console.print(f"  • {cue}")


def print_progress(session: CoachSession) -> None:
    """Print the completion grid for the active (week, day)."""
    s = session.settings
    colors = palette(s.dark_theme)
    table = Table(title=f"Progress · week {s.week} day {s.day}", title_style=colors["accent"])
    table.add_column("#", justify="right", style=colors["muted"], width=3)
    table.add_column("Exercise")
    for r in range(1, s.rounds + 1):
        table.add_column(f"R{r}", justify="center")

    for i, entry in enumerate(session.plan):
        cells = [
            f"[{colors['done']}]✓[/]" if session.is_done(i, r) else f"[{colors['muted']}]·[/]"
            for r in range(1, s.rounds + 1)
        ]
        table.add_row(str(i + 1), entry.name, *cells)

    console.print(table)
    total = len(session.plan) * s.rounds
    console.print(f"{session.tracker.done_count()}/{total} sets marked complete")


def format_status_display(session: CoachSession) -> str:
    """
    Format settings and progress as a text block.

    Args:
        session: Active coach session

    Returns:
        Formatted string
    """
    s = session.settings
    phase = session.phase
    total = len(session.plan) * s.rounds
    lines = [
        "Current settings",
        f"- Week: {s.week}  ({_phase_summary(phase)})",
        f"- Day: {s.day}  ({session.day_label})",
        f"- Rounds: {s.rounds}" + ("" if s.rounds == phase.rounds else f"  (phase default {phase.rounds})"),
        f"- Work: {s.work_seconds}s",
        f"- Rest: {s.rest_seconds}s" + ("" if s.rest_seconds == phase.rest_seconds else f"  (phase default {phase.rest_seconds}s)"),
        f"- Theme: {'dark' if s.dark_theme else 'light'}",
        f"- Completed: {session.tracker.done_count()}/{total}",
    ]
    return "\n".join(lines)


def render_timer(session: CoachSession) -> Panel:
    """Build the live timer panel for the machine's current state."""
    state = session.get_circuit_state()
    colors = palette(session.settings.dark_theme)
    entry = session.current_entry()
    mode_style = colors["work"] if state.mode == WORK else colors["rest"]

    header = Text.assemble(
        (state.mode, mode_style),
        "   ",
        (f"Round {state.round_index}/{session.settings.rounds}", colors["muted"]),
        "   ",
        (f"Step {state.step_index + 1}/{len(session.plan)}", colors["muted"]),
    )
    body = Text.assemble(
        (entry.name, "bold"),
        f"  ·  {entry.target_label}\n",
        (f"Up next: {session.up_next().name}", colors["muted"]),
    )
    clock = Text(f"{max(0, state.remaining_seconds):02d}", style="bold", justify="right")
    if state.running:
        status = ""
    elif session.machine.finished:
        status = "  (finished)"
    else:
        status = "  (paused)"
    return Panel(Group(header, body, clock), title=f"Circuit timer{status}", border_style=mode_style)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
