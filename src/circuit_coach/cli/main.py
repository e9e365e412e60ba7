"""
CLI entry point using Typer.

Provides commands for the circuit coach:
- plan: Show the day's circuit with scaled targets
- phases: Show the 8-week phase table
- exercise: Show cues and target for one exercise
- week / day / rounds / timer / theme: Adjust settings
- run: Guided work/rest timer
- check / progress: Mark and review completed rounds
- status: Current settings summary
"""

import typer

from . import views
from .app import app
from .commands import program, settings, workout


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Calisthenics circuit coach. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    views.console.print()
    views.console.print("[bold cyan]circuit-coach[/bold cyan] — guided calisthenics circuits")
    views.console.print()

    menu = {
        "1": (program.plan, "Show today's circuit"),
        "2": (workout.run, "Start the circuit timer"),
        "3": (workout.progress, "Show completed rounds"),
        "4": (settings.status, "Current settings"),
        "5": (program.phases, "Phase table"),
        "0": (None, "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    if choice not in menu:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    ctx.invoke(menu[choice][0])


def main() -> None:
    app()


if __name__ == "__main__":
    main()
