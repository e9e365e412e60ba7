"""
Coach session: the host-side owner of one live circuit.

Ties together the settings record, the Circuit Plan for the selected
(week, day), the interval state machine and the completion marks, and
writes every change back through the persistence adapter.  This is the
surface a UI layer talks to.
"""

from typing import Callable, Protocol

from ..io.serializers import validate_day
from .catalog import ProgramCatalog, get_catalog
from .circuit import CircuitStateMachine
from .clock import Clock
from .completion import CompletionTracker
from .config import MAX_WEEK, MIN_ROUNDS, MIN_SEGMENT_SECONDS, MIN_WEEK
from .models import CircuitState, CircuitTiming, CoachSettings, Phase, PlanEntry
from .scaling import build_plan


class SessionStore(Protocol):
    """Persistence operations a CoachSession needs (see io.settings_store)."""

    def load_settings(self, catalog: ProgramCatalog | None = None) -> CoachSettings: ...

    def save_settings(self, settings: CoachSettings) -> None: ...

    def load_completion(self, week: int, day: str) -> dict[str, bool]: ...

    def save_completion(self, week: int, day: str, marks: dict[str, bool]) -> None: ...


def _timing(settings: CoachSettings) -> CircuitTiming:
    return CircuitTiming(
        work_seconds=settings.work_seconds,
        rest_seconds=settings.rest_seconds,
        rounds=settings.rounds,
    )


class CoachSession:
    """
    One user's coaching session.

    Week changes reset rounds and rest to the new phase's defaults; the
    work length is kept.  Switching week or day loads the completion marks
    stored for the new (week, day) pair.
    """

    def __init__(self, store: SessionStore, catalog: ProgramCatalog | None = None):
        self.store = store
        self.catalog = catalog if catalog is not None else get_catalog()
        self.settings = store.load_settings(self.catalog)

        self.plan: list[PlanEntry] = build_plan(self.settings.day, self.settings.week, self.catalog)
        self.machine = CircuitStateMachine(len(self.plan), _timing(self.settings))
        self.tracker = self._load_tracker()

    def _load_tracker(self) -> CompletionTracker:
        marks = self.store.load_completion(self.settings.week, self.settings.day)
        return CompletionTracker(len(self.plan), self.settings.rounds, marks)

    def _reconfigure(self) -> None:
        s = self.settings
        self.machine.reconfigure(s.work_seconds, s.rest_seconds, s.rounds)
        self.tracker.resize(len(self.plan), s.rounds)

    def _rebuild_plan(self) -> None:
        self.plan = build_plan(self.settings.day, self.settings.week, self.catalog)
        self._reconfigure()
        self.machine.on_plan_changed(len(self.plan))
        self.tracker = self._load_tracker()

    # -- read side ------------------------------------------------------------

    def get_plan(self) -> list[PlanEntry]:
        return list(self.plan)

    def get_circuit_state(self) -> CircuitState:
        return self.machine.state

    @property
    def phase(self) -> Phase:
        return self.catalog.phase_for_week(self.settings.week)

    @property
    def day_label(self) -> str:
        return self.catalog.day(self.settings.day).label

    def current_entry(self) -> PlanEntry:
        return self.plan[self.machine.state.step_index]

    def up_next(self) -> PlanEntry:
        """Exercise after the current one, wrapping to the start of the plan."""
        return self.plan[(self.machine.state.step_index + 1) % len(self.plan)]

    # -- settings -------------------------------------------------------------

    def set_week(self, week: int) -> int:
        """
        Select a training week, clamped to the program length.

        Rounds and rest reset to the phase defaults when the week changes;
        re-selecting the current week keeps any override.

        Returns:
            The week actually selected
        """
        week = max(MIN_WEEK, min(week, MAX_WEEK))
        if week == self.settings.week:
            return week
        phase = self.catalog.phase_for_week(week)
        self.settings.week = week
        self.settings.rounds = phase.rounds
        self.settings.rest_seconds = phase.rest_seconds
        self._rebuild_plan()
        self.store.save_settings(self.settings)
        return week

    def set_day(self, day: str) -> None:
        """
        Select a day template.

        Raises:
            ValidationError: If day is not one of DAY_IDS
        """
        validate_day(day)
        self.settings.day = day
        self._rebuild_plan()
        self.store.save_settings(self.settings)

    def set_rounds(self, rounds: int) -> int:
        """Override the phase's round count (at least MIN_ROUNDS). Returns the value applied."""
        self.settings.rounds = max(MIN_ROUNDS, rounds)
        self._reconfigure()
        self.store.save_settings(self.settings)
        return self.settings.rounds

    def set_timer(self, work_seconds: int | None = None, rest_seconds: int | None = None) -> None:
        """Change work and/or rest length; each is floored at MIN_SEGMENT_SECONDS."""
        if work_seconds is not None:
            self.settings.work_seconds = max(MIN_SEGMENT_SECONDS, work_seconds)
        if rest_seconds is not None:
            self.settings.rest_seconds = max(MIN_SEGMENT_SECONDS, rest_seconds)
        self._reconfigure()
        self.store.save_settings(self.settings)

    def toggle_theme(self) -> bool:
        self.settings.dark_theme = not self.settings.dark_theme
        self.store.save_settings(self.settings)
        return self.settings.dark_theme

    # -- completion -------------------------------------------------------------

    def toggle_done(self, step_index: int, round_index: int) -> bool:
        """
        Flip and persist the completion mark for (step_index, round_index).

        Raises:
            InvalidIndex: If either index is outside the current plan/rounds
        """
        done = self.tracker.toggle(step_index, round_index)
        self.store.save_completion(self.settings.week, self.settings.day, self.tracker.snapshot())
        return done

    def is_done(self, step_index: int, round_index: int) -> bool:
        return self.tracker.is_done(step_index, round_index)

    # -- timer ----------------------------------------------------------------

    def start(self) -> CircuitState:
        return self.machine.start()

    def pause(self) -> CircuitState:
        return self.machine.pause()

    def reset(self) -> CircuitState:
        return self.machine.reset()

    def jump_to_step(self, step_index: int) -> CircuitState:
        return self.machine.jump_to_step(step_index)

    def tick(self) -> CircuitState:
        return self.machine.tick()

    def run(
        self,
        clock: Clock,
        on_tick: Callable[[CircuitState], None] | None = None,
    ) -> CircuitState:
        """
        Start the timer and feed it ticks from clock until it stops.

        The clock is stopped as soon as the machine is no longer running
        (finished or paused from on_tick).  With a blocking clock this
        returns when the circuit is over; with a ManualClock it returns
        immediately and ticks arrive through clock.advance().

        Raises:
            RuntimeError: If clock is already running; the machine is left untouched
        """
        if clock.running:
            raise RuntimeError("Clock is already running")
        self.machine.start()

        def handle_tick() -> None:
            state = self.machine.tick()
            if on_tick is not None:
                on_tick(state)
            if not self.machine.running:
                clock.stop()

        clock.start(handle_tick)
        return self.machine.state

    def stop(self, clock: Clock) -> CircuitState:
        """Stop the tick source and pause the machine, keeping its position."""
        clock.stop()
        return self.machine.pause()
