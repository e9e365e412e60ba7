"""
Data models for circuit-coach.

Static program content (Exercise, DayTemplate, Phase) is immutable and
loaded once from the bundled catalog.  PlanEntry is derived per
(day, week).  CircuitState is the timer's value object; it is replaced,
never mutated, by the transition functions in circuit.py.
"""

from dataclasses import dataclass
from typing import Literal

ExerciseKind = Literal["reps", "time"]
Mode = Literal["WORK", "REST"]

EXERCISE_KINDS: tuple[str, ...] = ("reps", "time")
WORK: Mode = "WORK"
REST: Mode = "REST"


@dataclass(frozen=True)
class Exercise:
    """One entry of the exercise library."""

    key: str                  # Stable catalog key, e.g. "pushups"
    name: str                 # Display name, e.g. "Push-ups"
    kind: ExerciseKind        # "reps" counts repetitions, "time" counts seconds
    base_target: int          # Week-1 target before phase bump
    cues: tuple[str, ...] = ()
    diagram: str | None = None

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if self.kind not in EXERCISE_KINDS:
            raise ValueError(f"kind must be one of {EXERCISE_KINDS}, got {self.kind!r}")
        if self.base_target <= 0:
            raise ValueError("base_target must be positive")


@dataclass(frozen=True)
class DayTemplate:
    """Ordered exercise keys for one training day; order defines the circuit steps."""

    day_id: str
    label: str
    exercise_keys: tuple[str, ...]


@dataclass(frozen=True)
class Phase:
    """
    A contiguous, inclusive week range with its own training prescription.

    bump is the fractional increase applied to every exercise's base target
    while the phase is active (0.25 → targets are 125% of base).
    """

    first_week: int
    last_week: int
    rounds: int
    rest_seconds: int
    bump: float

    def __post_init__(self) -> None:
        """Validate phase data."""
        if self.first_week > self.last_week:
            raise ValueError("first_week must not exceed last_week")
        if self.rounds <= 0:
            raise ValueError("rounds must be positive")
        if self.rest_seconds <= 0:
            raise ValueError("rest_seconds must be positive")
        if self.bump < 0:
            raise ValueError("bump must be non-negative")

    def contains(self, week: int) -> bool:
        return self.first_week <= week <= self.last_week

    @property
    def weeks(self) -> range:
        return range(self.first_week, self.last_week + 1)


@dataclass(frozen=True)
class PlanEntry:
    """One step of a Circuit Plan: an exercise with its week-scaled target."""

    exercise_key: str
    name: str
    kind: ExerciseKind
    cues: tuple[str, ...]
    diagram: str | None
    target: int

    @property
    def target_label(self) -> str:
        """Human-readable target, e.g. '15 reps' or '40s'."""
        if self.kind == "reps":
            return f"{self.target} reps"
        return f"{self.target}s"


@dataclass(frozen=True)
class CircuitTiming:
    """Durations and round count the state machine uses for future transitions."""

    work_seconds: int
    rest_seconds: int
    rounds: int

    def __post_init__(self) -> None:
        """Validate timing data."""
        if self.work_seconds <= 0:
            raise ValueError("work_seconds must be positive")
        if self.rest_seconds <= 0:
            raise ValueError("rest_seconds must be positive")
        if self.rounds <= 0:
            raise ValueError("rounds must be positive")


@dataclass(frozen=True)
class CircuitState:
    """
    Snapshot of the interval timer.

    step_index is 0-based within the plan; round_index is 1-based.
    started is False only for the canonical never-started state produced
    by initial_state() / reset; Start re-arms the work segment from there.
    """

    mode: Mode
    step_index: int
    round_index: int
    remaining_seconds: int
    running: bool = False
    started: bool = False


@dataclass
class CoachSettings:
    """
    User-adjustable settings, persisted as one record.

    rounds and rest_seconds default to the active phase's values and are
    reset to them whenever the week changes.
    """

    week: int
    day: str
    rounds: int
    work_seconds: int
    rest_seconds: int
    dark_theme: bool = True
