"""
Progressive-overload scaling and Circuit Plan building.

Targets grow with the training phase:

    raw = base_target * (1 + phase.bump)

Rep targets round half-up to a whole rep; timed targets round half-up to
the nearest TIME_TARGET_STEP_SECONDS so the coach shows friendly numbers
(37.5 s → 40 s).
"""

import math

from .catalog import ProgramCatalog, get_catalog
from .config import TIME_TARGET_STEP_SECONDS
from .models import Exercise, PlanEntry

# Float products like 12 * 1.1 land a hair off the intended value; this many
# decimals is enough to snap them back before the half-up rounding.
_RAW_PRECISION = 9


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def scaled_target(exercise: Exercise, week: int, catalog: ProgramCatalog | None = None) -> int:
    """
    Week-scaled target for one exercise.

    Args:
        exercise: Exercise from the catalog
        week: Training week; must be covered by the phase table
        catalog: Catalog providing the phase table (default: bundled catalog)

    Returns:
        Reps for kind="reps", seconds (multiple of 5) for kind="time"

    Raises:
        OutOfRangeWeek: If week is outside the program
    """
    if catalog is None:
        catalog = get_catalog()
    phase = catalog.phase_for_week(week)
    raw = round(exercise.base_target * (1 + phase.bump), _RAW_PRECISION)

    if exercise.kind == "reps":
        return _round_half_up(raw)
    step = TIME_TARGET_STEP_SECONDS
    return _round_half_up(raw / step) * step


def plan_entry(exercise: Exercise, week: int, catalog: ProgramCatalog | None = None) -> PlanEntry:
    """Exercise as a plan step with its target scaled for week."""
    return PlanEntry(
        exercise_key=exercise.key,
        name=exercise.name,
        kind=exercise.kind,
        cues=exercise.cues,
        diagram=exercise.diagram,
        target=scaled_target(exercise, week, catalog),
    )


def build_plan(day_id: str, week: int, catalog: ProgramCatalog | None = None) -> list[PlanEntry]:
    """
    Build the ordered Circuit Plan for a day at a given week.

    Template order is preserved; each entry carries its scaled target.

    Raises:
        OutOfRangeWeek: If week is outside the program
        UnknownExercise: If the template references a missing exercise
        ValueError: If day_id is not a known day
    """
    if catalog is None:
        catalog = get_catalog()
    return [
        plan_entry(catalog.exercise_by_key(key), week, catalog)
        for key in catalog.template_for_day(day_id)
    ]
