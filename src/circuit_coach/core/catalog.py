"""
Program catalog: exercise library, day templates, and the phase table.

Loaded from the bundled ``src/circuit_coach/catalog.yaml`` at first use.
Everything is validated at load time so that a broken template or a gap
in the phase table fails immediately rather than when a plan is rendered:

- every day template references only keys present in the exercise library
  (UnknownExercise)
- every exercise has a known kind and a positive base target (CatalogError)
- phases cover MIN_WEEK..MAX_WEEK with no gaps and no overlaps (CatalogError)

Usage:
    from circuit_coach.core.catalog import get_catalog
    catalog = get_catalog()
    phase = catalog.phase_for_week(3)
"""

from __future__ import annotations

import importlib.resources
from functools import lru_cache
from typing import Any

import yaml

from .config import DAY_IDS, MAX_WEEK, MIN_WEEK
from .errors import CatalogError, OutOfRangeWeek, UnknownExercise
from .models import DayTemplate, Exercise, Phase

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset({"name", "kind", "base"})
_REQUIRED_PHASE_FIELDS: frozenset[str] = frozenset({"weeks", "rounds", "rest", "bump"})


# ---------------------------------------------------------------------------
# Raw dict → model conversion
# ---------------------------------------------------------------------------


def exercise_from_dict(key: str, d: dict) -> Exercise:
    """Convert a raw catalog entry to an Exercise.

    Raises CatalogError if a required field is absent or invalid.
    """
    if not isinstance(d, dict):
        raise CatalogError(f"Exercise '{key}' must be a mapping, got {d!r}")
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise CatalogError(f"Exercise '{key}' missing fields: {sorted(missing)}")
    diagram = d.get("diagram")
    try:
        return Exercise(
            key=key,
            name=str(d["name"]),
            kind=str(d["kind"]),  # type: ignore[arg-type]
            base_target=int(d["base"]),
            cues=tuple(str(c) for c in d.get("cues") or ()),
            diagram=str(diagram) if diagram else None,
        )
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Exercise '{key}': {e}") from e


def phase_from_dict(d: dict) -> Phase:
    """Convert a raw phase entry ({weeks: [first, last], rounds, rest, bump}) to a Phase."""
    if not isinstance(d, dict):
        raise CatalogError(f"Phase entry must be a mapping, got {d!r}")
    missing = _REQUIRED_PHASE_FIELDS - set(d)
    if missing:
        raise CatalogError(f"Phase missing fields: {sorted(missing)}")
    weeks = d["weeks"]
    if not isinstance(weeks, list) or len(weeks) != 2:
        raise CatalogError(f"Phase weeks must be [first, last], got {weeks!r}")
    try:
        return Phase(
            first_week=int(weeks[0]),
            last_week=int(weeks[1]),
            rounds=int(d["rounds"]),
            rest_seconds=int(d["rest"]),
            bump=float(d["bump"]),
        )
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Phase {weeks!r}: {e}") from e


def _check_partition(phases: list[Phase]) -> None:
    """Raise CatalogError unless phases cover MIN_WEEK..MAX_WEEK exactly once each."""
    covered: dict[int, Phase] = {}
    for phase in phases:
        for week in phase.weeks:
            if week in covered:
                raise CatalogError(f"Week {week} is covered by more than one phase")
            covered[week] = phase
    expected = set(range(MIN_WEEK, MAX_WEEK + 1))
    gaps = sorted(expected - set(covered))
    if gaps:
        raise CatalogError(f"Weeks not covered by any phase: {gaps}")
    extra = sorted(set(covered) - expected)
    if extra:
        raise CatalogError(f"Phases cover weeks outside {MIN_WEEK}-{MAX_WEEK}: {extra}")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class ProgramCatalog:
    """
    Read-only registry of exercises, day templates and phases.

    All lookups are pure; the catalog never changes after construction.
    """

    def __init__(
        self,
        exercises: dict[str, Exercise],
        days: dict[str, DayTemplate],
        phases: list[Phase],
    ):
        for day in days.values():
            for key in day.exercise_keys:
                if key not in exercises:
                    raise UnknownExercise(key)
        _check_partition(phases)

        self._exercises = dict(exercises)
        self._days = dict(days)
        self._phases = sorted(phases, key=lambda p: p.first_week)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgramCatalog:
        """Build a catalog from the parsed YAML document."""
        if not isinstance(data, dict):
            raise CatalogError("Catalog document must be a mapping")
        raw_exercises = data.get("exercises") or {}
        raw_days = data.get("days") or {}
        raw_phases = data.get("phases") or []
        if not isinstance(raw_exercises, dict):
            raise CatalogError("Catalog 'exercises' must be a mapping")
        if not isinstance(raw_days, dict):
            raise CatalogError("Catalog 'days' must be a mapping")
        if not isinstance(raw_phases, list):
            raise CatalogError("Catalog 'phases' must be a list")

        exercises = {str(k): exercise_from_dict(str(k), v) for k, v in raw_exercises.items()}

        days: dict[str, DayTemplate] = {}
        for day_id, raw in raw_days.items():
            day_id = str(day_id)
            if day_id not in DAY_IDS:
                raise CatalogError(f"Unknown day id '{day_id}'. Valid IDs: {', '.join(DAY_IDS)}")
            if not isinstance(raw, dict):
                raise CatalogError(f"Day '{day_id}' must be a mapping")
            keys = raw.get("exercises") or []
            if not keys:
                raise CatalogError(f"Day '{day_id}' has no exercises")
            days[day_id] = DayTemplate(
                day_id=day_id,
                label=str(raw.get("label", "")),
                exercise_keys=tuple(str(k) for k in keys),
            )
        missing_days = [d for d in DAY_IDS if d not in days]
        if missing_days:
            raise CatalogError(f"Catalog missing day templates: {missing_days}")

        phases = [phase_from_dict(p) for p in raw_phases]
        return cls(exercises, days, phases)

    # -- lookups -------------------------------------------------------------

    @property
    def exercises(self) -> dict[str, Exercise]:
        return dict(self._exercises)

    @property
    def phases(self) -> list[Phase]:
        return list(self._phases)

    @property
    def day_ids(self) -> list[str]:
        return [d for d in DAY_IDS if d in self._days]

    def exercise_by_key(self, key: str) -> Exercise:
        """
        Return the Exercise registered under key.

        Raises:
            UnknownExercise: If key is not in the library
        """
        try:
            return self._exercises[key]
        except KeyError:
            raise UnknownExercise(key) from None

    def day(self, day_id: str) -> DayTemplate:
        """Return the DayTemplate for day_id (one of DAY_IDS)."""
        if day_id not in self._days:
            valid = ", ".join(self._days)
            raise ValueError(f"Unknown day '{day_id}'. Valid IDs: {valid}")
        return self._days[day_id]

    def template_for_day(self, day_id: str) -> tuple[str, ...]:
        """Return the ordered exercise keys for day_id."""
        return self.day(day_id).exercise_keys

    def phase_for_week(self, week: int) -> Phase:
        """
        Return the single Phase whose week range contains week.

        Raises:
            OutOfRangeWeek: If no phase covers week
        """
        for phase in self._phases:
            if phase.contains(week):
                return phase
        raise OutOfRangeWeek(week, MIN_WEEK, MAX_WEEK)


def load_catalog_yaml() -> dict[str, Any]:
    """Read and parse the bundled catalog.yaml."""
    ref = importlib.resources.files("circuit_coach").joinpath("catalog.yaml")
    try:
        data = yaml.safe_load(ref.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"circuit-coach: cannot read bundled catalog.yaml ({e})") from e
    if not isinstance(data, dict):
        raise CatalogError("circuit-coach: bundled catalog.yaml is empty or not a mapping")
    return data


@lru_cache(maxsize=1)
def get_catalog() -> ProgramCatalog:
    """Return the process-wide catalog, loading it on first call."""
    return ProgramCatalog.from_dict(load_catalog_yaml())
