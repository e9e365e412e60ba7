"""
JSON serialization for persisted settings and completion marks.

Handles conversion between CoachSettings / completion maps and the
JSON-compatible values stored by SettingsStore.
"""

import re
from typing import Any

from ..core.config import DAY_IDS, MAX_WEEK, MIN_SEGMENT_SECONDS, MIN_ROUNDS, MIN_WEEK
from ..core.models import CoachSettings

_MARK_ID_RE = re.compile(r"^\d+_\d+$")

# Stored key → CoachSettings attribute
SETTINGS_KEYS: dict[str, str] = {
    "theme_dark": "dark_theme",
    "week": "week",
    "day": "day",
    "rounds": "rounds",
    "work_seconds": "work_seconds",
    "rest_seconds": "rest_seconds",
}


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _validate_int(value: Any, name: str) -> int:
    # bool is an int subclass; a stored true/false is never a valid count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    return value


def validate_week(value: Any) -> int:
    """
    Validate a training week.

    Raises:
        ValidationError: If value is not an integer in MIN_WEEK..MAX_WEEK
    """
    week = _validate_int(value, "week")
    if not MIN_WEEK <= week <= MAX_WEEK:
        raise ValidationError(f"week must be between {MIN_WEEK} and {MAX_WEEK}, got {week}")
    return week


def validate_day(value: Any) -> str:
    """
    Validate a day id.

    Raises:
        ValidationError: If value is not one of DAY_IDS
    """
    if value not in DAY_IDS:
        raise ValidationError(f"Invalid day: {value!r}. Must be one of {DAY_IDS}")
    return value


def validate_rounds(value: Any) -> int:
    rounds = _validate_int(value, "rounds")
    if rounds < MIN_ROUNDS:
        raise ValidationError(f"rounds must be at least {MIN_ROUNDS}, got {rounds}")
    return rounds


def validate_segment_seconds(value: Any, name: str) -> int:
    """
    Validate a work or rest length.

    Raises:
        ValidationError: If value is not an integer of at least MIN_SEGMENT_SECONDS
    """
    seconds = _validate_int(value, name)
    if seconds < MIN_SEGMENT_SECONDS:
        raise ValidationError(f"{name} must be at least {MIN_SEGMENT_SECONDS}s, got {seconds}")
    return seconds


def validate_flag(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be true or false, got {value!r}")
    return value


def validate_setting(key: str, value: Any) -> Any:
    """
    Validate one stored settings value by its storage key.

    Raises:
        ValidationError: If the key is unknown or the value is invalid
    """
    if key == "theme_dark":
        return validate_flag(value, key)
    if key == "week":
        return validate_week(value)
    if key == "day":
        return validate_day(value)
    if key == "rounds":
        return validate_rounds(value)
    if key in ("work_seconds", "rest_seconds"):
        return validate_segment_seconds(value, key)
    raise ValidationError(f"Unknown settings key: {key}")


def settings_to_dict(settings: CoachSettings) -> dict[str, Any]:
    """
    Convert CoachSettings to JSON-compatible dict keyed by storage key.

    Args:
        settings: Settings to convert

    Returns:
        Dict representation
    """
    return {key: getattr(settings, attr) for key, attr in SETTINGS_KEYS.items()}


def dict_to_completion_marks(value: Any) -> dict[str, bool]:
    """
    Convert a stored completion map to {mark_id: bool}.

    Args:
        value: Stored value, expected {"<step>_<round>": bool, ...}

    Returns:
        Validated copy of the map

    Raises:
        ValidationError: If value is not a mapping of mark ids to booleans
    """
    if not isinstance(value, dict):
        raise ValidationError(f"Completion map must be an object, got {type(value).__name__}")
    marks: dict[str, bool] = {}
    for key, done in value.items():
        if not isinstance(key, str) or not _MARK_ID_RE.match(key):
            raise ValidationError(f"Invalid completion key: {key!r}. Expected '<step>_<round>'")
        marks[key] = validate_flag(done, f"completion[{key}]")
    return marks
