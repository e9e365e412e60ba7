"""
Configuration constants for the circuit coach.

Program content (exercises, day templates, phases) lives in the bundled
catalog.yaml; the values here are the fixed rules the engine and the
settings layer apply around that content.
"""

from typing import Final

# =============================================================================
# PROGRAM LENGTH
# =============================================================================

MIN_WEEK: Final[int] = 1
MAX_WEEK: Final[int] = 8  # Phases in catalog.yaml must cover MIN_WEEK..MAX_WEEK

# =============================================================================
# DAY TEMPLATES
# =============================================================================

DAY_IDS: Final[tuple[str, ...]] = ("A", "B", "C")
DEFAULT_DAY: Final[str] = "A"

# =============================================================================
# TIMER
# =============================================================================

DEFAULT_WORK_SECONDS: Final[int] = 40  # Work segment length for every exercise
MIN_SEGMENT_SECONDS: Final[int] = 10  # Floor for user-entered work/rest lengths
MIN_ROUNDS: Final[int] = 1
TICK_INTERVAL_SECONDS: Final[float] = 1.0

# =============================================================================
# TARGET SCALING
# =============================================================================

TIME_TARGET_STEP_SECONDS: Final[int] = 5  # Timed targets round to this multiple

# =============================================================================
# PERSISTENCE
# =============================================================================

SETTINGS_DIR_NAME: Final[str] = ".circuit-coach"
SETTINGS_FILE_NAME: Final[str] = "settings.json"
DEFAULT_DARK_THEME: Final[bool] = True


def completion_key(week: int, day: str) -> str:
    """Storage key for the completion map of one (week, day) pair."""
    return f"completion_week{week}_day{day}"
