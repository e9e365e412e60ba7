"""
JSON-file key-value storage for settings and completion marks.

Everything lives in one JSON object (default ~/.circuit-coach/settings.json):

    {
      "theme_dark": true, "week": 3, "day": "B", "rounds": 4,
      "work_seconds": 40, "rest_seconds": 60,
      "completion_week3_dayB": {"0_1": true, "1_1": false}
    }

Reads never fail: a missing, unreadable or malformed file (or field) is
reported with a warning and replaced by the built-in default.
"""

import json
import warnings
from pathlib import Path
from typing import Any

from ..core.catalog import ProgramCatalog, get_catalog
from ..core.config import (
    DEFAULT_DARK_THEME,
    DEFAULT_DAY,
    DEFAULT_WORK_SECONDS,
    MIN_WEEK,
    SETTINGS_DIR_NAME,
    SETTINGS_FILE_NAME,
    completion_key,
)
from ..core.models import CoachSettings
from .serializers import (
    SETTINGS_KEYS,
    ValidationError,
    dict_to_completion_marks,
    settings_to_dict,
    validate_setting,
)


class SettingsStore:
    """
    Persistence adapter: get/set of JSON values by key.

    The file is re-read on every access so that separate CLI invocations
    always see each other's writes.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store.

        Args:
            path: Path to the JSON settings file (created on first write)
        """
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if the settings file exists."""
        return self.path.exists()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            warnings.warn(
                f"circuit-coach: ignoring unreadable settings file {self.path} ({e}); "
                "using defaults.",
                stacklevel=3,
            )
            return {}
        if not isinstance(data, dict):
            warnings.warn(
                f"circuit-coach: settings file {self.path} is not a JSON object; using defaults.",
                stacklevel=3,
            )
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> Any | None:
        """Return the stored value for key, or None if absent or unreadable."""
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        """Store value under key, keeping all other keys."""
        data = self._read()
        data[key] = value
        self._write(data)

    def update(self, values: dict[str, Any]) -> None:
        """Store several keys in one write."""
        data = self._read()
        data.update(values)
        self._write(data)

    # -- settings record ----------------------------------------------------

    def load_settings(self, catalog: ProgramCatalog | None = None) -> CoachSettings:
        """
        Load the settings record, substituting defaults for bad or missing fields.

        rounds and rest_seconds default to the (loaded) week's phase values.
        """
        if catalog is None:
            catalog = get_catalog()
        data = self._read()

        values: dict[str, Any] = {}
        for key, attr in SETTINGS_KEYS.items():
            if key not in data:
                continue
            try:
                values[attr] = validate_setting(key, data[key])
            except ValidationError as e:
                warnings.warn(
                    f"circuit-coach: ignoring stored '{key}' ({e}); using default.",
                    stacklevel=2,
                )

        week = values.get("week", MIN_WEEK)
        phase = catalog.phase_for_week(week)
        return CoachSettings(
            week=week,
            day=values.get("day", DEFAULT_DAY),
            rounds=values.get("rounds", phase.rounds),
            work_seconds=values.get("work_seconds", DEFAULT_WORK_SECONDS),
            rest_seconds=values.get("rest_seconds", phase.rest_seconds),
            dark_theme=values.get("dark_theme", DEFAULT_DARK_THEME),
        )

    def save_settings(self, settings: CoachSettings) -> None:
        self.update(settings_to_dict(settings))

    # -- completion marks ---------------------------------------------------

    def load_completion(self, week: int, day: str) -> dict[str, bool]:
        """Return the completion map for (week, day); {} if absent or malformed."""
        key = completion_key(week, day)
        raw = self.get(key)
        if raw is None:
            return {}
        try:
            return dict_to_completion_marks(raw)
        except ValidationError as e:
            warnings.warn(
                f"circuit-coach: ignoring stored '{key}' ({e}); starting fresh.",
                stacklevel=2,
            )
            return {}

    def save_completion(self, week: int, day: str, marks: dict[str, bool]) -> None:
        self.set(completion_key(week, day), marks)


def get_default_settings_path() -> Path:
    """Return ~/.circuit-coach/settings.json."""
    return Path.home() / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


def get_default_store() -> SettingsStore:
    """
    Get a SettingsStore with the default path.

    Returns:
        SettingsStore instance
    """
    return SettingsStore(get_default_settings_path())
