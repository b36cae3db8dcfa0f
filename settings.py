"""JSON-based settings persistence for the mini date picker."""

import json
import logging
import os

from calendar_logic import Bounds, DatePickerError, InvalidBounds, parse_date

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-date-picker-settings.json")

_DEFAULTS = {
    "min_date": "1900-1-1",
    "max_date": "2200-1-1",
    "range_picker": False,
    "only_show_current_month_days": False,
    "hide_last_faded_row": False,
    "highlight_today": True,
    "short_week_label": False,
    "first_weekday": 6,  # Sunday
    "debug": False,
}

_BOOL_KEYS = (
    "range_picker",
    "only_show_current_month_days",
    "hide_last_faded_row",
    "highlight_today",
    "short_week_label",
    "debug",
)


def load_settings() -> dict:
    """Load settings from disk, returning defaults for missing or invalid keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(_SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_PATH, exc)
        return settings
    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", _SETTINGS_PATH)
        return settings

    for key in _BOOL_KEYS:
        if key in stored and isinstance(stored[key], bool):
            settings[key] = stored[key]

    fw = stored.get("first_weekday")
    if isinstance(fw, int) and not isinstance(fw, bool) and 0 <= fw <= 6:
        settings["first_weekday"] = fw

    for key in ("min_date", "max_date"):
        if key not in stored:
            continue
        try:
            parse_date(stored[key])
        except DatePickerError as exc:
            logger.warning("Invalid %s in settings, using default: %s", key, exc)
            continue
        settings[key] = stored[key]

    try:
        Bounds(parse_date(settings["min_date"]), parse_date(settings["max_date"]))
    except InvalidBounds as exc:
        logger.warning("Invalid date bounds in settings, using defaults: %s", exc)
        settings["min_date"] = _DEFAULTS["min_date"]
        settings["max_date"] = _DEFAULTS["max_date"]
    return settings


def save_settings(settings: dict) -> None:
    """Persist settings to disk."""
    with open(_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
