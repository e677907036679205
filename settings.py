"""JSON-based settings persistence for the mini date picker."""

import json
import logging
import os

log = logging.getLogger("mini_date_picker.settings")

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".mini-date-picker-settings.json")

_DEFAULTS = {
    "label_format": "%Y.%m",
    "dark_mode": False,
    "show_week_numbers": True,
    "first_weekday": 0,
    "window_x": None,
    "window_y": None,
}


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(path or _SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        log.warning("Ignoring unreadable settings file: %s", exc)
        return settings
    if not isinstance(stored, dict):
        log.warning("Ignoring settings file without a JSON object")
        return settings

    if isinstance(stored.get("label_format"), str) and stored["label_format"]:
        settings["label_format"] = stored["label_format"]
    for key in ("dark_mode", "show_week_numbers"):
        if key in stored and isinstance(stored[key], bool):
            settings[key] = stored[key]
    # bool is an int subclass
    fw = stored.get("first_weekday")
    if isinstance(fw, int) and not isinstance(fw, bool) and 0 <= fw <= 6:
        settings["first_weekday"] = fw
    for key in ("window_x", "window_y"):
        if isinstance(stored.get(key), int) and not isinstance(stored[key], bool):
            settings[key] = stored[key]
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
