"""Persistent configuration helpers for the pygame client."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

_SETTINGS_PATH = Path(__file__).resolve().parent / "user_settings.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "fps": 60,
    "volume": 1.0,
}


def load_user_settings() -> Dict[str, Any]:
    """Return persisted settings merged over the defaults."""
    settings = dict(DEFAULT_SETTINGS)
    try:
        with _SETTINGS_PATH.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return settings
    if isinstance(data, dict):
        settings.update(data)
    return settings


def save_user_settings(settings: Dict[str, Any]) -> None:
    """Persist user settings to disk, ignoring filesystem errors."""
    try:
        _SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
        with _SETTINGS_PATH.open("w", encoding="utf-8") as handle:
            json.dump(settings, handle, indent=2, sort_keys=True)
    except OSError:
        pass


__all__ = ["DEFAULT_SETTINGS", "load_user_settings", "save_user_settings"]
