"""Settings access for vedicengine."""

from __future__ import annotations

from .settings import (
    Settings,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "Settings",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
