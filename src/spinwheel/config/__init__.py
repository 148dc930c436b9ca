"""Configuration for SPINWHEEL."""

from .settings import (
    Settings,
    WheelSettings,
    FetchSettings,
    DisplaySettings,
    get_settings,
)

__all__ = [
    "Settings",
    "WheelSettings",
    "FetchSettings",
    "DisplaySettings",
    "get_settings",
]
