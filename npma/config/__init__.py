"""Configuration module for npma."""

from npma.config.settings import (
    LogSettings,
    ScanSettings,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "LogSettings",
    "ScanSettings",
]
