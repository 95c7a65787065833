"""
Configuration package for trace-deck.

This package provides centralized configuration management using Pydantic settings.
"""

from .settings import (
    Settings,
    ProcessingSettings,
    BatchSettings,
    LoggingSettings,
    settings,
)

__all__ = [
    "Settings",
    "ProcessingSettings",
    "BatchSettings",
    "LoggingSettings",
    "settings",
]

# Version info
__version__ = "0.1.0"
