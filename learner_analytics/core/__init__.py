"""
Core infrastructure: settings, logging, exceptions
"""
from .config import Settings, settings
from .exceptions import AnalyticsError, ProfileInvariantError
from .logging import setup_logging

__all__ = [
    "Settings",
    "settings",
    "AnalyticsError",
    "ProfileInvariantError",
    "setup_logging",
]
