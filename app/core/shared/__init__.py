"""
Shared utilities module

Domain-agnostic helpers used across the application.
"""

from .keyed_lock import KeyedLock
from .logger import JSONFormatter, configure_logging

__all__ = [
    "KeyedLock",
    "JSONFormatter",
    "configure_logging",
]
