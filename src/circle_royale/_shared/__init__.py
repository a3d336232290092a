# Area: Shared
"""
Shared utilities used by the core and the event layer.

This package contains:
- Logging configuration
- Per-event JSON match log
- Fire-and-forget wrapper for gameplay side effects
"""

from .logging_config import setup_logging
from .match_log import MatchLogWriter
from .safe_write import fire_and_forget

__all__ = [
    "setup_logging",
    "MatchLogWriter",
    "fire_and_forget",
]
