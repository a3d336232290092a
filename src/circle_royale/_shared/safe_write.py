# Area: Shared
"""
circle_royale._shared.safe_write — Fire-and-forget side effects
===============================================================

Persistence and match-log writes made during gameplay must never break
a timer tick or a claim. They go through ``fire_and_forget``, which
logs the failure and returns None instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger("circle_royale.safe_write")


def fire_and_forget(operation: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run ``fn``; on any exception log a warning and return None."""
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        logger.warning("%s failed: %s", operation, e, exc_info=True)
        return None
