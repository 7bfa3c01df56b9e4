"""
Core Utilities.

Time helpers shared by the services, middleware and health checks.
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    Note timestamps are stored naive and assumed to be UTC, so lifecycle
    comparisons (restore time >= trash time) never mix aware and naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def monotonic_start() -> float:
    """Start mark for elapsed_ms."""
    return time.perf_counter()


def elapsed_ms(start: float) -> int:
    """Whole milliseconds since a monotonic_start() mark."""
    return int((time.perf_counter() - start) * 1000)
