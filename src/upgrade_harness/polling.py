"""Bounded retry with linear backoff."""

import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def poll(
    attempt: Callable[[], T | None],
    attempts: int,
    interval: float,
    sleep: Callable[[float], None] | None = None,
) -> T | None:
    """Call ``attempt`` until it returns something other than None.

    After the Nth miss the caller sleeps ``interval * N`` seconds, so the
    total wait for ``attempts`` misses is ``interval * attempts * (attempts + 1) / 2``.
    Exceptions raised by ``attempt`` propagate immediately and end the loop.

    Args:
        attempt: Probe returning a value on success, None to retry
        attempts: Maximum number of calls
        interval: Backoff unit in seconds
        sleep: Sleep function (default: time.sleep)

    Returns:
        The first non-None value, or None if every attempt missed
    """
    sleep = sleep or time.sleep
    for n in range(1, attempts + 1):
        result = attempt()
        if result is not None:
            return result
        sleep(interval * n)
    return None
