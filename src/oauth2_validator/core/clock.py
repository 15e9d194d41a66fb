"""Clock abstraction for testable time handling in the validator core.

This module defines a `Clock` protocol representing callables that return the
current UNIX time in *milliseconds* as ``int``.  Authorization-code expiry
checks MUST depend on an injected ``Clock`` instance rather than calling
``time.time()`` directly.

Example
-------
>>> from oauth2_validator.core.clock import default_clock
>>> now = default_clock()
>>> isinstance(now, int)
True
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Callable protocol returning *milliseconds* since the UNIX epoch."""

    def __call__(self) -> int: ...


def default_clock() -> int:
    """Default implementation backed by ``time.time_ns()``.

    Returns
    -------
    int
        Milliseconds since the UNIX epoch.
    """
    return time.time_ns() // 1_000_000


def frozen_clock(now_msec: int) -> Clock:
    """Return a clock that always reports *now_msec*."""
    return lambda now_msec=now_msec: now_msec
