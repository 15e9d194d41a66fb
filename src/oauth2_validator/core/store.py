"""Authorization-code bookkeeping owned by the host.

The validator only *observes* the code lifecycle.  Issuing codes and
recording that a code was redeemed happens here, behind a narrow
:class:`AccessorStore` interface so that hosts can swap in their own backend.

* **Single use** – :meth:`consume` flips ``code_consumed`` under a lock, so of
  two concurrent redemptions exactly one sees the unconsumed accessor.
* **Expiry sweep** – :meth:`cleanup_expired` drops accessors whose code has
  expired according to an injected clock, consumed or not.  The host calls it
  whenever it issues a code, so the store stays bounded by the codes issued
  within one lifetime.
"""

from __future__ import annotations

import logging
import secrets
import threading
from typing import Protocol, runtime_checkable

from oauth2_validator.core.clock import Clock, default_clock
from oauth2_validator.core.log_utils import CLIENT_ID_KEEP, mask_sensitive
from oauth2_validator.core.models import Accessor

_LOG = logging.getLogger("oauth2-validator.core.store")

_CODE_BYTES = 24


def generate_code() -> str:
    """Return a fresh, URL-safe authorization code."""
    return secrets.token_urlsafe(_CODE_BYTES)


# --------------------------------------------------------------------------- #
# public interface                                                            #
# --------------------------------------------------------------------------- #


@runtime_checkable
class AccessorStore(Protocol):
    """Minimal persistence contract for issued authorization codes."""

    def save(self, accessor: Accessor) -> None: ...
    def find_by_code(self, code: str) -> Accessor | None: ...
    def consume(self, code: str) -> Accessor | None: ...
    def cleanup_expired(self) -> int: ...


# --------------------------------------------------------------------------- #
# in-memory implementation                                                    #
# --------------------------------------------------------------------------- #


class InMemoryAccessorStore(AccessorStore):
    """Thread-safe dict implementation of :class:`AccessorStore`."""

    def __init__(self, clock: Clock = default_clock) -> None:
        self._clock = clock
        self._by_code: dict[str, Accessor] = {}
        self._lock = threading.Lock()

    def save(self, accessor: Accessor) -> None:
        if accessor.authorized_code is None:
            raise ValueError("accessor has no authorization code")
        with self._lock:
            self._by_code[accessor.authorized_code] = accessor

    def find_by_code(self, code: str) -> Accessor | None:
        with self._lock:
            return self._by_code.get(code)

    def consume(self, code: str) -> Accessor | None:
        """Mark *code* as used; returns the accessor as it was *before* the call.

        ``None`` means the code is unknown.  A returned accessor whose
        ``code_consumed`` is already *True* means another caller won.
        """
        with self._lock:
            current = self._by_code.get(code)
            if current is None:
                return None
            if current.code_consumed:
                return current
            self._by_code[code] = current.consumed()
        _LOG.info(
            "Consumed authorization code for client_id=%s",
            mask_sensitive(current.client.client_id, CLIENT_ID_KEEP),
        )
        return current

    def cleanup_expired(self) -> int:
        now = int(self._clock())
        with self._lock:
            expired = [c for c, a in self._by_code.items() if a.is_code_expired(now)]
            for code in expired:
                del self._by_code[code]
        return len(expired)

    def __len__(self) -> int:
        return len(self._by_code)
