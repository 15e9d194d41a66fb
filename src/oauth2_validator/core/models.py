"""Typed, immutable records used by the validator core."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Final, Iterable

# RFC 6749 §4.1.2 recommends a maximum code lifetime of 10 minutes
DEFAULT_CODE_LIFETIME_MSEC: Final[int] = 10 * 60 * 1000


@dataclass(frozen=True, slots=True)
class Client:
    """A registered client as seen by the validator (read-only)."""

    client_id: str
    client_secret: str
    redirect_uri: str
    # None means "defer to the global scope set"
    allowed_scopes: frozenset[str] | None = None

    def __post_init__(self) -> None:
        if self.allowed_scopes is not None:
            object.__setattr__(self, "allowed_scopes", frozenset(self.allowed_scopes))

    @classmethod
    def create(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Iterable[str] | None = None,
    ) -> "Client":
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            allowed_scopes=frozenset(scopes) if scopes is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Accessor:
    """Authorization-code state for one client.

    The code moves through ``issued -> valid -> (consumed | expired)``.  The
    validator only observes these transitions; the host records consumption
    by storing the copy returned from :meth:`consumed`.
    """

    client: Client
    authorized_code: str | None = None
    code_issued_at_msec: int | None = None
    code_lifetime_msec: int = DEFAULT_CODE_LIFETIME_MSEC
    code_consumed: bool = False
    # granted scope and the state echoed back to the client
    scope: str | None = None
    state: str | None = None

    @classmethod
    def issue(
        cls,
        client: Client,
        code: str,
        issued_at_msec: int,
        *,
        lifetime_msec: int = DEFAULT_CODE_LIFETIME_MSEC,
        scope: str | None = None,
        state: str | None = None,
    ) -> "Accessor":
        if lifetime_msec <= 0:
            raise ValueError("code lifetime must be positive")
        return cls(
            client=client,
            authorized_code=code,
            code_issued_at_msec=issued_at_msec,
            code_lifetime_msec=lifetime_msec,
            scope=scope,
            state=state,
        )

    def is_code_expired(self, now_msec: int) -> bool:
        """Return *True* once ``lifetime`` milliseconds have elapsed since issue."""
        if self.code_issued_at_msec is None:
            return True
        return now_msec - self.code_issued_at_msec >= self.code_lifetime_msec

    def consumed(self) -> "Accessor":
        return dataclasses.replace(self, code_consumed=True)
