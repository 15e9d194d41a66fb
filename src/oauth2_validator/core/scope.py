"""Scope grammar and policy.

RFC 6749 §3.3::

    scope       = scope-token *( SP scope-token )
    scope-token = 1*( %x21 / %x23-5B / %x5D-7E )

i.e. printable ASCII without space, double-quote and backslash.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Iterable

from oauth2_validator.core.models import Client

_EXCLUDED: Final[frozenset[str]] = frozenset({'"', "\\"})


def is_scope_token(token: str) -> bool:
    """Return *True* if *token* matches the RFC 6749 ``scope-token`` rule."""
    if not token:
        return False
    return all(0x21 <= ord(ch) <= 0x7E and ch not in _EXCLUDED for ch in token)


def split_scope(value: str) -> list[str]:
    """Split on single spaces; doubled or edge spaces yield empty tokens."""
    return value.split(" ")


@dataclass(frozen=True)
class ScopePolicy:
    """Permitted scope tokens: per client, falling back to a global set."""

    global_scopes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, scopes: Iterable[str]) -> "ScopePolicy":
        return cls(global_scopes=frozenset(scopes))

    def allowed_for(self, client: Client) -> frozenset[str]:
        if client.allowed_scopes is not None:
            return client.allowed_scopes
        return self.global_scopes

    def permits(self, client: Client, value: str) -> bool:
        allowed = self.allowed_for(client)
        return all(
            is_scope_token(token) and token in allowed for token in split_scope(value)
        )
