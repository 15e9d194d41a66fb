"""Problem taxonomy for request validation.

A :class:`Problem` is the internal, structured description of a failed
precondition.  Its :class:`ProblemKind` is deliberately finer grained than
the error codes RFC 6749 allows on the wire, so every kind maps onto exactly
one wire error through :data:`WIRE_ERRORS`.

The mapping depends on the kind alone, never on ``Problem.parameters``.
"""

from __future__ import annotations

import enum
import types
from dataclasses import dataclass, field
from typing import Any, Final, Mapping

PARAMETER_NAME: Final[str] = "parameter_name"
ERROR_DESCRIPTION: Final[str] = "error_description"


class ProblemKind(str, enum.Enum):
    """Closed set of internal problem identifiers."""

    PARAMETER_ABSENT = "parameter_absent"
    PARAMETER_REJECTED = "parameter_rejected"
    CLIENT_ID_MISMATCH = "client_id_mismatch"
    CLIENT_SECRET_MISMATCH = "client_secret_mismatch"
    REDIRECT_URI_MISMATCH = "redirect_uri_mismatch"
    UNSUPPORTED_RESPONSE_TYPE = "unsupported_response_type"
    UNSUPPORTED_GRANT_TYPE = "unsupported_grant_type"
    INVALID_SCOPE = "invalid_scope"
    INVALID_CLIENT = "invalid_client"
    INVALID_REQUEST = "invalid_request"
    INVALID_GRANT = "invalid_grant"
    CODE_EXPIRED = "code_expired"
    CODE_ALREADY_USED = "code_already_used"


# RFC 6749 §4.1.2.1 / §5.2 error codes
WIRE_ERRORS: Final[Mapping[ProblemKind, str]] = {
    ProblemKind.PARAMETER_ABSENT: "invalid_request",
    ProblemKind.PARAMETER_REJECTED: "invalid_request",
    ProblemKind.INVALID_REQUEST: "invalid_request",
    ProblemKind.UNSUPPORTED_RESPONSE_TYPE: "unsupported_response_type",
    ProblemKind.UNSUPPORTED_GRANT_TYPE: "unsupported_grant_type",
    ProblemKind.INVALID_SCOPE: "invalid_scope",
    ProblemKind.CLIENT_ID_MISMATCH: "invalid_client",
    ProblemKind.INVALID_CLIENT: "invalid_client",
    ProblemKind.CLIENT_SECRET_MISMATCH: "unauthorized_client",
    ProblemKind.REDIRECT_URI_MISMATCH: "invalid_request",
    ProblemKind.INVALID_GRANT: "invalid_grant",
    ProblemKind.CODE_EXPIRED: "invalid_grant",
    ProblemKind.CODE_ALREADY_USED: "invalid_grant",
}

_DESCRIPTIONS: Final[Mapping[ProblemKind, str]] = {
    ProblemKind.PARAMETER_ABSENT: "A required parameter is missing.",
    ProblemKind.PARAMETER_REJECTED: "A parameter could not be decoded.",
    ProblemKind.INVALID_REQUEST: "The request is malformed.",
    ProblemKind.UNSUPPORTED_RESPONSE_TYPE: "The response type is not supported.",
    ProblemKind.UNSUPPORTED_GRANT_TYPE: "The grant type is not supported.",
    ProblemKind.INVALID_SCOPE: "The requested scope is invalid or not permitted.",
    ProblemKind.CLIENT_ID_MISMATCH: "Client authentication failed.",
    ProblemKind.INVALID_CLIENT: "Unknown client.",
    ProblemKind.CLIENT_SECRET_MISMATCH: "Client authentication failed.",
    ProblemKind.REDIRECT_URI_MISMATCH: "The redirect URI does not match the registered one.",
    ProblemKind.INVALID_GRANT: "The authorization code is invalid.",
    ProblemKind.CODE_EXPIRED: "The authorization code has expired.",
    ProblemKind.CODE_ALREADY_USED: "The authorization code has already been used.",
}

_NAMED_KINDS: Final[frozenset[ProblemKind]] = frozenset(
    {ProblemKind.PARAMETER_ABSENT, ProblemKind.PARAMETER_REJECTED}
)


def wire_error(kind: ProblemKind) -> str:
    """Return the RFC 6749 error code for *kind*."""
    return WIRE_ERRORS[kind]


@dataclass(frozen=True)
class Problem:
    """Immutable description of a single failed precondition.

    ``parameters`` carries a ``parameter_name`` entry if and only if the kind
    is PARAMETER_ABSENT or PARAMETER_REJECTED.
    """

    kind: ProblemKind
    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only snapshot; the caller keeps its own dict
        object.__setattr__(self, "parameters", types.MappingProxyType(dict(self.parameters)))
        named = PARAMETER_NAME in self.parameters
        if self.kind in _NAMED_KINDS and not named:
            raise ValueError(f"{self.kind.name} requires a {PARAMETER_NAME!r} entry")
        if self.kind not in _NAMED_KINDS and named:
            raise ValueError(f"{self.kind.name} must not carry {PARAMETER_NAME!r}")

    def __hash__(self) -> int:
        return hash((self.kind, tuple(sorted(self.parameters.items()))))

    # ----- constructors ---------------------------------------------------- #
    @classmethod
    def parameter_absent(cls, name: str) -> "Problem":
        return cls(ProblemKind.PARAMETER_ABSENT, {PARAMETER_NAME: name})

    @classmethod
    def parameter_rejected(cls, name: str) -> "Problem":
        return cls(ProblemKind.PARAMETER_REJECTED, {PARAMETER_NAME: name})

    # ----- accessors ------------------------------------------------------- #
    @property
    def parameter_name(self) -> str | None:
        return self.parameters.get(PARAMETER_NAME)

    @property
    def wire_error(self) -> str:
        return WIRE_ERRORS[self.kind]

    @property
    def description(self) -> str:
        return self.parameters.get(ERROR_DESCRIPTION) or _DESCRIPTIONS[self.kind]

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-serialisable error body used at the token endpoint."""
        payload: dict[str, Any] = {
            "error": self.wire_error,
            "error_description": self.description,
        }
        if self.parameter_name is not None:
            payload["error_parameter"] = self.parameter_name
        return payload
