"""OAuth 2.0 request-validation core.

This namespace hosts **HTTP-agnostic** building blocks for the authorization
and token endpoints of an RFC 6749 authorization server.  Nothing here
performs I/O; clocks, client registries and code stores are injected.

Sub-modules
-----------
clock
    Test-friendly millisecond time abstraction.
form
    Form / query-string decoding and encoding.
message
    Immutable request carrier with parameter lookup.
problems
    Internal problem taxonomy and its RFC 6749 wire mapping.
errors
    Data-carrying exception used to short-circuit checks.
models
    Immutable client and authorization-code records.
registry
    Read-only client lookup.
scope
    Scope grammar and permitted-scope policy.
validator
    The validation operations.
store
    Authorization-code bookkeeping for hosts.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, default_clock, frozen_clock  # noqa: F401
from .errors import OAuth2ProblemError  # noqa: F401
from .form import decode_form, decode_percent, encode_form  # noqa: F401
from .log_utils import get_validation_logger, mask_sensitive  # noqa: F401
from .message import OAuth2Message, Parameter  # noqa: F401
from .models import Accessor, Client  # noqa: F401
from .problems import WIRE_ERRORS, Problem, ProblemKind, wire_error  # noqa: F401
from .registry import ClientRegistry, InMemoryClientRegistry  # noqa: F401
from .scope import ScopePolicy  # noqa: F401
from .store import AccessorStore, InMemoryAccessorStore, generate_code  # noqa: F401
from .validator import GRANT_TYPES, OAuth2Validator  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "default_clock",
    "frozen_clock",
    # errors
    "OAuth2ProblemError",
    # form
    "decode_form",
    "decode_percent",
    "encode_form",
    # logging helpers
    "get_validation_logger",
    "mask_sensitive",
    # message
    "OAuth2Message",
    "Parameter",
    # models
    "Accessor",
    "Client",
    # problems
    "WIRE_ERRORS",
    "Problem",
    "ProblemKind",
    "wire_error",
    # registry
    "ClientRegistry",
    "InMemoryClientRegistry",
    # scope
    "ScopePolicy",
    # store
    "AccessorStore",
    "InMemoryAccessorStore",
    "generate_code",
    # validator
    "GRANT_TYPES",
    "OAuth2Validator",
]
