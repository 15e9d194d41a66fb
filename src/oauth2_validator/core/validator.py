"""Precondition checks for the authorization and token endpoints.

Each public ``validate_*`` method either returns ``None`` (success) or the
single :class:`~oauth2_validator.core.problems.Problem` describing the first
failed precondition.  Protocol failures never escape as exceptions.

Operations are independent of one another and keep no state between calls,
so one :class:`OAuth2Validator` may be shared across threads as long as the
injected clock is thread-safe.  Recording code consumption is the host's job.
"""

from __future__ import annotations

import functools
import hmac
import logging
from typing import Callable, Final, TypeVar

from oauth2_validator.core.clock import Clock, default_clock
from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.message import OAuth2Message
from oauth2_validator.core.models import Accessor, Client
from oauth2_validator.core.problems import ERROR_DESCRIPTION, Problem, ProblemKind
from oauth2_validator.core.registry import ClientRegistry
from oauth2_validator.core.scope import ScopePolicy

_LOG = logging.getLogger("oauth2-validator.core.validator")

RESPONSE_TYPE_CODE: Final[str] = "code"
GRANT_TYPES: Final[frozenset[str]] = frozenset(
    {"authorization_code", "password", "client_credentials", "refresh_token"}
)

_F = TypeVar("_F", bound=Callable[..., "Problem | None"])


def _fail(kind: ProblemKind, **parameters: str) -> OAuth2ProblemError:
    return OAuth2ProblemError(Problem(kind, parameters))


def _same_secret(supplied: str, expected: str) -> bool:
    # constant time regardless of where (or whether) the lengths differ
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def _returns_problem(func: _F) -> _F:
    """Turn an ``OAuth2ProblemError`` raised by *func* into its return value."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except OAuth2ProblemError as exc:
            _LOG.debug(
                "%s failed: problem=%s parameter=%s",
                func.__name__,
                exc.problem.kind.value,
                exc.problem.parameter_name or "-",
            )
            return exc.problem

    return wrapper  # type: ignore[return-value]


class OAuth2Validator:
    """Stateless validator with an injectable clock and scope policy."""

    def __init__(
        self,
        clock: Clock = default_clock,
        scope_policy: ScopePolicy | None = None,
    ) -> None:
        if not callable(clock):
            raise TypeError("clock must be callable")
        self._clock = clock
        self.scope_policy: ScopePolicy = scope_policy or ScopePolicy()

    def now_msec(self) -> int:
        return int(self._clock())

    # ------------------------------------------------------------------ #
    # Client authentication                                              #
    # ------------------------------------------------------------------ #
    @_returns_problem
    def validate_client_id_with_password(
        self, msg: OAuth2Message, accessor: Accessor
    ) -> Problem | None:
        """Check ``client_id`` / ``client_secret`` against the accessor's client."""
        client_id = msg.require("client_id")
        client_secret = msg.require("client_secret")
        if client_id != accessor.client.client_id:
            raise _fail(ProblemKind.CLIENT_ID_MISMATCH)
        if not _same_secret(client_secret, accessor.client.client_secret):
            raise _fail(ProblemKind.CLIENT_SECRET_MISMATCH)
        return None

    # ------------------------------------------------------------------ #
    # Authorization request                                              #
    # ------------------------------------------------------------------ #
    @_returns_problem
    def validate_redirect_uri(self, msg: OAuth2Message, client: Client) -> Problem | None:
        """Exact match against the registered URI; no query or fragment stripping.

        Message values are already percent-decoded by the form decoder.
        """
        redirect_uri = msg.require("redirect_uri")
        if redirect_uri != client.redirect_uri:
            raise _fail(ProblemKind.REDIRECT_URI_MISMATCH)
        return None

    @_returns_problem
    def validate_scope(self, msg: OAuth2Message, client: Client) -> Problem | None:
        scope = msg.get("scope")
        if scope is None:
            return None
        if not self.scope_policy.permits(client, scope):
            raise _fail(ProblemKind.INVALID_SCOPE)
        return None

    @_returns_problem
    def validate_response_type(self, msg: OAuth2Message) -> Problem | None:
        """Only ``code`` is supported.

        An absent ``response_type`` is reported as INVALID_REQUEST rather than
        PARAMETER_ABSENT; the authorization endpoint's error contract carries no
        ``parameter_name`` for it.
        """
        response_type = msg.get("response_type")
        if response_type is None:
            raise _fail(
                ProblemKind.INVALID_REQUEST,
                **{ERROR_DESCRIPTION: "Missing response_type."},
            )
        if response_type != RESPONSE_TYPE_CODE:
            raise _fail(ProblemKind.UNSUPPORTED_RESPONSE_TYPE)
        return None

    # ------------------------------------------------------------------ #
    # Token request                                                      #
    # ------------------------------------------------------------------ #
    @_returns_problem
    def validate_grant_type(self, msg: OAuth2Message) -> Problem | None:
        if msg.require("grant_type") not in GRANT_TYPES:
            raise _fail(ProblemKind.UNSUPPORTED_GRANT_TYPE)
        return None

    @_returns_problem
    def validate_authorization_code(
        self, msg: OAuth2Message, accessor: Accessor
    ) -> Problem | None:
        """Check the presented code: match, then expiry, then prior use."""
        code = msg.require("code")
        if accessor.authorized_code is None or not _same_secret(
            code, accessor.authorized_code
        ):
            raise _fail(ProblemKind.INVALID_GRANT)
        if accessor.code_issued_at_msec is None:
            raise _fail(ProblemKind.INVALID_GRANT)
        if accessor.is_code_expired(self.now_msec()):
            raise _fail(ProblemKind.CODE_EXPIRED)
        if accessor.code_consumed:
            raise _fail(ProblemKind.CODE_ALREADY_USED)
        return None

    # ------------------------------------------------------------------ #
    # Composition helpers for hosts                                      #
    # ------------------------------------------------------------------ #
    def lookup_client(
        self, msg: OAuth2Message, registry: ClientRegistry
    ) -> tuple[Client | None, Problem | None]:
        """Resolve ``client_id`` through *registry*."""
        client_id = msg.get("client_id")
        if client_id is None:
            return None, Problem.parameter_absent("client_id")
        client = registry.get_client(client_id)
        if client is None:
            _LOG.debug("Unknown client requested")
            return None, Problem(ProblemKind.INVALID_CLIENT)
        return client, None

    def validate_authorization_request(
        self, msg: OAuth2Message, client: Client
    ) -> Problem | None:
        """redirect_uri, then response_type, then scope; first failure wins."""
        return (
            self.validate_redirect_uri(msg, client)
            or self.validate_response_type(msg)
            or self.validate_scope(msg, client)
        )

    def validate_token_request(
        self, msg: OAuth2Message, accessor: Accessor
    ) -> Problem | None:
        """grant_type, client credentials, redirect_uri, then the code itself."""
        return (
            self.validate_grant_type(msg)
            or self.validate_client_id_with_password(msg, accessor)
            or self.validate_redirect_uri(msg, accessor.client)
            or self.validate_authorization_code(msg, accessor)
        )

    @staticmethod
    def require_success(problem: Problem | None) -> None:
        """Raise :class:`OAuth2ProblemError` if *problem* is set."""
        if problem is not None:
            raise OAuth2ProblemError(problem)
