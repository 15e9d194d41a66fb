"""Authorization and token endpoints backed by :class:`OAuth2Validator`.

Handlers are intentionally thin:

1. Decode the query string / form body into an :class:`OAuth2Message`.
2. Run the validator operations in the endpoint's fixed order.
3. Translate the first :class:`Problem` into a response, or complete the step.

SECURITY NOTE
-------------
• Client secrets, authorization codes and tokens are never logged.
• An error is only redirected to a client after its redirect URI matched the
  registered one; otherwise an HTML error page is rendered.
• Token issuance itself is delegated to the injected ``token_issuer``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response

from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.log_utils import get_validation_logger
from oauth2_validator.core.message import OAuth2Message
from oauth2_validator.core.models import Accessor, Client
from oauth2_validator.core.problems import ERROR_DESCRIPTION, Problem, ProblemKind
from oauth2_validator.core.registry import ClientRegistry
from oauth2_validator.core.store import AccessorStore, generate_code
from oauth2_validator.core.validator import OAuth2Validator
from oauth2_validator.servers.responses import (
    authorization_error_redirect,
    authorization_success_redirect,
    error_page,
    token_error_response,
    token_success_response,
)
from oauth2_validator.utils.environment import ServerSettings

_LOG = logging.getLogger("oauth2-validator.servers.endpoints")

TokenIssuer = Callable[[Accessor], dict[str, Any]]

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


def _invalid_request(description: str) -> Problem:
    return Problem(ProblemKind.INVALID_REQUEST, {ERROR_DESCRIPTION: description})


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def register_oauth2_routes(
    app: Starlette,
    *,
    registry: ClientRegistry,
    store: AccessorStore,
    validator: OAuth2Validator,
    token_issuer: TokenIssuer,
    settings: ServerSettings | None = None,
) -> None:
    """Attach ``/authorize`` and ``/token`` to *app* under ``settings.base_path``."""
    settings = settings or ServerSettings()
    base_path = settings.base_path

    def _resolve_client(msg: OAuth2Message) -> Client | Problem:
        client, problem = validator.lookup_client(msg, registry)
        if client is not None:
            return client
        return problem or Problem(ProblemKind.INVALID_CLIENT)

    # ----- GET {base}/authorize ------------------------------------------- #
    async def _authorize(request: Request) -> Response:
        log = get_validation_logger(
            base_logger_name="oauth2-validator.servers.authorize",
            endpoint="authorize",
            correlation_id=_correlation_id(request),
        )
        try:
            msg = OAuth2Message.from_form(request.method, str(request.url), request.url.query)
        except OAuth2ProblemError as exc:
            log.info("Rejected undecodable authorization request")
            return error_page(exc.problem)

        client = _resolve_client(msg)
        if isinstance(client, Problem):
            log.info("Authorization request for unknown or missing client")
            return error_page(client, 401 if client.wire_error == "invalid_client" else 400)
        log = log.bind(client_id=client.client_id)

        # nothing may be redirected before the URI is known to be registered
        problem = validator.validate_redirect_uri(msg, client)
        if problem is not None:
            log.info("Redirect URI rejected")
            return error_page(problem)

        state = msg.get("state")
        problem = validator.validate_response_type(msg) or validator.validate_scope(msg, client)
        if problem is not None:
            log.info("Authorization request failed: %s", problem.wire_error)
            return authorization_error_redirect(client.redirect_uri, problem, state)

        swept = store.cleanup_expired()
        if swept:
            _LOG.debug("Dropped %d expired authorization codes", swept)
        accessor = Accessor.issue(
            client,
            generate_code(),
            validator.now_msec(),
            lifetime_msec=settings.code_lifetime_msec,
            scope=msg.get("scope"),
            state=state,
        )
        store.save(accessor)
        log.info("Issued authorization code")
        return authorization_success_redirect(
            client.redirect_uri, accessor.authorized_code or "", state
        )

    # ----- POST {base}/token ---------------------------------------------- #
    async def _token(request: Request) -> Response:
        log = get_validation_logger(
            base_logger_name="oauth2-validator.servers.token",
            endpoint="token",
            correlation_id=_correlation_id(request),
        )
        content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
        if content_type and content_type != _FORM_CONTENT_TYPE:
            return token_error_response(_invalid_request(f"Content-Type must be {_FORM_CONTENT_TYPE}."))

        body = await request.body()
        try:
            msg = OAuth2Message.from_form(request.method, str(request.url), body.decode("utf-8"))
        except UnicodeDecodeError:
            return token_error_response(_invalid_request("Request body is not valid UTF-8."))
        except OAuth2ProblemError as exc:
            return token_error_response(exc.problem)

        problem = validator.validate_grant_type(msg)
        if problem is not None:
            return token_error_response(problem)
        if msg.get("grant_type") != "authorization_code":
            # recognised by the validator but not served by this host
            return token_error_response(Problem(ProblemKind.UNSUPPORTED_GRANT_TYPE))

        # authenticate the client before anything is learned about the code
        client = _resolve_client(msg)
        if isinstance(client, Problem):
            log.info("Token request for unknown or missing client")
            return token_error_response(client)
        log = log.bind(client_id=client.client_id)
        problem = validator.validate_client_id_with_password(msg, Accessor(client))
        if problem is not None:
            log.info("Client authentication failed: %s", problem.kind.value)
            return token_error_response(problem)

        code = msg.get("code")
        if code is None:
            return token_error_response(Problem.parameter_absent("code"))
        accessor = store.find_by_code(code)
        if accessor is None or accessor.client.client_id != client.client_id:
            log.info("Token request with a code not issued to this client")
            return token_error_response(Problem(ProblemKind.INVALID_GRANT))

        problem = validator.validate_token_request(msg, accessor)
        if problem is not None:
            log.info("Token request failed: %s", problem.kind.value)
            return token_error_response(problem)

        previous = store.consume(code)
        if previous is None or previous.code_consumed:
            # lost a race with a concurrent redemption
            return token_error_response(Problem(ProblemKind.CODE_ALREADY_USED))

        return token_success_response(token_issuer(previous))

    app.add_route(f"{base_path}/authorize", _authorize, methods=["GET"])
    app.add_route(f"{base_path}/token", _token, methods=["POST"])
