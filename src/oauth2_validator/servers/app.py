"""Starlette application factory for the OAuth 2.0 endpoints."""

from __future__ import annotations

import logging

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from oauth2_validator.core.clock import Clock, default_clock
from oauth2_validator.core.registry import ClientRegistry
from oauth2_validator.core.scope import ScopePolicy
from oauth2_validator.core.store import AccessorStore, InMemoryAccessorStore
from oauth2_validator.core.validator import OAuth2Validator
from oauth2_validator.servers.correlation import CorrelationIdMiddleware
from oauth2_validator.servers.endpoints import TokenIssuer, register_oauth2_routes
from oauth2_validator.utils.environment import ServerSettings

logger = logging.getLogger("oauth2-validator.server.app")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def create_app(
    *,
    registry: ClientRegistry,
    token_issuer: TokenIssuer,
    store: AccessorStore | None = None,
    settings: ServerSettings | None = None,
    clock: Clock = default_clock,
) -> Starlette:
    """Return a Starlette app serving ``/authorize``, ``/token`` and ``/healthz``.

    *settings* defaults to :meth:`ServerSettings.from_env`.  The same *clock*
    drives code issuance, validation and the store's expiry sweep.
    """
    settings = settings or ServerSettings.from_env()
    validator = OAuth2Validator(
        clock=clock, scope_policy=ScopePolicy(global_scopes=settings.global_scopes)
    )
    store = store if store is not None else InMemoryAccessorStore(clock=clock)

    app = Starlette(
        debug=settings.debug,
        middleware=[
            Middleware(CorrelationIdMiddleware, header_name=settings.correlation_header)
        ],
    )
    app.add_route("/healthz", health_check, methods=["GET"])
    register_oauth2_routes(
        app,
        registry=registry,
        store=store,
        validator=validator,
        token_issuer=token_issuer,
        settings=settings,
    )
    logger.info("OAuth 2.0 endpoints mounted under %s", settings.base_path)
    return app
