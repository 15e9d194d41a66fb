"""Structured logging helpers for the validator and its host.

Validation log records carry a fixed set of context fields and nothing
else, so a handler never sees request secrets:

- ``client_id``      – The client identifier, masked past its first 6 chars
- ``endpoint``       – ``authorize`` or ``token``
- ``correlation_id`` – Per-request id set by the correlation middleware

Client secrets, authorization codes and raw parameter values are never
logged.

Usage
-----
>>> from oauth2_validator.core.log_utils import get_validation_logger
>>> log = get_validation_logger(endpoint="token")
>>> log = log.bind(client_id="s6BhdRkqt3")
>>> log.info("Validating token request")
INFO oauth2-validator.core client_id=s6BhdR**** endpoint=token ...
"""

from __future__ import annotations

import logging
from typing import Any, Final, MutableMapping

CLIENT_ID_KEEP: Final[int] = 6


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything past the first *keep* chars masked."""
    if not value:
        return "-"
    if len(value) <= keep:
        return "*" * len(value)
    return f"{value[:keep]}****"


class _ValidationLoggerAdapter(logging.LoggerAdapter):
    """Attach request context (client, endpoint, correlation id) to records."""

    def __init__(
        self,
        logger: logging.Logger,
        *,
        client_id: str | None = None,
        endpoint: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        context: dict[str, str] = {}
        if client_id:
            context["client_id"] = mask_sensitive(client_id, CLIENT_ID_KEEP)
        if endpoint:
            context["endpoint"] = endpoint
        if correlation_id:
            context["correlation_id"] = correlation_id
        super().__init__(logger, context)

    def bind(self, *, client_id: str | None = None) -> "_ValidationLoggerAdapter":
        """Return a copy that also carries *client_id*, once the client is known."""
        return _ValidationLoggerAdapter(
            self.logger,
            client_id=client_id,
            endpoint=self.extra.get("endpoint"),
            correlation_id=self.extra.get("correlation_id"),
        )

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_validation_logger(
    *,
    base_logger_name: str = "oauth2-validator.core",
    client_id: str | None = None,
    endpoint: str | None = None,
    correlation_id: str | None = None,
) -> _ValidationLoggerAdapter:
    """Return a logger adapter pre-filled with request context."""
    return _ValidationLoggerAdapter(
        logging.getLogger(base_logger_name),
        client_id=client_id,
        endpoint=endpoint,
        correlation_id=correlation_id,
    )
