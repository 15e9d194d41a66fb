"""Environment-driven settings for the Starlette host."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Final, Tuple

logger = logging.getLogger("oauth2-validator.utils.environment")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")

DEFAULT_BASE_PATH: Final[str] = "/oauth2"
DEFAULT_CODE_LIFETIME_SECONDS: Final[int] = 600
DEFAULT_CORRELATION_HEADER: Final[str] = "X-Correlation-ID"


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _normalise_base_path(raw: str | None) -> str:
    path = (raw or DEFAULT_BASE_PATH).strip()
    if not path.startswith("/"):
        path = "/" + path
    return path.rstrip("/")


@dataclass(frozen=True)
class ServerSettings:
    """Host configuration; the validator core itself reads no environment."""

    base_path: str = DEFAULT_BASE_PATH
    code_lifetime_seconds: int = DEFAULT_CODE_LIFETIME_SECONDS
    global_scopes: frozenset[str] = field(default_factory=frozenset)
    correlation_header: str = DEFAULT_CORRELATION_HEADER
    debug: bool = False

    @property
    def code_lifetime_msec(self) -> int:
        return self.code_lifetime_seconds * 1000

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """
        Build settings from ``OAUTH2_*`` environment variables.

        Raises ``ValueError`` on a malformed integer so that misconfiguration
        fails at startup rather than on the first request.
        """
        scopes_raw = os.getenv("OAUTH2_GLOBAL_SCOPES", "")
        settings = cls(
            base_path=_normalise_base_path(os.getenv("OAUTH2_BASE_PATH")),
            code_lifetime_seconds=_positive_int(
                "OAUTH2_CODE_LIFETIME_SECONDS", DEFAULT_CODE_LIFETIME_SECONDS
            ),
            global_scopes=frozenset(s for s in scopes_raw.split(" ") if s),
            correlation_header=os.getenv("OAUTH2_CORRELATION_HEADER")
            or DEFAULT_CORRELATION_HEADER,
            debug=_truthy(os.getenv("OAUTH2_DEBUG")),
        )
        logger.debug(
            "Loaded settings base_path=%s code_lifetime=%ss global_scopes=%d",
            settings.base_path,
            settings.code_lifetime_seconds,
            len(settings.global_scopes),
        )
        return settings
