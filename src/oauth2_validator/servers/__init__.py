"""Starlette host wiring for the validator core."""

from __future__ import annotations

from .app import create_app  # noqa: F401
from .endpoints import register_oauth2_routes  # noqa: F401

__all__ = ["create_app", "register_oauth2_routes"]
