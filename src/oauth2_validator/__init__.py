"""RFC 6749 request validation for OAuth 2.0 authorization servers."""

from __future__ import annotations

__version__ = "0.1.0"
