"""Translate :class:`Problem` values into Starlette responses.

* Token endpoint – JSON body ``{"error", "error_description", "error_parameter"?}``
  (RFC 6749 §5.2), ``401`` for ``invalid_client`` and ``400`` otherwise.
* Authorization endpoint – once the redirect URI is trusted, errors travel
  back to the client as query parameters (RFC 6749 §4.1.2.1); before that an
  HTML error page is rendered so that an unverified URI is never followed.
"""

from __future__ import annotations

import html
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from starlette.responses import HTMLResponse, JSONResponse, RedirectResponse

from oauth2_validator.core.problems import Problem

_NO_STORE = {"Cache-Control": "no-store", "Pragma": "no-cache"}


def token_error_response(problem: Problem) -> JSONResponse:
    status = 401 if problem.wire_error == "invalid_client" else 400
    return JSONResponse(problem.to_payload(), status_code=status, headers=_NO_STORE)


def token_success_response(payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(payload, headers=_NO_STORE)


def append_query(uri: str, params: dict[str, str]) -> str:
    """Append *params* to *uri*, keeping any query it already carries."""
    parts = urlsplit(uri)
    extra = urlencode(params)
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def authorization_error_redirect(
    redirect_uri: str, problem: Problem, state: str | None = None
) -> RedirectResponse:
    params = {"error": problem.wire_error, "error_description": problem.description}
    if state is not None:
        params["state"] = state
    return RedirectResponse(append_query(redirect_uri, params), status_code=302)


def authorization_success_redirect(
    redirect_uri: str, code: str, state: str | None = None
) -> RedirectResponse:
    params = {"code": code}
    if state is not None:
        params["state"] = state
    return RedirectResponse(append_query(redirect_uri, params), status_code=302)


def error_page(problem: Problem, status: int = 400) -> HTMLResponse:
    """Return a tiny error page for failures that must not be redirected."""
    title = html.escape(problem.wire_error)
    body = html.escape(problem.description)
    content = (
        "<!doctype html><html lang='en'>"
        "<head><meta charset='utf-8'><title>"
        f"{title}</title></head><body><h1>{title}</h1><p>{body}</p></body></html>"
    )
    return HTMLResponse(content, status_code=status)
