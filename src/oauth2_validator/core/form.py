"""Form / query-string codec.

``application/x-www-form-urlencoded`` bodies and authorization-endpoint query
strings decode identically:

1. split on ``&``; an empty segment is a nameless, valueless parameter
2. split each segment on the *first* ``=``; no ``=`` means the value is absent
3. percent-decode name and value as UTF-8 (``+`` is a space)

Malformed escapes and invalid UTF-8 surface as a PARAMETER_REJECTED problem
naming the offending parameter rather than as a crash.
"""

from __future__ import annotations

import re
from typing import Final, Iterable
from urllib.parse import quote, unquote_to_bytes

from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.message import Parameter
from oauth2_validator.core.problems import Problem

# RFC 3986 unreserved characters stay literal
_SAFE: Final[str] = "-._~"
_BAD_ESCAPE: Final[re.Pattern[str]] = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_percent(text: str) -> str:
    """Percent-decode *text* strictly as UTF-8.

    Raises
    ------
    ValueError
        On a malformed ``%`` escape or a byte sequence that is not UTF-8.
    """
    if _BAD_ESCAPE.search(text):
        raise ValueError("malformed percent escape")
    raw = unquote_to_bytes(text.replace("+", " "))
    return raw.decode("utf-8")  # UnicodeDecodeError is a ValueError


def encode_percent(text: str) -> str:
    return quote(text, safe=_SAFE, encoding="utf-8")


def decode_form(form: str | None) -> list[Parameter]:
    """Decode *form* into an ordered list of :class:`Parameter`.

    Raises
    ------
    OAuth2ProblemError
        PARAMETER_REJECTED when a name or value cannot be decoded.
    """
    params: list[Parameter] = []
    if not form:
        return params
    for segment in form.split("&"):
        raw_name, sep, raw_value = segment.partition("=")
        try:
            name = decode_percent(raw_name)
        except ValueError:
            raise OAuth2ProblemError(Problem.parameter_rejected(raw_name)) from None
        value: str | None = None
        if sep:
            try:
                value = decode_percent(raw_value)
            except ValueError:
                raise OAuth2ProblemError(Problem.parameter_rejected(name)) from None
        params.append(Parameter(name, value))
    return params


def encode_form(params: Iterable[Parameter]) -> str:
    """Inverse of :func:`decode_form`; absent values are written as a bare name."""
    segments = []
    for param in params:
        if param.value is None:
            segments.append(encode_percent(param.name))
        else:
            segments.append(f"{encode_percent(param.name)}={encode_percent(param.value)}")
    return "&".join(segments)
