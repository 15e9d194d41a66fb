"""
Unit tests for the form codec and OAuth2Message lookups.

Coverage:
* decode_form ordering, absent values, ``+`` and UTF-8 handling
* PARAMETER_REJECTED on malformed escapes / invalid UTF-8
* encode_form / decode_form round trip
* get / require / get_all semantics with duplicate names
"""

from __future__ import annotations

import pytest

from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.form import decode_form, decode_percent, encode_form
from oauth2_validator.core.message import OAuth2Message, Parameter
from oauth2_validator.core.problems import ProblemKind


# --------------------------------------------------------------------------- #
# decode_form                                                                 #
# --------------------------------------------------------------------------- #
@pytest.mark.parametrize("form", [None, ""])
def test_decode_empty_input(form) -> None:
    assert decode_form(form) == []


def test_decode_preserves_order_and_absent_values() -> None:
    params = decode_form("b=2&a&c=&a=1")
    assert params == [
        Parameter("b", "2"),
        Parameter("a", None),
        Parameter("c", ""),
        Parameter("a", "1"),
    ]


def test_decode_splits_on_first_equals() -> None:
    assert decode_form("state=a=b=c") == [Parameter("state", "a=b=c")]


def test_decode_percent_and_plus() -> None:
    params = decode_form(
        "redirect_uri=https%3A%2F%2Fclient%2Eexample%2Ecom%2Fcb&q=a+b%2Bc&n%C3%A4me=%E2%9C%93"
    )
    assert params == [
        Parameter("redirect_uri", "https://client.example.com/cb"),
        Parameter("q", "a b+c"),
        Parameter("näme", "✓"),
    ]


def test_decode_keeps_empty_segments() -> None:
    assert decode_form("a=1&&b=2&") == [
        Parameter("a", "1"),
        Parameter("", None),
        Parameter("b", "2"),
        Parameter("", None),
    ]
    assert decode_form("&") == [Parameter("", None), Parameter("", None)]


@pytest.mark.parametrize("form", ["scope=%zz", "scope=100%", "scope=%4"])
def test_decode_malformed_escape_is_rejected(form: str) -> None:
    with pytest.raises(OAuth2ProblemError) as exc_info:
        decode_form("client_id=abc&" + form)
    problem = exc_info.value.problem
    assert problem.kind is ProblemKind.PARAMETER_REJECTED
    assert problem.parameter_name == "scope"
    assert problem.wire_error == "invalid_request"


def test_decode_invalid_utf8_is_rejected() -> None:
    with pytest.raises(OAuth2ProblemError) as exc_info:
        decode_form("state=%C3%28")
    assert exc_info.value.problem.parameter_name == "state"


def test_decode_invalid_name_reports_raw_name() -> None:
    with pytest.raises(OAuth2ProblemError) as exc_info:
        decode_form("bad%ZZname=1")
    assert exc_info.value.problem.parameter_name == "bad%ZZname"


def test_decode_percent_rejects_non_utf8() -> None:
    with pytest.raises(ValueError):
        decode_percent("%FF")


# --------------------------------------------------------------------------- #
# encode_form                                                                 #
# --------------------------------------------------------------------------- #
def test_encode_form_escapes_reserved_characters() -> None:
    encoded = encode_form(
        [Parameter("redirect_uri", "https://client.example.com/cb?a=1&b=2"), Parameter("flag")]
    )
    assert encoded == "redirect_uri=https%3A%2F%2Fclient.example.com%2Fcb%3Fa%3D1%26b%3D2&flag"


@pytest.mark.parametrize(
    "params",
    [
        [],
        [Parameter("a", None)],
        [Parameter("a", ""), Parameter("a", "x")],
        [Parameter("scope", "read write"), Parameter("q", "1+1=2 & more")],
        [Parameter("名前", "値 ✓"), Parameter("x", "%41~-._")],
        [Parameter("", None), Parameter("a", "b")],
        [Parameter("a", "b"), Parameter("", None)],
        [Parameter("", ""), Parameter("", None), Parameter("c")],
    ],
)
def test_round_trip(params: list[Parameter]) -> None:
    assert decode_form(encode_form(params)) == params


# --------------------------------------------------------------------------- #
# OAuth2Message                                                               #
# --------------------------------------------------------------------------- #
def test_get_returns_first_present_value() -> None:
    msg = OAuth2Message("POST", "https://as.example.com/token", decode_form("a&a=1&a=2"))
    assert msg.get("a") == "1"
    assert msg.get_all("a") == ["1", "2"]
    assert msg.get("missing") is None


@pytest.mark.parametrize("name", ["client_id", "redirect_uri", "x"])
def test_require_absent_name(name: str) -> None:
    msg = OAuth2Message.from_form("GET", "", "response_type=code&scope=read")
    with pytest.raises(OAuth2ProblemError) as exc_info:
        msg.require(name)
    problem = exc_info.value.problem
    assert problem.kind is ProblemKind.PARAMETER_ABSENT
    assert problem.parameters["parameter_name"] == name


def test_require_ignores_valueless_parameter() -> None:
    msg = OAuth2Message.from_form("GET", "", "code")
    with pytest.raises(OAuth2ProblemError):
        msg.require("code")


def test_require_accepts_empty_value() -> None:
    assert OAuth2Message.from_form("GET", "", "state=").require("state") == ""


def test_require_all_reports_first_absent() -> None:
    msg = OAuth2Message.from_form("POST", "", "client_secret=s")
    with pytest.raises(OAuth2ProblemError) as exc_info:
        msg.require_all(["client_id", "client_secret"])
    assert exc_info.value.problem.parameter_name == "client_id"


def test_message_is_immutable() -> None:
    msg = OAuth2Message("GET", "", [("a", "1")])
    assert msg.parameters == (Parameter("a", "1"),)
    with pytest.raises(AttributeError):
        msg.method = "POST"  # type: ignore[misc]
