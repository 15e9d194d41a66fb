"""Unit tests for the problem taxonomy and its wire mapping."""

from __future__ import annotations

import pytest

from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.problems import WIRE_ERRORS, Problem, ProblemKind, wire_error

EXPECTED_WIRE = {
    ProblemKind.PARAMETER_ABSENT: "invalid_request",
    ProblemKind.PARAMETER_REJECTED: "invalid_request",
    ProblemKind.INVALID_REQUEST: "invalid_request",
    ProblemKind.UNSUPPORTED_RESPONSE_TYPE: "unsupported_response_type",
    ProblemKind.UNSUPPORTED_GRANT_TYPE: "unsupported_grant_type",
    ProblemKind.INVALID_SCOPE: "invalid_scope",
    ProblemKind.CLIENT_ID_MISMATCH: "invalid_client",
    ProblemKind.INVALID_CLIENT: "invalid_client",
    ProblemKind.CLIENT_SECRET_MISMATCH: "unauthorized_client",
    ProblemKind.REDIRECT_URI_MISMATCH: "invalid_request",
    ProblemKind.INVALID_GRANT: "invalid_grant",
    ProblemKind.CODE_EXPIRED: "invalid_grant",
    ProblemKind.CODE_ALREADY_USED: "invalid_grant",
}


def test_mapping_is_total() -> None:
    assert set(WIRE_ERRORS) == set(ProblemKind)


@pytest.mark.parametrize("kind", list(ProblemKind))
def test_wire_error_matches_table(kind: ProblemKind) -> None:
    assert wire_error(kind) == EXPECTED_WIRE[kind]


def test_wire_error_ignores_parameters() -> None:
    plain = Problem(ProblemKind.INVALID_REQUEST)
    described = Problem(ProblemKind.INVALID_REQUEST, {"error_description": "custom"})
    assert plain.wire_error == described.wire_error == "invalid_request"


@pytest.mark.parametrize(
    "kind", [ProblemKind.PARAMETER_ABSENT, ProblemKind.PARAMETER_REJECTED]
)
def test_named_kinds_require_parameter_name(kind: ProblemKind) -> None:
    with pytest.raises(ValueError):
        Problem(kind)


def test_other_kinds_reject_parameter_name() -> None:
    with pytest.raises(ValueError):
        Problem(ProblemKind.INVALID_SCOPE, {"parameter_name": "scope"})


def test_problem_parameters_are_copied() -> None:
    params = {"parameter_name": "code"}
    problem = Problem(ProblemKind.PARAMETER_ABSENT, params)
    params["parameter_name"] = "other"
    assert problem.parameter_name == "code"


def test_payload_shape() -> None:
    assert Problem.parameter_absent("client_id").to_payload() == {
        "error": "invalid_request",
        "error_description": "A required parameter is missing.",
        "error_parameter": "client_id",
    }
    payload = Problem(ProblemKind.CODE_EXPIRED).to_payload()
    assert payload["error"] == "invalid_grant"
    assert "error_parameter" not in payload


def test_description_override() -> None:
    problem = Problem(ProblemKind.INVALID_REQUEST, {"error_description": "Missing response_type."})
    assert problem.to_payload()["error_description"] == "Missing response_type."


def test_problem_error_carries_problem() -> None:
    problem = Problem.parameter_rejected("scope")
    exc = OAuth2ProblemError(problem)
    assert exc.problem is problem
    assert str(exc) == problem.description
    assert exc.to_payload()["error_parameter"] == "scope"


def test_problem_parameters_are_read_only() -> None:
    problem = Problem(ProblemKind.INVALID_GRANT)
    with pytest.raises(TypeError):
        problem.parameters["parameter_name"] = "code"  # type: ignore[index]
    assert problem.parameter_name is None


def test_problems_are_hashable() -> None:
    seen = {
        Problem(ProblemKind.INVALID_GRANT),
        Problem(ProblemKind.INVALID_GRANT),
        Problem.parameter_absent("code"),
        Problem.parameter_absent("code"),
        Problem.parameter_absent("client_id"),
    }
    assert len(seen) == 3
    assert Problem.parameter_absent("code") == Problem(
        ProblemKind.PARAMETER_ABSENT, {"parameter_name": "code"}
    )
