"""Exception types raised by the validator core.

Only a lightweight, **data-carrying** exception lives here.  It never leaves
a validator operation: the operation catches it and returns the wrapped
:class:`~oauth2_validator.core.problems.Problem`.  Host code that calls the
decoder or :meth:`OAuth2Message.require` directly catches it the same way.
"""

from __future__ import annotations

from typing import Any

from oauth2_validator.core.problems import Problem


class OAuth2ProblemError(Exception):
    """Raised to short-circuit a check with a structured :class:`Problem`."""

    def __init__(self, problem: Problem, message: str | None = None) -> None:
        super().__init__(message or problem.description)
        self.problem: Problem = problem

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without parameter values**."""
        return self.problem.to_payload()
