"""Immutable request carrier handed to the validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

from oauth2_validator.core.errors import OAuth2ProblemError
from oauth2_validator.core.problems import Problem


class Parameter(NamedTuple):
    """A decoded name/value pair; ``value`` is ``None`` when no ``=`` was sent."""

    name: str
    value: str | None = None


@dataclass(frozen=True, slots=True)
class OAuth2Message:
    """HTTP method, endpoint URL and ordered parameters of one request.

    Duplicate names are kept; lookups return the first present value.
    """

    method: str
    url: str
    params: tuple[Parameter, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(Parameter(*p) for p in self.params))

    @classmethod
    def from_form(cls, method: str, url: str, form: str | None) -> "OAuth2Message":
        """Build a message from a raw query string or form body.

        Raises
        ------
        OAuth2ProblemError
            PARAMETER_REJECTED if *form* cannot be decoded.
        """
        from oauth2_validator.core.form import decode_form  # circular

        return cls(method, url, tuple(decode_form(form)))

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self.params

    def get(self, name: str) -> str | None:
        """Return the first present value for *name*, else ``None``."""
        for param in self.params:
            if param.name == name and param.value is not None:
                return param.value
        return None

    def get_all(self, name: str) -> list[str]:
        return [p.value for p in self.params if p.name == name and p.value is not None]

    def require(self, name: str) -> str:
        """Return the value for *name* or raise PARAMETER_ABSENT."""
        value = self.get(name)
        if value is None:
            raise OAuth2ProblemError(Problem.parameter_absent(name))
        return value

    def require_all(self, names: Iterable[str]) -> dict[str, str]:
        """Require each of *names* in order; the first absent one is reported."""
        return {name: self.require(name) for name in names}
