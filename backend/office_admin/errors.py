"""Error taxonomy shared by repositories, services and routes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class FieldViolation:
    """A single field-level constraint failure."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Bad or missing input; carries every violated constraint."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, violations: Iterable[FieldViolation]) -> None:
        self.violations = list(violations)
        super().__init__(", ".join(v.message for v in self.violations) or None)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldViolation(field, message)])


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """A referential-integrity rule blocked the operation."""

    status_code = 400
    default_message = "Operation conflicts with existing records"


class AuthError(AppError):
    status_code = 401
    default_message = "Invalid email or password"


class LoginRequired(Exception):
    """No credential was presented to a protected route."""


class TokenRejected(Exception):
    """A credential was presented but is invalid or expired."""


class AlreadyAuthenticated(Exception):
    """A valid credential was presented to the login page."""
