"""Error taxonomy for the account directory and role registry.

Every directory operation either returns its result or raises exactly one
of these. The HTTP layer maps each kind to its own status code so callers
can tell a rejected input from a conflict or an unknown storage outcome.
"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorDetail:
    """A single field-level problem attached to a ValidationError.

    Attributes:
        field: The input field at fault.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class DirectoryError(Exception):
    """Base class for all directory and registry errors."""

    kind = "directory_error"
    default_code = "directory_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "code": self.code, "detail": self.message}


class ValidationError(DirectoryError):
    """Raised for malformed, missing or unresolvable input."""

    kind = "validation_error"
    default_code = "invalid_input"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: list[ErrorDetail] | None = None,
    ) -> None:
        super().__init__(message, code)
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.details:
            body["details"] = [detail.to_dict() for detail in self.details]
        return body


class ConflictError(DirectoryError):
    """Raised on a uniqueness violation, a role still in use, or a lost race."""

    kind = "conflict"
    default_code = "conflict"


class ForbiddenError(DirectoryError):
    """Raised when a protected entity would be mutated."""

    kind = "forbidden"
    default_code = "forbidden"


class NotFoundError(DirectoryError):
    """Raised when an identifier does not resolve within the company."""

    kind = "not_found"
    default_code = "not_found"


class TransportError(DirectoryError):
    """Raised when the storage call failed. The outcome is unknown."""

    kind = "transport_error"
    default_code = "storage_unavailable"
