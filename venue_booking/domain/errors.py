"""Domain error codes for the booking application."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    BOOKING_CONFLICT = "BOOKING_CONFLICT"
    DUPLICATE_ACCOUNT = "DUPLICATE_ACCOUNT"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    FORBIDDEN = "FORBIDDEN"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when an entity id does not exist."""

    def __init__(self, entity: str, entity_id) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(DomainError):
    """Raised on a double-booked venue or a duplicate account."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.BOOKING_CONFLICT) -> None:
        super().__init__(code=code, message=message)


class ValidationError(DomainError):
    """Raised when input or a requested state change is not acceptable."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_INPUT) -> None:
        super().__init__(code=code, message=message)


class PermissionDeniedError(DomainError):
    """Raised when the acting user may not perform the operation."""

    def __init__(self, message: str = "You are not allowed to do that") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)
