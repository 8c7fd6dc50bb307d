"""Base domain error shared by the participation and availability apps."""

from dataclasses import dataclass
from enum import Enum


class CommonErrorCode(Enum):
    """Error codes not owned by a single app."""

    INVALID_ID = "INVALID_ID"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: Enum
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidIdError(DomainError):
    """Raised when an identifier string is not a valid UUID."""

    def __init__(self, kind: str, raw: str) -> None:
        super().__init__(
            code=CommonErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.raw = raw
