"""Domain error codes for the availability module."""

from enum import Enum

from common.errors import DomainError


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_AVAILABILITY_TEMPLATE = "INVALID_AVAILABILITY_TEMPLATE"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    SLOT_UNAVAILABLE = "SLOT_UNAVAILABLE"


class ConfigurationError(DomainError):
    """Raised when an availability template is malformed.

    Covers bad intervals, unknown timezones and out-of-range policy values.
    Not retryable: the facilitator has to correct the template.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.INVALID_AVAILABILITY_TEMPLATE,
            message=message,
        )
        self.field = field


class TemplateNotFoundError(DomainError):
    """Raised when a facilitator has no availability template."""

    def __init__(self, facilitator_id: str) -> None:
        super().__init__(
            code=ErrorCode.TEMPLATE_NOT_FOUND,
            message="Availability not found for facilitator",
        )
        self.facilitator_id = facilitator_id


class SlotUnavailableError(DomainError):
    """Raised when a requested booking window is not a bookable slot."""

    def __init__(self, facilitator_id: str, start: str, end: str) -> None:
        super().__init__(
            code=ErrorCode.SLOT_UNAVAILABLE,
            message="Requested time is not available",
        )
        self.facilitator_id = facilitator_id
        self.start = start
        self.end = end
