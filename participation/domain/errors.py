"""Domain error codes for the participation module."""

from enum import Enum
from typing import TYPE_CHECKING

from common.errors import DomainError

if TYPE_CHECKING:
    from participation.domain.models import ParticipationRecord, ParticipationStatus
    from participation.domain.transitions import ParticipationAction


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    EVENT_FULL = "EVENT_FULL"
    DUPLICATE_PARTICIPATION = "DUPLICATE_PARTICIPATION"
    CONCURRENCY_CONFLICT = "CONCURRENCY_CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class ParticipantNotFoundError(DomainError):
    """Raised when a user has no participation record for an event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPANT_NOT_FOUND,
            message="Participant not found for event",
        )
        self.event_id = event_id
        self.user_id = user_id


class EventFullError(DomainError):
    """Raised when an event is at capacity and has no waitlist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_FULL,
            message="Event is full",
        )
        self.event_id = event_id


class DuplicateParticipationError(DomainError):
    """Raised when a user joins an event they are already registered or waitlisted for.

    The existing record is attached so callers can treat the join as done.
    """

    def __init__(self, record: "ParticipationRecord") -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_PARTICIPATION,
            message="Already participating in event",
        )
        self.record = record


class ConcurrencyConflictError(DomainError):
    """Raised when the event changed between reading and committing.

    Nothing was written; the whole operation can be retried.
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENCY_CONFLICT,
            message="Event was modified concurrently, retry the request",
        )
        self.event_id = event_id


class InvalidTransitionError(DomainError):
    """Raised when a status change is not reachable from the current status."""

    def __init__(
        self,
        current: "ParticipationStatus | None",
        action: "ParticipationAction",
    ) -> None:
        state = current.value if current is not None else "none"
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot {action.value} a participant who is {state}",
        )
        self.current = current
        self.action = action
