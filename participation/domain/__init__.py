from participation.domain.errors import (
    ConcurrencyConflictError,
    DuplicateParticipationError,
    EventFullError,
    EventNotFoundError,
    InvalidTransitionError,
    ParticipantNotFoundError,
)
from participation.domain.models import (
    AdmissionPreview,
    EventCapacityView,
    EventSnapshot,
    ModerationAction,
    ModerationEntry,
    ParticipationRecord,
    ParticipationStatus,
    ParticipationSummary,
    TransitionResult,
)
from participation.domain.transitions import ParticipationAction
from participation.domain.value_objects import Capacity, EventId, UserId

__all__ = [
    "AdmissionPreview",
    "EventCapacityView",
    "EventSnapshot",
    "ModerationAction",
    "ModerationEntry",
    "ParticipationAction",
    "ParticipationRecord",
    "ParticipationStatus",
    "ParticipationSummary",
    "TransitionResult",
    "Capacity",
    "EventId",
    "UserId",
    "ConcurrencyConflictError",
    "DuplicateParticipationError",
    "EventFullError",
    "EventNotFoundError",
    "InvalidTransitionError",
    "ParticipantNotFoundError",
]
