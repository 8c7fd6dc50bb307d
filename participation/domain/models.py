"""Domain models representing persisted participation state.

These are pure domain objects with no API input rules.
Django ORM models are in participation/models.py (persistence layer).
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from participation.domain.value_objects import Capacity, EventId, UserId


class ParticipationStatus(Enum):
    """Status of a user's participation in an event."""

    REGISTERED = "registered"
    WAITLISTED = "waitlisted"
    ATTENDED = "attended"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

    @property
    def is_active(self) -> bool:
        return self in (ParticipationStatus.REGISTERED, ParticipationStatus.WAITLISTED)


@dataclass(frozen=True)
class EventCapacityView:
    """The part of an event record that admission depends on."""

    capacity: Capacity
    waitlist_enabled: bool

    def has_room(self, registered_count: int) -> bool:
        return self.capacity.has_room(registered_count)


@dataclass(frozen=True)
class ParticipationRecord:
    """One user's participation in one event; identified by (event_id, user_id)."""

    event_id: EventId
    user_id: UserId
    status: ParticipationStatus
    registered_at: datetime
    waitlist_position: int | None = None
    rejected_at: datetime | None = None
    rejected_by: UserId | None = None
    rejection_reason: str | None = None
    reinstated_at: datetime | None = None
    reinstated_by: UserId | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        waitlisted = self.status is ParticipationStatus.WAITLISTED
        if waitlisted != (self.waitlist_position is not None):
            raise ValueError("waitlist_position is set exactly when waitlisted")
        if self.waitlist_position is not None and self.waitlist_position < 1:
            raise ValueError("waitlist_position starts at 1")

    @property
    def key(self) -> tuple[EventId, UserId]:
        return (self.event_id, self.user_id)

    @property
    def is_active(self) -> bool:
        return self.status.is_active


class ModerationAction(Enum):
    """Organizer actions recorded in the moderation log."""

    REJECT = "reject"
    REINSTATE = "reinstate"


@dataclass(frozen=True)
class ModerationEntry:
    """Audit entry for an organizer's reject or reinstate action."""

    event_id: EventId
    user_id: UserId
    action: ModerationAction
    actor_id: UserId
    occurred_at: datetime
    from_status: ParticipationStatus
    to_status: ParticipationStatus
    reason: str | None = None


@dataclass(frozen=True)
class EventSnapshot:
    """Consistent view of one event's ledger at a given version."""

    event_id: EventId
    capacity_view: EventCapacityView
    version: int
    records: tuple[ParticipationRecord, ...] = ()


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a status change.

    ``applied`` is False when the record was already in the requested state
    and nothing was written. ``promoted`` lists waitlisted records moved to
    registered as a consequence.
    """

    record: ParticipationRecord
    applied: bool = True
    promoted: tuple[ParticipationRecord, ...] = ()
    audit_entry: ModerationEntry | None = None


@dataclass(frozen=True)
class AdmissionPreview:
    """What a join request would produce right now."""

    allowed: bool
    status: ParticipationStatus | None = None
    waitlist_position: int | None = None
    reason: str | None = None


@dataclass(frozen=True)
class ParticipationSummary:
    """Participation counts for an event."""

    capacity: Capacity
    registered: int = 0
    waitlisted: int = 0
    attended: int = 0
    no_show: int = 0
    cancelled: int = 0
    rejected: int = 0

    @classmethod
    def from_records(
        cls, view: EventCapacityView, records: Iterable[ParticipationRecord]
    ) -> "ParticipationSummary":
        counts = Counter(record.status for record in records)
        return cls(
            capacity=view.capacity,
            **{status.value: counts.get(status, 0) for status in ParticipationStatus},
        )

    @property
    def spots_remaining(self) -> int | None:
        return self.capacity.remaining(self.registered)

    @property
    def is_full(self) -> bool:
        return not self.capacity.has_room(self.registered)

    @property
    def attendance_rate(self) -> float | None:
        concluded = self.attended + self.no_show
        if concluded == 0:
            return None
        return self.attended / concluded
