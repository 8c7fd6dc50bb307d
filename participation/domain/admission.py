"""Pure admission and waitlist ranking rules.

These functions decide; they never read or write a store.
"""

from collections.abc import Sequence
from dataclasses import replace

from participation.domain.errors import EventFullError
from participation.domain.models import (
    EventCapacityView,
    ParticipationRecord,
    ParticipationStatus,
)
from participation.domain.value_objects import EventId


def decide_admission(
    event_id: EventId, view: EventCapacityView, registered_count: int
) -> ParticipationStatus:
    """Return the status a new participant gets.

    Raises:
        EventFullError: If the event is full and has no waitlist.
    """
    if view.has_room(registered_count):
        return ParticipationStatus.REGISTERED
    if view.waitlist_enabled:
        return ParticipationStatus.WAITLISTED
    raise EventFullError(str(event_id))


def next_waitlist_position(waitlisted: Sequence[ParticipationRecord]) -> int:
    return max((r.waitlist_position or 0 for r in waitlisted), default=0) + 1


def waitlist_order(waitlisted: Sequence[ParticipationRecord]) -> list[ParticipationRecord]:
    """Waitlisted records in promotion order."""
    return sorted(waitlisted, key=lambda r: (r.waitlist_position, r.registered_at))


def reranked(waitlisted: Sequence[ParticipationRecord]) -> list[ParticipationRecord]:
    """Close gaps so positions run 1..N; return only the records that moved."""
    moved = []
    for position, record in enumerate(waitlist_order(waitlisted), start=1):
        if record.waitlist_position != position:
            moved.append(replace(record, waitlist_position=position))
    return moved
