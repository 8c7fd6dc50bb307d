"""Moderation service - organizer rejection and reinstatement.

The caller is responsible for checking that ``actor_id`` is the event's
organizer; this service only records who acted.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from participation.domain import (
    ModerationAction,
    ModerationEntry,
    ParticipantNotFoundError,
    ParticipationAction,
    ParticipationStatus,
    TransitionResult,
)
from participation.domain.transitions import is_already_applied, transition
from participation.services.admission_service import (
    AdmissionService,
    parse_event_id,
    parse_user_id,
)
from participation.stores.interfaces import ParticipationStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ModerationService:
    """Organizer actions on individual participants."""

    def __init__(
        self,
        store: ParticipationStore,
        admission: AdmissionService | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._admission = admission or AdmissionService(store, clock=clock)
        self._clock = clock

    def reject(
        self,
        event_id: str,
        user_id: str,
        actor_id: str,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        """Reject a registered or waitlisted participant.

        A rejected registrant's seat goes to the head of the waitlist in the
        same commit.

        Raises:
            ParticipantNotFoundError: If the user never joined the event.
            InvalidTransitionError: If the participant is cancelled or concluded.
        """
        eid, uid, actor = parse_event_id(event_id), parse_user_id(user_id), parse_user_id(actor_id)
        now = now or self._clock()
        reason = (reason or "").strip() or None

        with self._store.transaction(eid) as tx:
            current = tx.get_record(uid)
            if current is None:
                raise ParticipantNotFoundError(event_id, user_id)
            if is_already_applied(current, ParticipationAction.REJECT):
                return TransitionResult(record=current, applied=False)

            record = transition(
                current,
                ParticipationAction.REJECT,
                ParticipationStatus.REJECTED,
                at=now,
                rejected_at=now,
                rejected_by=actor,
                rejection_reason=reason,
                reinstated_at=None,
                reinstated_by=None,
            )
            tx.update_participation_record_status(record)
            promoted = self._admission.release_seat(tx, current, now)
            entry = ModerationEntry(
                event_id=eid,
                user_id=uid,
                action=ModerationAction.REJECT,
                actor_id=actor,
                occurred_at=now,
                from_status=current.status,
                to_status=record.status,
                reason=reason,
            )
            tx.record_moderation(entry)

        logger.debug("User %s rejected from event %s by %s", uid, eid, actor)
        return TransitionResult(record=record, promoted=promoted, audit_entry=entry)

    def reinstate(
        self,
        event_id: str,
        user_id: str,
        actor_id: str,
        now: datetime | None = None,
    ) -> TransitionResult:
        """Readmit a rejected participant as if they joined now.

        They get a seat if one is free, otherwise the back of the waitlist.

        Raises:
            ParticipantNotFoundError: If the user never joined the event.
            InvalidTransitionError: If the participant is not rejected.
            EventFullError: If the event is full and has no waitlist.
        """
        eid, uid, actor = parse_event_id(event_id), parse_user_id(user_id), parse_user_id(actor_id)
        now = now or self._clock()

        with self._store.transaction(eid) as tx:
            current = tx.get_record(uid)
            if current is None:
                raise ParticipantNotFoundError(event_id, user_id)
            if is_already_applied(current, ParticipationAction.REINSTATE):
                return TransitionResult(record=current, applied=False)

            record = self._admission.place(
                tx,
                uid,
                current,
                ParticipationAction.REINSTATE,
                now,
                reinstated_at=now,
                reinstated_by=actor,
            )
            entry = ModerationEntry(
                event_id=eid,
                user_id=uid,
                action=ModerationAction.REINSTATE,
                actor_id=actor,
                occurred_at=now,
                from_status=current.status,
                to_status=record.status,
            )
            tx.record_moderation(entry)

        logger.debug(
            "User %s reinstated on event %s by %s as %s",
            uid,
            eid,
            actor,
            record.status.value,
        )
        return TransitionResult(record=record, audit_entry=entry)

    def moderation_history(
        self, event_id: str, user_id: str | None = None
    ) -> list[ModerationEntry]:
        eid = parse_event_id(event_id)
        uid = parse_user_id(user_id) if user_id is not None else None
        return self._store.list_moderation_entries(eid, uid)
