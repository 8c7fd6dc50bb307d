"""Admission service - capacity, waitlist and promotion rules.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every write happens inside one ``store.transaction`` so the decision and the
records it produces commit together or not at all.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from common.errors import DomainError, InvalidIdError
from participation.domain import (
    AdmissionPreview,
    DuplicateParticipationError,
    EventId,
    EventNotFoundError,
    ParticipantNotFoundError,
    ParticipationAction,
    ParticipationRecord,
    ParticipationStatus,
    ParticipationSummary,
    TransitionResult,
    UserId,
)
from participation.domain.admission import (
    decide_admission,
    next_waitlist_position,
    reranked,
)
from participation.domain.transitions import (
    allowed_targets,
    is_already_applied,
    transition,
)
from participation.stores.interfaces import ParticipationStore
from participation.stores.unit_of_work import ParticipationTransaction

logger = logging.getLogger(__name__)

Status = ParticipationStatus
Action = ParticipationAction


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AdmissionService:
    """Decides who is in an event and keeps the waitlist moving."""

    def __init__(
        self,
        store: ParticipationStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def join(
        self,
        event_id: str,
        user_id: str,
        *,
        allow_existing: bool = False,
        now: datetime | None = None,
    ) -> ParticipationRecord:
        """Register the user, or waitlist them if the event is full.

        A cancelled participant may join again; their record is reused.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            EventNotFoundError: If the event does not exist.
            DuplicateParticipationError: If the user is already registered or
                waitlisted (unless ``allow_existing``, which returns that record).
            InvalidTransitionError: If the user was rejected or the event
                already concluded for them.
            EventFullError: If the event is full and has no waitlist.
            ConcurrencyConflictError: If the event changed concurrently.
        """
        eid, uid = parse_event_id(event_id), parse_user_id(user_id)
        now = now or self._clock()

        with self._store.transaction(eid) as tx:
            existing = tx.get_record(uid)
            if existing is not None and existing.is_active:
                if allow_existing:
                    return existing
                raise DuplicateParticipationError(existing)
            record = self.place(tx, uid, existing, Action.JOIN, now)

        logger.debug(
            "User %s joined event %s as %s", uid, eid, record.status.value
        )
        return record

    def can_join(self, event_id: str, user_id: str) -> AdmissionPreview:
        """Preview what ``join`` would do now, without writing anything."""
        eid, uid = parse_event_id(event_id), parse_user_id(user_id)
        snapshot = self._store.load_snapshot(eid)
        if snapshot is None:
            raise EventNotFoundError(event_id)

        tx = ParticipationTransaction(snapshot)
        existing = tx.get_record(uid)
        try:
            if existing is not None and existing.is_active:
                raise DuplicateParticipationError(existing)
            record = self.place(tx, uid, existing, Action.JOIN, self._clock())
        except DomainError as exc:
            return AdmissionPreview(allowed=False, reason=exc.code.value)
        return AdmissionPreview(
            allowed=True,
            status=record.status,
            waitlist_position=record.waitlist_position,
        )

    def cancel(
        self, event_id: str, user_id: str, now: datetime | None = None
    ) -> TransitionResult:
        """Cancel a registration or waitlist entry; frees the seat for the waitlist."""
        return self._leave(event_id, user_id, Action.CANCEL, Status.CANCELLED, now)

    def mark_attended(
        self, event_id: str, user_id: str, now: datetime | None = None
    ) -> TransitionResult:
        return self._leave(event_id, user_id, Action.MARK_ATTENDED, Status.ATTENDED, now)

    def mark_no_show(
        self, event_id: str, user_id: str, now: datetime | None = None
    ) -> TransitionResult:
        """Record a registered participant as absent; their seat is released."""
        return self._leave(event_id, user_id, Action.MARK_NO_SHOW, Status.NO_SHOW, now)

    def conclude_event(
        self,
        event_id: str,
        attendee_ids: Iterable[str],
        now: datetime | None = None,
    ) -> list[ParticipationRecord]:
        """Settle attendance for every registered participant.

        Registered users in ``attendee_ids`` become attended, the rest
        no-shows. The event is over, so nobody is promoted from the waitlist.
        Returns the records that changed.
        """
        eid = parse_event_id(event_id)
        attendees = {parse_user_id(user_id) for user_id in attendee_ids}
        now = now or self._clock()

        changed = []
        with self._store.transaction(eid) as tx:
            for record in tx.list_records(Status.REGISTERED):
                if record.user_id in attendees:
                    updated = transition(record, Action.MARK_ATTENDED, Status.ATTENDED, at=now)
                else:
                    updated = transition(record, Action.MARK_NO_SHOW, Status.NO_SHOW, at=now)
                tx.update_participation_record_status(updated)
                changed.append(updated)

        logger.debug("Concluded event %s: %d participants settled", eid, len(changed))
        return changed

    def rebalance(
        self, event_id: str, now: datetime | None = None
    ) -> tuple[ParticipationRecord, ...]:
        """Promote waitlisted participants into seats freed by a capacity change."""
        eid = parse_event_id(event_id)
        now = now or self._clock()
        with self._store.transaction(eid) as tx:
            promoted = self.promote_waitlisted(tx, now)
        return promoted

    def get_participant(self, event_id: str, user_id: str) -> ParticipationRecord:
        eid, uid = parse_event_id(event_id), parse_user_id(user_id)
        snapshot = self._store.load_snapshot(eid)
        if snapshot is None:
            raise EventNotFoundError(event_id)
        for record in snapshot.records:
            if record.user_id == uid:
                return record
        raise ParticipantNotFoundError(event_id, user_id)

    def list_participants(
        self, event_id: str, status: ParticipationStatus | None = None
    ) -> list[ParticipationRecord]:
        """Return an event's participants, most recent registration first."""
        eid = parse_event_id(event_id)
        snapshot = self._store.load_snapshot(eid)
        if snapshot is None:
            raise EventNotFoundError(event_id)
        records = [r for r in snapshot.records if status is None or r.status is status]
        return sorted(records, key=lambda r: r.registered_at, reverse=True)

    def summary(self, event_id: str) -> ParticipationSummary:
        eid = parse_event_id(event_id)
        snapshot = self._store.load_snapshot(eid)
        if snapshot is None:
            raise EventNotFoundError(event_id)
        return ParticipationSummary.from_records(snapshot.capacity_view, snapshot.records)

    # Building blocks shared with moderation. Both work on an open
    # transaction and leave committing to the caller.

    def place(
        self,
        tx: ParticipationTransaction,
        user_id: UserId,
        existing: ParticipationRecord | None,
        action: ParticipationAction,
        now: datetime,
        **changes,
    ) -> ParticipationRecord:
        """Admit ``user_id`` as registered or waitlisted and stage the write.

        Raises:
            InvalidTransitionError: If ``action`` is not allowed for ``existing``.
            EventFullError: If there is no seat and no waitlist.
        """
        allowed_targets(existing.status if existing else None, action)
        target = decide_admission(
            tx.event_id,
            tx.get_event_capacity_view(),
            tx.count_participants_by_status(Status.REGISTERED),
        )
        position = None
        if target is Status.WAITLISTED:
            position = next_waitlist_position(tx.list_waitlisted())

        if existing is None:
            record = ParticipationRecord(
                event_id=tx.event_id,
                user_id=user_id,
                status=target,
                registered_at=now,
                waitlist_position=position,
                updated_at=now,
                **changes,
            )
            tx.create_participation_record(record)
            return record

        record = transition(
            existing,
            action,
            target,
            at=now,
            waitlist_position=position,
            registered_at=now,
            **changes,
        )
        tx.update_participation_record_status(record)
        return record

    def promote_waitlisted(
        self, tx: ParticipationTransaction, now: datetime
    ) -> tuple[ParticipationRecord, ...]:
        """Fill free seats from the head of the waitlist, then close the gaps."""
        view = tx.get_event_capacity_view()
        registered = tx.count_participants_by_status(Status.REGISTERED)
        waitlisted = tx.list_waitlisted()

        promoted = []
        while waitlisted and view.has_room(registered):
            head = waitlisted.pop(0)
            record = transition(head, Action.PROMOTE, Status.REGISTERED, at=now)
            tx.update_participation_record_status(record)
            promoted.append(record)
            registered += 1
            logger.debug("Promoted user %s on event %s", record.user_id, tx.event_id)

        for record in reranked(waitlisted):
            tx.update_participation_record_status(record)
        return tuple(promoted)

    def close_waitlist_gap(self, tx: ParticipationTransaction) -> None:
        for record in reranked(tx.list_waitlisted()):
            tx.update_participation_record_status(record)

    def _leave(
        self,
        event_id: str,
        user_id: str,
        action: ParticipationAction,
        target: ParticipationStatus,
        now: datetime | None,
    ) -> TransitionResult:
        eid, uid = parse_event_id(event_id), parse_user_id(user_id)
        now = now or self._clock()

        with self._store.transaction(eid) as tx:
            current = tx.get_record(uid)
            if current is None:
                raise ParticipantNotFoundError(event_id, user_id)
            if is_already_applied(current, action):
                return TransitionResult(record=current, applied=False)

            record = transition(current, action, target, at=now)
            tx.update_participation_record_status(record)
            promoted = self.release_seat(tx, current, now)

        logger.debug(
            "User %s on event %s: %s -> %s",
            uid,
            eid,
            current.status.value,
            record.status.value,
        )
        return TransitionResult(record=record, promoted=promoted)

    def release_seat(
        self,
        tx: ParticipationTransaction,
        previous: ParticipationRecord,
        now: datetime,
    ) -> tuple[ParticipationRecord, ...]:
        """Keep the waitlist consistent after ``previous`` left its status.

        A departing registered participant frees a seat (promotion); a
        departing waitlisted one leaves a gap (re-rank). Attendance does not
        free a seat.
        """
        if previous.status is Status.WAITLISTED:
            self.close_waitlist_gap(tx)
            return ()
        if previous.status is Status.REGISTERED:
            current = tx.get_record(previous.user_id)
            if current is not None and current.status is not Status.ATTENDED:
                return self.promote_waitlisted(tx, now)
        return ()


def parse_event_id(raw: str) -> EventId:
    try:
        return EventId.from_string(raw)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError("event", str(raw)) from None


def parse_user_id(raw: str) -> UserId:
    try:
        return UserId.from_string(raw)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError("user", str(raw)) from None
