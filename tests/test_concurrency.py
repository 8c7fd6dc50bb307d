"""Concurrency tests for the participation ledger.

Run with: pytest tests/test_concurrency.py -v
"""

import threading
import uuid
from datetime import UTC, datetime

import pytest

from participation.domain import (
    ConcurrencyConflictError,
    EventFullError,
    EventId,
    ParticipationAction,
    ParticipationRecord,
    ParticipationStatus,
    UserId,
)
from participation.stores import ChangeSet

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=UTC)


def uid() -> str:
    return str(uuid.uuid4())


def registered(event_id: str) -> ParticipationRecord:
    return ParticipationRecord(
        event_id=EventId.from_string(event_id),
        user_id=UserId(uuid.uuid4()),
        status=ParticipationStatus.REGISTERED,
        registered_at=NOW,
        updated_at=NOW,
    )


def join_with_retry(admission, event_id: str, user_id: str, attempts: int = 50):
    for _ in range(attempts):
        try:
            return admission.join(event_id, user_id)
        except ConcurrencyConflictError:
            continue
    raise AssertionError("join never committed")


class TestVersionCheck:
    """Commits are conditioned on the version the transaction read."""

    def test_stale_transaction_is_rejected(self, store, make_event):
        event_id = make_event(capacity=1)
        eid = EventId.from_string(event_id)

        with pytest.raises(ConcurrencyConflictError):
            with store.transaction(eid) as first:
                with store.transaction(eid) as second:
                    second.create_participation_record(registered(event_id))
                first.create_participation_record(registered(event_id))

        snapshot = store.load_snapshot(eid)
        assert snapshot.version == 1
        assert len(snapshot.records) == 1

    def test_read_only_transaction_does_not_bump_version(self, store, make_event):
        eid = EventId.from_string(make_event())
        with store.transaction(eid) as tx:
            tx.list_records()
        assert store.load_snapshot(eid).version == 0

    def test_error_inside_transaction_discards_writes(self, store, make_event):
        event_id = make_event()
        eid = EventId.from_string(event_id)

        with pytest.raises(RuntimeError):
            with store.transaction(eid) as tx:
                tx.create_participation_record(registered(event_id))
                raise RuntimeError("boom")

        assert store.load_snapshot(eid).records == ()

    def test_commit_with_old_version(self, store, make_event):
        event_id = make_event()
        eid = EventId.from_string(event_id)
        store.commit(eid, 0, ChangeSet(created=(registered(event_id),)))

        with pytest.raises(ConcurrencyConflictError):
            store.commit(eid, 0, ChangeSet(created=(registered(event_id),)))
        assert len(store.load_snapshot(eid).records) == 1

    def test_capacity_edit_invalidates_open_transaction(self, store, make_event):
        event_id = make_event(capacity=5)
        eid = EventId.from_string(event_id)

        with pytest.raises(ConcurrencyConflictError):
            with store.transaction(eid) as tx:
                store.update_event(eid, capacity=1)
                tx.create_participation_record(registered(event_id))


class TestLastSeatRace:
    """Concurrent joins never over-fill an event."""

    def test_interleaved_joins_for_last_seat(self, store, admission, make_event):
        event_id = make_event(capacity=1, waitlist_enabled=False)
        eid = EventId.from_string(event_id)
        winner, loser = uid(), uid()

        # The loser's read happens before the winner commits.
        with pytest.raises(ConcurrencyConflictError):
            with store.transaction(eid) as stale:
                admission.join(event_id, winner)
                admission.place(
                    stale,
                    UserId.from_string(loser),
                    None,
                    ParticipationAction.JOIN,
                    NOW,
                )

        with pytest.raises(EventFullError):
            admission.join(event_id, loser)
        assert admission.summary(event_id).registered == 1

    @pytest.mark.parametrize("waitlist_enabled", [False, True])
    def test_threads_racing_for_seats(self, admission, make_event, waitlist_enabled):
        capacity, contenders = 3, 12
        event_id = make_event(capacity=capacity, waitlist_enabled=waitlist_enabled)
        barrier = threading.Barrier(contenders)
        outcomes: list[str] = []
        lock = threading.Lock()

        def contend():
            barrier.wait()
            try:
                record = join_with_retry(admission, event_id, uid())
                outcome = record.status.value
            except EventFullError:
                outcome = "full"
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=contend) for _ in range(contenders)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert outcomes.count("registered") == capacity
        summary = admission.summary(event_id)
        assert summary.registered == capacity
        if waitlist_enabled:
            waiting = admission.list_participants(event_id, ParticipationStatus.WAITLISTED)
            assert sorted(r.waitlist_position for r in waiting) == list(
                range(1, contenders - capacity + 1)
            )
        else:
            assert outcomes.count("full") == contenders - capacity
