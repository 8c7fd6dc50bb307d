"""Per-event unit of work over a ledger snapshot.

A ``ParticipationTransaction`` answers every read from the snapshot it was
opened on (plus its own pending writes) and buffers writes until the store
commits them. The commit succeeds only if the event's version is unchanged,
so decisions made from these reads can never be applied to a newer state.
"""

from dataclasses import dataclass

from participation.domain import (
    EventCapacityView,
    EventId,
    EventSnapshot,
    ModerationEntry,
    ParticipationRecord,
    ParticipationStatus,
    UserId,
)
from participation.domain.admission import waitlist_order


@dataclass(frozen=True)
class ChangeSet:
    """Writes to apply atomically with a version bump."""

    created: tuple[ParticipationRecord, ...] = ()
    updated: tuple[ParticipationRecord, ...] = ()
    moderation_entries: tuple[ModerationEntry, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.created or self.updated or self.moderation_entries)


class ParticipationTransaction:
    """Snapshot-bound reads and buffered writes for one event."""

    def __init__(self, snapshot: EventSnapshot) -> None:
        self._snapshot = snapshot
        self._records: dict[UserId, ParticipationRecord] = {
            record.user_id: record for record in snapshot.records
        }
        self._created: dict[UserId, ParticipationRecord] = {}
        self._updated: dict[UserId, ParticipationRecord] = {}
        self._moderation_entries: list[ModerationEntry] = []

    @property
    def event_id(self) -> EventId:
        return self._snapshot.event_id

    @property
    def version(self) -> int:
        return self._snapshot.version

    def get_event_capacity_view(self) -> EventCapacityView:
        return self._snapshot.capacity_view

    def count_participants_by_status(self, status: ParticipationStatus) -> int:
        return sum(1 for record in self._records.values() if record.status is status)

    def get_record(self, user_id: UserId) -> ParticipationRecord | None:
        return self._records.get(user_id)

    def list_records(
        self, status: ParticipationStatus | None = None
    ) -> list[ParticipationRecord]:
        return [
            record
            for record in self._records.values()
            if status is None or record.status is status
        ]

    def list_waitlisted(self) -> list[ParticipationRecord]:
        """Waitlisted records ordered by position."""
        return waitlist_order(self.list_records(ParticipationStatus.WAITLISTED))

    def create_participation_record(self, record: ParticipationRecord) -> None:
        self._check_event(record)
        if record.user_id in self._records:
            raise ValueError("A record for this user already exists")
        self._records[record.user_id] = record
        self._created[record.user_id] = record

    def update_participation_record_status(self, record: ParticipationRecord) -> None:
        self._check_event(record)
        if record.user_id not in self._records:
            raise ValueError("Cannot update a record that does not exist")
        self._records[record.user_id] = record
        if record.user_id in self._created:
            self._created[record.user_id] = record
        else:
            self._updated[record.user_id] = record

    def record_moderation(self, entry: ModerationEntry) -> None:
        self._moderation_entries.append(entry)

    def changes(self) -> ChangeSet:
        return ChangeSet(
            created=tuple(self._created.values()),
            updated=tuple(self._updated.values()),
            moderation_entries=tuple(self._moderation_entries),
        )

    def _check_event(self, record: ParticipationRecord) -> None:
        if record.event_id != self.event_id:
            raise ValueError("Record belongs to a different event")
