"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from participation.domain import (
    EventId,
    EventNotFoundError,
    EventSnapshot,
    ModerationEntry,
    UserId,
)
from participation.stores.unit_of_work import ChangeSet, ParticipationTransaction


class ParticipationStore(ABC):
    """Interface for participation ledger persistence."""

    @abstractmethod
    def load_snapshot(self, event_id: EventId) -> EventSnapshot | None:
        """Return the event's capacity view, version and all its records.

        Returns None if the event does not exist. The version read must be
        no newer than the records read.
        """
        ...

    @abstractmethod
    def commit(self, event_id: EventId, expected_version: int, changes: ChangeSet) -> int:
        """Apply ``changes`` and bump the version if it still equals ``expected_version``.

        Returns the new version.

        Raises:
            ConcurrencyConflictError: If the version moved; nothing is applied.
        """
        ...

    @abstractmethod
    def list_moderation_entries(
        self, event_id: EventId, user_id: UserId | None = None
    ) -> list[ModerationEntry]:
        """Return moderation entries for an event, oldest first."""
        ...

    @contextmanager
    def transaction(self, event_id: EventId) -> Iterator[ParticipationTransaction]:
        """Open a unit of work; pending writes commit when the block exits cleanly.

        Raises:
            EventNotFoundError: If the event does not exist.
            ConcurrencyConflictError: If the event changed before the commit.
        """
        snapshot = self.load_snapshot(event_id)
        if snapshot is None:
            raise EventNotFoundError(str(event_id))
        tx = ParticipationTransaction(snapshot)
        yield tx
        changes = tx.changes()
        if changes:
            self.commit(event_id, snapshot.version, changes)
