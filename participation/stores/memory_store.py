"""In-memory participation store for tests and embedding."""

import logging
import threading
from dataclasses import dataclass, field

from participation.domain import (
    Capacity,
    ConcurrencyConflictError,
    EventCapacityView,
    EventId,
    EventNotFoundError,
    EventSnapshot,
    ModerationEntry,
    ParticipationRecord,
    UserId,
)
from participation.stores.interfaces import ParticipationStore
from participation.stores.unit_of_work import ChangeSet

logger = logging.getLogger(__name__)


@dataclass
class _EventState:
    capacity_view: EventCapacityView
    version: int = 0
    records: dict[UserId, ParticipationRecord] = field(default_factory=dict)


class InMemoryParticipationStore(ParticipationStore):
    """Lock-guarded dict store with a per-event version counter."""

    def __init__(self) -> None:
        self._events: dict[EventId, _EventState] = {}
        self._moderation_entries: list[ModerationEntry] = []
        self._lock = threading.Lock()

    def add_event(
        self, event_id: EventId, capacity: int = 0, waitlist_enabled: bool = False
    ) -> None:
        with self._lock:
            self._events[event_id] = _EventState(
                capacity_view=EventCapacityView(
                    capacity=Capacity(capacity), waitlist_enabled=waitlist_enabled
                )
            )

    def update_event(
        self,
        event_id: EventId,
        capacity: int | None = None,
        waitlist_enabled: bool | None = None,
    ) -> None:
        """Change the event's capacity view as the event editor would."""
        with self._lock:
            state = self._get_state(event_id)
            view = state.capacity_view
            state.capacity_view = EventCapacityView(
                capacity=Capacity(capacity) if capacity is not None else view.capacity,
                waitlist_enabled=(
                    waitlist_enabled if waitlist_enabled is not None else view.waitlist_enabled
                ),
            )
            state.version += 1

    def load_snapshot(self, event_id: EventId) -> EventSnapshot | None:
        with self._lock:
            state = self._events.get(event_id)
            if state is None:
                return None
            return EventSnapshot(
                event_id=event_id,
                capacity_view=state.capacity_view,
                version=state.version,
                records=tuple(state.records.values()),
            )

    def commit(self, event_id: EventId, expected_version: int, changes: ChangeSet) -> int:
        with self._lock:
            state = self._get_state(event_id)
            if state.version != expected_version:
                logger.info(
                    "Version conflict on event %s: expected %d, found %d",
                    event_id,
                    expected_version,
                    state.version,
                )
                raise ConcurrencyConflictError(str(event_id))
            for record in changes.created:
                if record.user_id in state.records:
                    raise ConcurrencyConflictError(str(event_id))
            for record in changes.created + changes.updated:
                state.records[record.user_id] = record
            self._moderation_entries.extend(changes.moderation_entries)
            state.version += 1
            return state.version

    def list_moderation_entries(
        self, event_id: EventId, user_id: UserId | None = None
    ) -> list[ModerationEntry]:
        with self._lock:
            return [
                entry
                for entry in self._moderation_entries
                if entry.event_id == event_id
                and (user_id is None or entry.user_id == user_id)
            ]

    def _get_state(self, event_id: EventId) -> _EventState:
        state = self._events.get(event_id)
        if state is None:
            raise EventNotFoundError(str(event_id))
        return state
