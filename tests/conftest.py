"""Pytest configuration and shared fixtures."""

import uuid
from datetime import UTC, datetime

import pytest

from availability.domain import (
    AvailabilityTemplate,
    BookingPolicy,
    FacilitatorId,
    LocalInterval,
    Weekday,
)
from participation.domain import EventId
from participation.services import AdmissionService, ModerationService
from participation.stores import InMemoryParticipationStore

# A Monday morning, away from any DST change.
NOW = datetime(2024, 1, 1, 8, 0, tzinfo=UTC)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> InMemoryParticipationStore:
    return InMemoryParticipationStore()


@pytest.fixture
def admission(store, clock) -> AdmissionService:
    return AdmissionService(store, clock=clock)


@pytest.fixture
def moderation(store, admission, clock) -> ModerationService:
    return ModerationService(store, admission=admission, clock=clock)


@pytest.fixture
def make_event(store):
    def _make(capacity: int = 0, waitlist_enabled: bool = False) -> str:
        event_id = new_id()
        store.add_event(EventId.from_string(event_id), capacity, waitlist_enabled)
        return event_id

    return _make


@pytest.fixture
def facilitator_id() -> FacilitatorId:
    return FacilitatorId(uuid.UUID("6f1c2a9e-5b1d-4c7e-9a53-0d6c1f2b8e44"))


@pytest.fixture
def make_template(facilitator_id):
    def _make(
        schedule: dict | None = None,
        timezone: str = "UTC",
        is_active: bool = True,
        **policy,
    ) -> AvailabilityTemplate:
        if schedule is None:
            schedule = {Weekday.MONDAY: [("09:00", "12:00")]}
        defaults = {
            "min_advance_notice_hours": 0,
            "max_advance_booking_days": 30,
            "buffer_minutes": 15,
            "preferred_session_lengths": frozenset({60}),
            "max_sessions_per_day": 3,
        }
        defaults.update(policy)
        return AvailabilityTemplate(
            facilitator_id=facilitator_id,
            weekly_schedule={
                day: tuple(LocalInterval.from_strings(s, e) for s, e in intervals)
                for day, intervals in schedule.items()
            },
            timezone=timezone,
            policy=BookingPolicy(**defaults),
            is_active=is_active,
        )

    return _make
