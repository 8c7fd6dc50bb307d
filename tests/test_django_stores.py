"""Integration tests for the Django ORM stores.

Run with: pytest tests/test_django_stores.py -v
"""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from django.contrib import admin

from availability import models as availability_models
from availability.conf import policy_defaults
from availability.domain import ConfigurationError, FacilitatorId, TimeWindow, Weekday
from availability.services import AvailabilityService
from availability.stores.django_store import (
    DjangoAvailabilityTemplateStore,
    DjangoBookingStore,
)
from participation import models as participation_models
from participation.domain import (
    ConcurrencyConflictError,
    EventId,
    ModerationAction,
    ParticipationAction,
    ParticipationStatus,
    UserId,
)
from participation.services import AdmissionService, ModerationService
from participation.stores.django_store import DjangoParticipationStore

NOW = datetime(2024, 1, 1, 8, 0, tzinfo=UTC)

pytestmark = pytest.mark.django_db


def uid() -> str:
    return str(uuid.uuid4())


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 1, hour, minute, tzinfo=UTC)


@pytest.fixture
def participation_store():
    return DjangoParticipationStore()


@pytest.fixture
def db_admission(participation_store, clock):
    return AdmissionService(participation_store, clock=clock)


@pytest.fixture
def db_moderation(participation_store, db_admission, clock):
    return ModerationService(participation_store, admission=db_admission, clock=clock)


def create_event(capacity: int = 0, waitlist_enabled: bool = False) -> str:
    event = participation_models.Event.objects.create(
        title="Pottery evening", capacity=capacity, waitlist_enabled=waitlist_enabled
    )
    return str(event.id)


class TestDjangoParticipationStore:
    """Tests for DjangoParticipationStore."""

    def test_missing_event_has_no_snapshot(self, participation_store):
        assert participation_store.load_snapshot(EventId(uuid.uuid4())) is None

    def test_join_persists_record_and_bumps_version(self, participation_store, db_admission):
        event_id = create_event(capacity=1, waitlist_enabled=True)
        first, second = uid(), uid()
        db_admission.join(event_id, first)
        db_admission.join(event_id, second)

        snapshot = participation_store.load_snapshot(EventId.from_string(event_id))

        assert snapshot.version == 2
        statuses = {str(r.user_id): r.status for r in snapshot.records}
        assert statuses == {
            first: ParticipationStatus.REGISTERED,
            second: ParticipationStatus.WAITLISTED,
        }
        row = participation_models.Participant.objects.get(user_id=second)
        assert row.waitlist_position == 1

    def test_cancel_promotes_in_database(self, db_admission):
        event_id = create_event(capacity=1, waitlist_enabled=True)
        holder, waiting = uid(), uid()
        db_admission.join(event_id, holder)
        db_admission.join(event_id, waiting)

        db_admission.cancel(event_id, holder)

        row = participation_models.Participant.objects.get(user_id=waiting)
        assert row.status == participation_models.Participant.Status.REGISTERED
        assert row.waitlist_position is None

    def test_stale_commit_is_rejected(self, participation_store, db_admission):
        event_id = create_event(capacity=1)
        eid = EventId.from_string(event_id)

        with pytest.raises(ConcurrencyConflictError):
            with participation_store.transaction(eid) as stale:
                db_admission.join(event_id, uid())
                db_admission.place(
                    stale,
                    UserId.from_string(uid()),
                    None,
                    ParticipationAction.JOIN,
                    NOW,
                )

        assert participation_models.Participant.objects.filter(event_id=event_id).count() == 1
        assert participation_models.Event.objects.get(id=event_id).version == 1

    def test_moderation_log_round_trip(self, db_admission, db_moderation, clock):
        event_id = create_event(capacity=2)
        user, organizer = uid(), uid()
        db_admission.join(event_id, user)
        db_moderation.reject(event_id, user, organizer, reason="abusive messages")
        clock.now += timedelta(minutes=5)
        db_moderation.reinstate(event_id, user, organizer)

        history = db_moderation.moderation_history(event_id, user)

        assert [e.action for e in history] == [
            ModerationAction.REJECT,
            ModerationAction.REINSTATE,
        ]
        assert history[0].reason == "abusive messages"
        assert history[0].from_status is ParticipationStatus.REGISTERED
        assert str(history[1].actor_id) == organizer

        record = db_admission.get_participant(event_id, user)
        assert record.status is ParticipationStatus.REGISTERED
        assert record.rejected_at == NOW
        assert record.reinstated_at == NOW + timedelta(minutes=5)


class TestEventVersion:
    """Edits made through the Event model invalidate open transactions."""

    def test_capacity_edit_invalidates_open_transaction(self, participation_store, db_admission):
        event_id = create_event(capacity=2)
        db_admission.join(event_id, uid())
        eid = EventId.from_string(event_id)

        with pytest.raises(ConcurrencyConflictError):
            with participation_store.transaction(eid) as stale:
                event = participation_models.Event.objects.get(id=event_id)
                event.capacity = 1
                event.save()
                db_admission.place(
                    stale,
                    UserId.from_string(uid()),
                    None,
                    ParticipationAction.JOIN,
                    NOW,
                )

        assert db_admission.summary(event_id).registered == 1

    def test_waitlist_toggle_bumps_version(self):
        event_id = create_event(capacity=1)
        event = participation_models.Event.objects.get(id=event_id)

        event.waitlist_enabled = True
        event.save(update_fields=["waitlist_enabled"])

        assert event.version == 1
        assert participation_models.Event.objects.get(id=event_id).version == 1

    def test_title_only_update_keeps_version(self):
        event_id = create_event(capacity=1)
        event = participation_models.Event.objects.get(id=event_id)

        event.title = "Pottery night"
        event.save(update_fields=["title"])

        assert participation_models.Event.objects.get(id=event_id).version == 0

    def test_stale_instance_does_not_roll_version_back(self, db_admission):
        event_id = create_event(capacity=3)
        stale = participation_models.Event.objects.get(id=event_id)
        db_admission.join(event_id, uid())
        db_admission.join(event_id, uid())

        stale.capacity = 5
        stale.save()

        assert stale.version == 3
        assert participation_models.Event.objects.get(id=event_id).version == 3


class TestDjangoAvailabilityStores:
    """Tests for the Django availability stores."""

    def test_template_round_trip(self, make_template, facilitator_id):
        store = DjangoAvailabilityTemplateStore()
        template = make_template(
            {Weekday.MONDAY: [("09:00", "12:00")], Weekday.THURSDAY: [("14:00", "18:00")]},
            timezone="Europe/Lisbon",
        )

        store.save_template(template)
        store.save_template(template.with_policy(buffer_minutes=5))

        loaded = store.get_template(facilitator_id)
        assert loaded == template.with_policy(buffer_minutes=5)
        assert availability_models.FacilitatorAvailability.objects.count() == 1

    def test_missing_template(self):
        store = DjangoAvailabilityTemplateStore()
        assert store.get_template(FacilitatorId(uuid.uuid4())) is None

    def test_malformed_stored_template(self, facilitator_id):
        availability_models.FacilitatorAvailability.objects.create(
            facilitator_id=facilitator_id.value,
            timezone="Nowhere/Special",
            weekly_schedule={},
        )
        with pytest.raises(ConfigurationError):
            DjangoAvailabilityTemplateStore().get_template(facilitator_id)

    def test_booking_store_filters_by_overlap_and_status(self, facilitator_id):
        Booking = availability_models.FacilitatorBooking
        Booking.objects.create(
            facilitator_id=facilitator_id.value, starts_at=at(9), ends_at=at(10)
        )
        Booking.objects.create(
            facilitator_id=facilitator_id.value, starts_at=at(13), ends_at=at(14)
        )
        Booking.objects.create(
            facilitator_id=facilitator_id.value,
            starts_at=at(10, 15),
            ends_at=at(11, 15),
            status=Booking.Status.CANCELLED,
        )
        Booking.objects.create(facilitator_id=uuid.uuid4(), starts_at=at(9), ends_at=at(10))

        found = DjangoBookingStore().list_bookings(
            facilitator_id, TimeWindow(at(8), at(12))
        )

        assert found == [TimeWindow(at(9), at(10))]

    def test_service_over_django_stores(self, make_template, facilitator_id, clock):
        DjangoAvailabilityTemplateStore().save_template(make_template())
        availability_models.FacilitatorBooking.objects.create(
            facilitator_id=facilitator_id.value, starts_at=at(9), ends_at=at(10)
        )
        service = AvailabilityService(
            DjangoAvailabilityTemplateStore(), DjangoBookingStore(), clock=clock
        )

        slots = service.get_bookable_slots(str(facilitator_id), at(0), at(23))

        assert slots == [TimeWindow(at(10, 15), at(11, 15))]


class TestPolicyDefaults:
    """Tests for the AVAILABILITY_POLICY_DEFAULTS setting."""

    def test_defaults_without_setting(self, settings):
        settings.AVAILABILITY_POLICY_DEFAULTS = {}
        assert policy_defaults().buffer_minutes == 15

    def test_overrides(self, settings):
        settings.AVAILABILITY_POLICY_DEFAULTS = {
            "buffer_minutes": 0,
            "preferred_session_lengths": [45],
        }
        policy = policy_defaults()
        assert policy.buffer_minutes == 0
        assert policy.preferred_session_lengths == frozenset({45})

    def test_invalid_override(self, settings):
        settings.AVAILABILITY_POLICY_DEFAULTS = {"max_sessions_per_day": 0}
        with pytest.raises(ConfigurationError):
            policy_defaults()


class TestAdminRegistration:
    """Ledger and availability tables are editable in the admin."""

    @pytest.mark.parametrize(
        "model",
        [
            participation_models.Event,
            participation_models.Participant,
            participation_models.ModerationLogEntry,
            availability_models.FacilitatorAvailability,
            availability_models.FacilitatorBooking,
        ],
    )
    def test_registered(self, model):
        assert admin.site.is_registered(model)
