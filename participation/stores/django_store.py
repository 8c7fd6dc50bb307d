"""Django ORM implementation of the ParticipationStore.

Commits run in ``transaction.atomic`` and start with a conditional
``UPDATE ... WHERE version = expected``; if no row matches, another writer
got there first and the whole commit is abandoned.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import F

from participation import models
from participation.domain import (
    Capacity,
    ConcurrencyConflictError,
    EventCapacityView,
    EventId,
    EventSnapshot,
    ModerationAction,
    ModerationEntry,
    ParticipationRecord,
    ParticipationStatus,
    UserId,
)
from participation.stores.interfaces import ParticipationStore
from participation.stores.unit_of_work import ChangeSet

logger = logging.getLogger(__name__)


class DjangoParticipationStore(ParticipationStore):
    """Database-backed participation store using Django ORM."""

    def load_snapshot(self, event_id: EventId) -> EventSnapshot | None:
        with transaction.atomic():
            event = models.Event.objects.filter(id=event_id.value).first()
            if event is None:
                return None
            rows = list(models.Participant.objects.filter(event_id=event.id))
        return EventSnapshot(
            event_id=event_id,
            capacity_view=EventCapacityView(
                capacity=Capacity(event.capacity),
                waitlist_enabled=event.waitlist_enabled,
            ),
            version=event.version,
            records=tuple(_to_domain(row) for row in rows),
        )

    def commit(self, event_id: EventId, expected_version: int, changes: ChangeSet) -> int:
        try:
            with transaction.atomic():
                bumped = models.Event.objects.filter(
                    id=event_id.value, version=expected_version
                ).update(version=F("version") + 1)
                if bumped == 0:
                    logger.info(
                        "Version conflict on event %s at version %d",
                        event_id,
                        expected_version,
                    )
                    raise ConcurrencyConflictError(str(event_id))

                models.Participant.objects.bulk_create(
                    [models.Participant(**_to_fields(record)) for record in changes.created]
                )
                for record in changes.updated:
                    models.Participant.objects.filter(
                        event_id=record.event_id.value, user_id=record.user_id.value
                    ).update(**_to_fields(record))
                models.ModerationLogEntry.objects.bulk_create(
                    [_to_log_entry(entry) for entry in changes.moderation_entries]
                )
        except IntegrityError as exc:
            logger.info("Integrity conflict committing event %s: %s", event_id, exc)
            raise ConcurrencyConflictError(str(event_id)) from exc
        return expected_version + 1

    def list_moderation_entries(
        self, event_id: EventId, user_id: UserId | None = None
    ) -> list[ModerationEntry]:
        rows = models.ModerationLogEntry.objects.filter(event_id=event_id.value)
        if user_id is not None:
            rows = rows.filter(user_id=user_id.value)
        return [
            ModerationEntry(
                event_id=EventId(row.event_id),
                user_id=UserId(row.user_id),
                action=ModerationAction(row.action),
                actor_id=UserId(row.actor_id),
                occurred_at=row.occurred_at,
                from_status=ParticipationStatus(row.from_status),
                to_status=ParticipationStatus(row.to_status),
                reason=row.reason,
            )
            for row in rows.order_by("occurred_at")
        ]


def _optional_user(value) -> UserId | None:
    return UserId(value) if value is not None else None


def _to_domain(row: models.Participant) -> ParticipationRecord:
    return ParticipationRecord(
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id),
        status=ParticipationStatus(row.status),
        registered_at=row.registered_at,
        waitlist_position=row.waitlist_position,
        rejected_at=row.rejected_at,
        rejected_by=_optional_user(row.rejected_by),
        rejection_reason=row.rejection_reason,
        reinstated_at=row.reinstated_at,
        reinstated_by=_optional_user(row.reinstated_by),
        updated_at=row.updated_at,
    )


def _to_fields(record: ParticipationRecord) -> dict:
    return {
        "event_id": record.event_id.value,
        "user_id": record.user_id.value,
        "status": record.status.value,
        "registered_at": record.registered_at,
        "waitlist_position": record.waitlist_position,
        "rejected_at": record.rejected_at,
        "rejected_by": record.rejected_by.value if record.rejected_by else None,
        "rejection_reason": record.rejection_reason,
        "reinstated_at": record.reinstated_at,
        "reinstated_by": record.reinstated_by.value if record.reinstated_by else None,
        "updated_at": record.updated_at,
    }


def _to_log_entry(entry: ModerationEntry) -> models.ModerationLogEntry:
    return models.ModerationLogEntry(
        event_id=entry.event_id.value,
        user_id=entry.user_id.value,
        action=entry.action.value,
        actor_id=entry.actor_id.value,
        occurred_at=entry.occurred_at,
        from_status=entry.from_status.value,
        to_status=entry.to_status.value,
        reason=entry.reason,
    )
