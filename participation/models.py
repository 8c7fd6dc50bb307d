"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models
from django.db.models import F

CAPACITY_FIELDS = frozenset({"capacity", "waitlist_enabled"})


class Event(models.Model):
    """Persistence model for the capacity view of an event.

    ``version`` is bumped by every participation commit and by every save
    that may write ``capacity`` or ``waitlist_enabled``; participation writes
    are conditioned on it. A save never writes back a version it read, so a
    stale instance cannot roll it back. Pass ``update_fields`` without the
    capacity fields to edit other columns without invalidating open joins.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    waitlist_enabled = models.BooleanField(default=False)
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title or str(self.id)

    def save(self, *args, **kwargs):
        if self._state.adding:
            return super().save(*args, **kwargs)
        update_fields = kwargs.get("update_fields")
        if update_fields is None or CAPACITY_FIELDS & set(update_fields):
            self.version = F("version") + 1
        else:
            self.version = F("version")
        if update_fields is not None and "version" not in update_fields:
            kwargs["update_fields"] = [*update_fields, "version"]
        super().save(*args, **kwargs)
        self.refresh_from_db(fields=["version"])


class Participant(models.Model):
    """Persistence model for a user's participation in an event."""

    class Status(models.TextChoices):
        REGISTERED = "registered"
        WAITLISTED = "waitlisted"
        ATTENDED = "attended"
        NO_SHOW = "no_show"
        CANCELLED = "cancelled"
        REJECTED = "rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="participants")
    user_id = models.UUIDField()
    status = models.CharField(max_length=16, choices=Status.choices)
    registered_at = models.DateTimeField()
    waitlist_position = models.PositiveIntegerField(blank=True, null=True)
    rejected_at = models.DateTimeField(blank=True, null=True)
    rejected_by = models.UUIDField(blank=True, null=True)
    rejection_reason = models.TextField(blank=True, null=True)
    reinstated_at = models.DateTimeField(blank=True, null=True)
    reinstated_by = models.UUIDField(blank=True, null=True)
    updated_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-registered_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user_id"], name="participant_unique_per_event"
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="participant_event_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.event_id} ({self.status})"


class ModerationLogEntry(models.Model):
    """Persistence model for organizer reject/reinstate actions."""

    class Action(models.TextChoices):
        REJECT = "reject"
        REINSTATE = "reinstate"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="moderation_log")
    user_id = models.UUIDField()
    action = models.CharField(max_length=16, choices=Action.choices)
    actor_id = models.UUIDField()
    occurred_at = models.DateTimeField()
    from_status = models.CharField(max_length=16, choices=Participant.Status.choices)
    to_status = models.CharField(max_length=16, choices=Participant.Status.choices)
    reason = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ["occurred_at"]
        indexes = [
            models.Index(fields=["event", "user_id"], name="moderation_event_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.user_id} by {self.actor_id}"
