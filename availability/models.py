"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models


def default_session_lengths() -> list[int]:
    return [60, 90]


class FacilitatorAvailability(models.Model):
    """Persistence model for a facilitator's availability template."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facilitator_id = models.UUIDField(unique=True)
    is_active = models.BooleanField(default=False)
    timezone = models.CharField(max_length=64)
    weekly_schedule = models.JSONField(default=dict, blank=True)
    min_advance_notice_hours = models.PositiveIntegerField(default=24)
    max_advance_booking_days = models.PositiveIntegerField(default=30)
    buffer_time_minutes = models.PositiveIntegerField(default=15)
    preferred_session_lengths = models.JSONField(default=default_session_lengths, blank=True)
    max_sessions_per_day = models.PositiveIntegerField(default=3)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "facilitator availability"

    def __str__(self) -> str:
        return f"Availability for {self.facilitator_id}"


class FacilitatorBooking(models.Model):
    """Persistence model for a facilitator booking made by an organizer."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed"
        CANCELLED = "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facilitator_id = models.UUIDField()
    event_id = models.UUIDField(blank=True, null=True)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.CONFIRMED
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["facilitator_id", "starts_at"], name="booking_facilitator_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(ends_at__gt=models.F("starts_at")),
                name="facilitator_booking_ends_after_start",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.facilitator_id} {self.starts_at} - {self.ends_at}"
