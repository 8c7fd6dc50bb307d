import uuid

import availability.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FacilitatorAvailability",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("facilitator_id", models.UUIDField(unique=True)),
                ("is_active", models.BooleanField(default=False)),
                ("timezone", models.CharField(max_length=64)),
                ("weekly_schedule", models.JSONField(blank=True, default=dict)),
                ("min_advance_notice_hours", models.PositiveIntegerField(default=24)),
                ("max_advance_booking_days", models.PositiveIntegerField(default=30)),
                ("buffer_time_minutes", models.PositiveIntegerField(default=15)),
                (
                    "preferred_session_lengths",
                    models.JSONField(blank=True, default=availability.models.default_session_lengths),
                ),
                ("max_sessions_per_day", models.PositiveIntegerField(default=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "facilitator availability",
            },
        ),
        migrations.CreateModel(
            name="FacilitatorBooking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("facilitator_id", models.UUIDField()),
                ("event_id", models.UUIDField(blank=True, null=True)),
                ("starts_at", models.DateTimeField()),
                ("ends_at", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        default="confirmed",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["starts_at"],
                "indexes": [
                    models.Index(fields=["facilitator_id", "starts_at"], name="booking_facilitator_start_idx")
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("ends_at__gt", models.F("starts_at"))),
                        name="facilitator_booking_ends_after_start",
                    )
                ],
            },
        ),
    ]
