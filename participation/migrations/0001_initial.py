import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(blank=True, max_length=255)),
                ("capacity", models.PositiveIntegerField(default=0)),
                ("waitlist_enabled", models.BooleanField(default=False)),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.UUIDField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("registered", "Registered"),
                            ("waitlisted", "Waitlisted"),
                            ("attended", "Attended"),
                            ("no_show", "No Show"),
                            ("cancelled", "Cancelled"),
                            ("rejected", "Rejected"),
                        ],
                        max_length=16,
                    ),
                ),
                ("registered_at", models.DateTimeField()),
                ("waitlist_position", models.PositiveIntegerField(blank=True, null=True)),
                ("rejected_at", models.DateTimeField(blank=True, null=True)),
                ("rejected_by", models.UUIDField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("reinstated_at", models.DateTimeField(blank=True, null=True)),
                ("reinstated_by", models.UUIDField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="participation.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-registered_at"],
                "indexes": [models.Index(fields=["event", "status"], name="participant_event_status_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user_id"), name="participant_unique_per_event")
                ],
            },
        ),
        migrations.CreateModel(
            name="ModerationLogEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_id", models.UUIDField()),
                (
                    "action",
                    models.CharField(
                        choices=[("reject", "Reject"), ("reinstate", "Reinstate")],
                        max_length=16,
                    ),
                ),
                ("actor_id", models.UUIDField()),
                ("occurred_at", models.DateTimeField()),
                (
                    "from_status",
                    models.CharField(
                        choices=[
                            ("registered", "Registered"),
                            ("waitlisted", "Waitlisted"),
                            ("attended", "Attended"),
                            ("no_show", "No Show"),
                            ("cancelled", "Cancelled"),
                            ("rejected", "Rejected"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "to_status",
                    models.CharField(
                        choices=[
                            ("registered", "Registered"),
                            ("waitlisted", "Waitlisted"),
                            ("attended", "Attended"),
                            ("no_show", "No Show"),
                            ("cancelled", "Cancelled"),
                            ("rejected", "Rejected"),
                        ],
                        max_length=16,
                    ),
                ),
                ("reason", models.TextField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="moderation_log",
                        to="participation.event",
                    ),
                ),
            ],
            options={
                "ordering": ["occurred_at"],
                "indexes": [models.Index(fields=["event", "user_id"], name="moderation_event_user_idx")],
            },
        ),
    ]
