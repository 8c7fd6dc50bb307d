"""Django ORM implementation of the availability stores."""

from availability import models
from availability.conf import policy_defaults
from availability.domain import AvailabilityTemplate, FacilitatorId, TimeWindow
from availability.stores.interfaces import AvailabilityTemplateStore, BookingStore


class DjangoAvailabilityTemplateStore(AvailabilityTemplateStore):
    """Database-backed template store using Django ORM."""

    def get_template(self, facilitator_id: FacilitatorId) -> AvailabilityTemplate | None:
        row = models.FacilitatorAvailability.objects.filter(
            facilitator_id=facilitator_id.value
        ).first()
        if row is None:
            return None
        return AvailabilityTemplate.from_mapping(
            facilitator_id,
            {
                "is_active": row.is_active,
                "timezone": row.timezone,
                "weekly_schedule": row.weekly_schedule,
                "min_advance_notice_hours": row.min_advance_notice_hours,
                "max_advance_booking_days": row.max_advance_booking_days,
                "buffer_time_minutes": row.buffer_time_minutes,
                "preferred_session_lengths": row.preferred_session_lengths,
                "max_sessions_per_day": row.max_sessions_per_day,
            },
            defaults=policy_defaults(),
        )

    def save_template(self, template: AvailabilityTemplate) -> None:
        document = template.to_mapping()
        models.FacilitatorAvailability.objects.update_or_create(
            facilitator_id=template.facilitator_id.value,
            defaults=document,
        )


class DjangoBookingStore(BookingStore):
    """Reads confirmed facilitator bookings from the database."""

    def list_bookings(
        self, facilitator_id: FacilitatorId, horizon: TimeWindow
    ) -> list[TimeWindow]:
        rows = models.FacilitatorBooking.objects.filter(
            facilitator_id=facilitator_id.value,
            status=models.FacilitatorBooking.Status.CONFIRMED,
            starts_at__lt=horizon.end,
            ends_at__gt=horizon.start,
        ).order_by("starts_at")
        return [TimeWindow(start=row.starts_at, end=row.ends_at) for row in rows]
