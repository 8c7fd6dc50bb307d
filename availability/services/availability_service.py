"""Availability service - facilitator slot lookups.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from availability.domain import (
    AvailabilityTemplate,
    FacilitatorId,
    SlotUnavailableError,
    TemplateNotFoundError,
    TimeWindow,
)
from availability.services.slot_engine import compute_slots
from availability.stores.interfaces import AvailabilityTemplateStore, BookingStore
from common.errors import InvalidIdError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AvailabilityService:
    """Service for facilitator availability and bookable slots."""

    def __init__(
        self,
        templates: AvailabilityTemplateStore,
        bookings: BookingStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._templates = templates
        self._bookings = bookings
        self._clock = clock

    def get_template(self, facilitator_id: str) -> AvailabilityTemplate:
        """Return a facilitator's template.

        Raises:
            InvalidIdError: If the facilitator_id is not a valid UUID.
            TemplateNotFoundError: If the facilitator has no template.
            ConfigurationError: If the stored template is malformed.
        """
        fid = _parse_facilitator_id(facilitator_id)
        template = self._templates.get_template(fid)
        if template is None:
            raise TemplateNotFoundError(facilitator_id)
        return template

    def get_bookable_slots(
        self,
        facilitator_id: str,
        horizon_start: datetime,
        horizon_end: datetime,
        now: datetime | None = None,
    ) -> list[TimeWindow]:
        """Return the facilitator's free slots within the horizon."""
        template = self.get_template(facilitator_id)
        if horizon_end <= horizon_start:
            return []

        bookings = self._bookings.list_bookings(
            template.facilitator_id, TimeWindow(start=horizon_start, end=horizon_end)
        )
        slots = compute_slots(
            template,
            horizon_start,
            horizon_end,
            bookings,
            now=now or self._clock(),
        )
        logger.debug(
            "Computed %d slots for facilitator %s (%d existing bookings)",
            len(slots),
            facilitator_id,
            len(bookings),
        )
        return slots

    def check_booking_request(
        self,
        facilitator_id: str,
        window: TimeWindow,
        now: datetime | None = None,
    ) -> TimeWindow:
        """Confirm that ``window`` is one of the facilitator's bookable slots.

        Raises:
            SlotUnavailableError: If the window is not currently bookable.
        """
        slots = self.get_bookable_slots(facilitator_id, window.start, window.end, now=now)
        for slot in slots:
            if slot == window:
                return slot
        raise SlotUnavailableError(
            facilitator_id, window.start.isoformat(), window.end.isoformat()
        )


def _parse_facilitator_id(raw: str) -> FacilitatorId:
    try:
        return FacilitatorId.from_string(raw)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError("facilitator", str(raw)) from None
