"""In-memory availability stores for tests and embedding."""

import threading

from availability.domain import AvailabilityTemplate, FacilitatorId, TimeWindow
from availability.stores.interfaces import AvailabilityTemplateStore, BookingStore


class InMemoryAvailabilityTemplateStore(AvailabilityTemplateStore):
    """Dict-backed template store."""

    def __init__(self) -> None:
        self._templates: dict[FacilitatorId, AvailabilityTemplate] = {}
        self._lock = threading.Lock()

    def get_template(self, facilitator_id: FacilitatorId) -> AvailabilityTemplate | None:
        with self._lock:
            return self._templates.get(facilitator_id)

    def save_template(self, template: AvailabilityTemplate) -> None:
        with self._lock:
            self._templates[template.facilitator_id] = template


class InMemoryBookingStore(BookingStore):
    """Dict-backed booking list."""

    def __init__(self) -> None:
        self._bookings: dict[FacilitatorId, list[TimeWindow]] = {}
        self._lock = threading.Lock()

    def add_booking(self, facilitator_id: FacilitatorId, window: TimeWindow) -> None:
        with self._lock:
            self._bookings.setdefault(facilitator_id, []).append(window)

    def list_bookings(
        self, facilitator_id: FacilitatorId, horizon: TimeWindow
    ) -> list[TimeWindow]:
        with self._lock:
            bookings = list(self._bookings.get(facilitator_id, ()))
        return sorted(b for b in bookings if b.overlaps(horizon))
