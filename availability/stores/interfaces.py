"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from availability.domain import AvailabilityTemplate, FacilitatorId, TimeWindow


class AvailabilityTemplateStore(ABC):
    """Interface for reading and writing availability templates."""

    @abstractmethod
    def get_template(self, facilitator_id: FacilitatorId) -> AvailabilityTemplate | None:
        """Return the facilitator's template, or None if none was saved.

        Raises:
            ConfigurationError: If the stored document is malformed.
        """
        ...

    @abstractmethod
    def save_template(self, template: AvailabilityTemplate) -> None:
        """Create or replace the facilitator's template."""
        ...


class BookingStore(ABC):
    """Interface for the facilitator bookings already taken."""

    @abstractmethod
    def list_bookings(
        self, facilitator_id: FacilitatorId, horizon: TimeWindow
    ) -> list[TimeWindow]:
        """Return active bookings overlapping ``horizon``, ordered by start."""
        ...
