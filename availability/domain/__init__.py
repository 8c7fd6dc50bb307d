from availability.domain.errors import (
    ConfigurationError,
    SlotUnavailableError,
    TemplateNotFoundError,
)
from availability.domain.template import (
    AvailabilityTemplate,
    BookingPolicy,
    LocalInterval,
    Weekday,
)
from availability.domain.time_window import TimeWindow
from availability.domain.value_objects import FacilitatorId

__all__ = [
    "AvailabilityTemplate",
    "BookingPolicy",
    "LocalInterval",
    "Weekday",
    "TimeWindow",
    "FacilitatorId",
    "ConfigurationError",
    "SlotUnavailableError",
    "TemplateNotFoundError",
]
