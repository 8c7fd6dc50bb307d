from availability.stores.interfaces import AvailabilityTemplateStore, BookingStore
from availability.stores.memory_store import (
    InMemoryAvailabilityTemplateStore,
    InMemoryBookingStore,
)

__all__ = [
    "AvailabilityTemplateStore",
    "BookingStore",
    "InMemoryAvailabilityTemplateStore",
    "InMemoryBookingStore",
]
