from availability.services.availability_service import AvailabilityService
from availability.services.slot_engine import compute_slots

__all__ = ["AvailabilityService", "compute_slots"]
