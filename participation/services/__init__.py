from participation.services.admission_service import AdmissionService
from participation.services.moderation_service import ModerationService

__all__ = ["AdmissionService", "ModerationService"]
