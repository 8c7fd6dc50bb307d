from common.errors import CommonErrorCode, DomainError, InvalidIdError

__all__ = ["CommonErrorCode", "DomainError", "InvalidIdError"]
