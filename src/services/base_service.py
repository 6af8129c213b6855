"""
Base service layer: the tagged result returned by every service operation
"""

from typing import Any, Optional
from dataclasses import dataclass

from models.enums import ErrorType, ERROR_STATUS_CODES

@dataclass
class ServiceResult:
    """Result from service operation: Ok(payload) or Fail(status_code, message)"""
    success: bool
    status_code: int
    message: str
    data: Optional[Any] = None
    error_type: Optional[ErrorType] = None

    @classmethod
    def ok(cls, data: Any, message: str, status_code: int = 200) -> "ServiceResult":
        return cls(success=True, status_code=status_code, message=message, data=data)

    @classmethod
    def fail(cls, error_type: ErrorType, message: str) -> "ServiceResult":
        return cls(
            success=False,
            status_code=ERROR_STATUS_CODES[error_type],
            message=message,
            error_type=error_type,
        )
