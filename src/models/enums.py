"""
Enum definitions for the User Records Backend
"""

from enum import Enum

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

# Error taxonomy shared by the service layer and the HTTP adapter
class ErrorType(str, Enum):
    """
    Outcome categories for failed service operations.

    - VALIDATION_ERROR: missing, out-of-range or malformed input; never reaches the store
    - NOT_FOUND: no record matches the identifier
    - CONFLICT: the store reported a uniqueness violation
    - INTERNAL_ERROR: any other store or transport failure
    """
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

ERROR_STATUS_CODES = {
    ErrorType.VALIDATION_ERROR: 400,
    ErrorType.NOT_FOUND: 404,
    ErrorType.CONFLICT: 409,
    ErrorType.INTERNAL_ERROR: 500,
}

class CreateChannel(str, Enum):
    """How the credentials of a creation request travelled"""
    REQUEST_BODY = "request_body"
    QUERY_STRING = "query_string"
