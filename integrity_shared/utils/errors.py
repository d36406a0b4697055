"""
Integrity Shared Errors
Custom exception classes
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class IntegrityException(Exception):
    """Base exception for the integrity service"""

    error_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(IntegrityException):
    """Missing or malformed input to a hashing or tokenizing function (400)"""

    error_code = "INVALID_INPUT"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class DecodeError(IntegrityException):
    """Malformed serialized fingerprint (400)"""

    error_code = "DECODE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class SealFormatError(IntegrityException):
    """Serialized seal that cannot be parsed (400)"""

    error_code = "SEAL_FORMAT_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class ErrorResponse(BaseModel):
    """JSON body returned for handled exceptions"""

    error_code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
