"""
Integrity Shared Utilities
Configuration, errors and logging used across the service
"""

from .config import Settings, get_settings
from .errors import (
    DecodeError,
    ErrorResponse,
    IntegrityException,
    InvalidInputError,
    SealFormatError,
)
from .logger import get_logger

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Logging
    "get_logger",
    # Errors
    "IntegrityException",
    "InvalidInputError",
    "DecodeError",
    "SealFormatError",
    "ErrorResponse",
]
