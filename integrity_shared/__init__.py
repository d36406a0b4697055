"""
Integrity Shared Library
Common models and utilities for the content-integrity service
"""

__version__ = "0.1.0"

from . import models
from . import utils

__all__ = ["models", "utils"]
