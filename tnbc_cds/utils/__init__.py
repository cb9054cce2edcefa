"""
Utilities Package - Logging and Exception Handling
"""
from .logging import setup_logging
from .exceptions import (
    CDSServiceError,
    InvalidRequestError,
    ServiceNotFoundError,
)

__all__ = [
    "setup_logging",
    "CDSServiceError",
    "InvalidRequestError",
    "ServiceNotFoundError",
]
