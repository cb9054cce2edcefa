"""
API Models
"""
from .hooks import (
    CDSHookRequest,
    CDSHookResponse,
    DiscoveryResponse,
    ErrorResponse,
    HealthResponse,
    ServiceDefinition,
)

__all__ = [
    "CDSHookRequest",
    "CDSHookResponse",
    "DiscoveryResponse",
    "ErrorResponse",
    "HealthResponse",
    "ServiceDefinition",
]
