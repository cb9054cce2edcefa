"""
CDS Hooks API Models

Pydantic request/response schemas for the HTTP layer. The hook request is
deliberately permissive: only the top-level shape is checked, and
``context`` / ``prefetch`` contents are left to the engine, which tolerates
anything.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceDefinition(BaseModel):
    """One entry of the discovery response."""
    hook: str
    title: str
    description: str
    id: str
    prefetch: Dict[str, str] = Field(default_factory=dict)


class DiscoveryResponse(BaseModel):
    """GET /cds-services"""
    services: List[ServiceDefinition]


class CDSHookRequest(BaseModel):
    """
    Body of a CDS Hooks service call.

    Unknown fields (fhirAuthorization, extension, ...) are accepted and
    ignored.
    """
    model_config = ConfigDict(extra="allow")

    hook: Optional[str] = None
    hookInstance: Optional[str] = None
    fhirServer: Optional[str] = None
    context: Optional[Any] = None
    prefetch: Optional[Any] = None


class CDSHookResponse(BaseModel):
    """Cards returned by a service call, in rule order."""
    cards: List[Dict[str, Any]] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Liveness payload."""
    status: str
    version: str
    service_count: int
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Body returned for CDSServiceError and unexpected failures."""
    error: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
