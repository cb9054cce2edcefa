"""
Custom Exception Hierarchy

Errors raised by the HTTP layer around the advisory engine. The engine
itself never raises for bad clinical data; these cover requests that cannot
be evaluated at all.
"""
from typing import Optional, Dict, Any


class CDSServiceError(Exception):
    """Base exception for all CDS service errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidRequestError(CDSServiceError):
    """The hook request body is not a JSON object."""

    status_code = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
            details=details
        )


class ServiceNotFoundError(CDSServiceError):
    """A hook was invoked for a service id this server does not expose."""

    status_code = 404

    def __init__(
        self,
        service_id: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"No CDS service registered with id '{service_id}'",
            code="SERVICE_NOT_FOUND",
            details={"service_id": service_id, **(details or {})}
        )
        self.service_id = service_id
