"""
Shared error handling for the Edge Cache Layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class EdgeLayerException(Exception):
    """Base exception for Edge Cache Layer services."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ExternalServiceError(EdgeLayerException):
    """External service errors."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        self.service = service
        self.reason = message
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class OriginUnreachableError(ExternalServiceError):
    """Origin server failed to produce a 2xx response."""

    def __init__(self, message: str = "Origin server unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("origin", message, details)
        self.code = "ORIGIN_UNREACHABLE"


class ApiUnreachableError(ExternalServiceError):
    """Backend API failed to produce a 2xx response."""

    def __init__(self, message: str = "API server unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("api", message, details)
        self.code = "API_UNREACHABLE"
