"""
Shared error handling for the GeoProxy gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class GatewayError(Exception):
    """Base exception for gateway failures."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class MalformedRequestError(GatewayError):
    """Request body could not be decoded."""

    status_code = 400

    def __init__(self, message: str = "Malformed request body", details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_REQUEST", message, details)


class AuthenticationError(GatewayError):
    """Missing, malformed or rejected bearer token."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNAUTHENTICATED", message, details)


class InvalidCredentialsError(GatewayError):
    """Login identity or secret does not match the stored credential."""

    status_code = 401

    def __init__(self, message: str = "invalid username or password", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CREDENTIALS", message, details)


class InvalidTokenError(GatewayError):
    """Token signature, structure or expiry check failed."""

    status_code = 401

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_TOKEN", message, details)


class EncodingError(GatewayError):
    """Hashing or signing failed."""

    status_code = 500

    def __init__(self, message: str = "Encoding failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("ENCODING_ERROR", message, details)


class UpstreamError(GatewayError):
    """The geocoding provider call failed."""

    status_code = 502

    def __init__(self, service: str, message: str = "Upstream call failed", details: Optional[Dict[str, Any]] = None):
        self.service = service
        super().__init__("UPSTREAM_ERROR", f"{service}: {message}", details)


class UpstreamUnavailableError(UpstreamError):
    """The geocoding provider is unreachable or failing on its side."""
    pass


class ConfigurationError(GatewayError):
    """Required configuration is missing or invalid."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
