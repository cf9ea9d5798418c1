"""
Authentication gate for protected gateway routes.
"""

from typing import Optional

from fastapi import Request

from shared.errors import AuthenticationError, InvalidTokenError
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector

from ..auth.tokens import Claims, TokenIssuer

BEARER_SCHEME = "bearer"


class AuthGate:
    """Bearer token check in front of the geocoding routes."""

    def __init__(self, issuer: TokenIssuer, metrics: Optional[MetricsCollector] = None):
        self.issuer = issuer
        self.metrics = metrics
        self.logger = get_logger("gateway.auth_gate")

    async def authenticate_request(self, request: Request) -> Claims:
        """Authenticate incoming request with its bearer token.

        Only the headers are inspected; the body is left unread so a
        rejected request never reaches decoding or the provider.
        """
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            self._reject("missing_header")
            raise AuthenticationError("Authorization header required")

        # Auth schemes are case-insensitive
        parts = auth_header.split(None, 1)
        if not parts or parts[0].lower() != BEARER_SCHEME:
            self._reject("bad_scheme")
            raise AuthenticationError("Invalid authorization header format")

        token = parts[1].strip() if len(parts) > 1 else ""
        if not token:
            self._reject("empty_token")
            raise AuthenticationError("Bearer token is empty")

        try:
            claims = self.issuer.verify(token)
        except InvalidTokenError as e:
            self._reject("invalid_token")
            self.logger.warning("Token verification failed", error=e.message)
            raise AuthenticationError(e.message) from e

        request.state.claims = claims
        set_user_context(claims.identity)

        self.logger.info("Request authenticated", identity=claims.identity)
        return claims

    def _reject(self, reason: str) -> None:
        if self.metrics:
            self.metrics.record_auth_event(f"rejected_{reason}")
