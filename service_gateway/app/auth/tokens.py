"""
Bearer token issuing and verification for the gateway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError

from shared.errors import ConfigurationError, EncodingError, InvalidTokenError
from shared.logging import get_logger

RESERVED_CLAIMS = frozenset({"sub", "iat", "exp"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    """Verified token payload."""

    identity: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Claims":
        """Build claims from a decoded JWT payload."""
        identity = payload.get("sub")
        if not isinstance(identity, str):
            raise InvalidTokenError("Token missing subject claim")

        return cls(
            identity=identity,
            issued_at=_from_timestamp(payload.get("iat")),
            expires_at=_from_timestamp(payload.get("exp")),
            extra={key: value for key, value in payload.items() if key not in RESERVED_CLAIMS},
        )


def _from_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return None


class TokenIssuer:
    """Signs and verifies HS256 bearer tokens carrying an identity claim.

    The signing key is fixed at construction and never mutated, so one
    issuer can be shared by every request handler.
    """

    algorithm = "HS256"

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = 3600,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ConfigurationError("Token signing key is not configured")

        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.logger = get_logger("gateway.auth.tokens")

    def issue(self, identity: str, **extra: Any) -> str:
        """Create a signed token for ``identity``."""
        now = self._clock()
        payload: Dict[str, Any] = {
            key: value for key, value in extra.items() if key not in RESERVED_CLAIMS
        }
        payload["sub"] = identity
        payload["iat"] = int(now.timestamp())
        if self.ttl_seconds > 0:
            payload["exp"] = int((now + timedelta(seconds=self.ttl_seconds)).timestamp())

        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (JOSEError, TypeError) as exc:
            self.logger.error("Token signing failed", error=str(exc))
            raise EncodingError("Failed to sign token", details={"error": str(exc)}) from exc

    def verify(self, token: str) -> Claims:
        """Validate ``token`` and return its claims."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise InvalidTokenError("Token has expired") from exc
        except JOSEError as exc:
            raise InvalidTokenError("Token validation failed", details={"error": str(exc)}) from exc

        return Claims.from_payload(payload)
