"""
Credential storage and password hashing for the gateway.
"""

from __future__ import annotations

import hmac
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import bcrypt

from shared.errors import EncodingError
from shared.logging import get_logger

# bcrypt only looks at the first 72 bytes of a secret.
BCRYPT_MAX_SECRET_BYTES = 72


@dataclass(frozen=True)
class Credential:
    """A registered identity and the bcrypt hash of its secret."""

    identity: str
    secret_hash: str


class PasswordHasher:
    """Salted one-way hashing of secrets with bcrypt."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, secret: str) -> str:
        """Hash a plaintext secret."""
        encoded = secret.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_SECRET_BYTES:
            raise EncodingError(
                f"Secret exceeds {BCRYPT_MAX_SECRET_BYTES} bytes",
                details={"length": len(encoded)},
            )

        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds))
        except ValueError as exc:
            raise EncodingError("Failed to hash secret", details={"error": str(exc)}) from exc
        return hashed.decode("ascii")

    def verify(self, secret: str, secret_hash: str) -> bool:
        """Check a plaintext secret against a stored hash."""
        encoded = secret.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_SECRET_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, secret_hash.encode("ascii"))
        except ValueError:
            # Empty or corrupt stored hash
            return False


class CredentialStore(ABC):
    """Storage for registered credentials, keyed by identity."""

    @abstractmethod
    def get(self, identity: str) -> Optional[Credential]:
        """Return the credential registered for ``identity``, if any."""

    @abstractmethod
    def put(self, credential: Credential) -> None:
        """Store a credential, replacing any previous registration."""

    @abstractmethod
    def verify(self, identity: str, secret: str) -> bool:
        """Check an identity/secret pair against the stored credential."""


class SingleCredentialStore(CredentialStore):
    """Holds exactly one credential; each ``put`` overwrites the last.

    All access goes through one lock so a reader never sees an identity
    paired with another registration's hash.
    """

    def __init__(self, hasher: PasswordHasher) -> None:
        self.hasher = hasher
        self.logger = get_logger("gateway.auth.credentials")
        self._credential: Optional[Credential] = None
        self._lock = threading.Lock()

    def get(self, identity: str) -> Optional[Credential]:
        with self._lock:
            credential = self._credential
        if credential is None or not hmac.compare_digest(
            credential.identity.encode("utf-8"), identity.encode("utf-8")
        ):
            return None
        return credential

    def put(self, credential: Credential) -> None:
        with self._lock:
            replaced = self._credential
            self._credential = credential

        if replaced is not None:
            self.logger.info(
                "Credential replaced",
                previous_identity=replaced.identity,
                identity=credential.identity,
            )
        else:
            self.logger.info("Credential registered", identity=credential.identity)

    def verify(self, identity: str, secret: str) -> bool:
        credential = self.get(identity)
        if credential is None:
            return False
        return self.hasher.verify(secret, credential.secret_hash)
