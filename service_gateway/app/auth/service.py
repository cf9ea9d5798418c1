"""
Register and login operations.
"""

from typing import Optional

from shared.errors import InvalidCredentialsError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .credentials import Credential, CredentialStore, PasswordHasher
from .tokens import TokenIssuer


class AuthService:
    """Issues tokens against the single registered credential."""

    def __init__(
        self,
        store: CredentialStore,
        issuer: TokenIssuer,
        hasher: PasswordHasher,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.store = store
        self.issuer = issuer
        self.hasher = hasher
        self.metrics = metrics
        self.logger = get_logger("gateway.auth.service")

    def register(self, identity: str, secret: str) -> str:
        """Store ``identity``/``secret`` (replacing any prior credential) and return a token.

        The store is only written once hashing and signing have both
        succeeded.
        """
        secret_hash = self.hasher.hash(secret)
        token = self.issuer.issue(identity)
        self.store.put(Credential(identity=identity, secret_hash=secret_hash))

        self._record("register")
        self.logger.info("User registered", identity=identity)
        return token

    def login(self, identity: str, secret: str) -> str:
        """Return a token for ``identity`` if the secret matches the stored credential.

        A candidate token is signed before the credential check; it is
        dropped when the check fails.
        """
        candidate = self.issuer.issue(identity)

        if not self.store.verify(identity, secret):
            self._record("login_failed")
            self.logger.warning("Login rejected", identity=identity)
            raise InvalidCredentialsError()

        self._record("login")
        self.logger.info("User logged in", identity=identity)
        return candidate

    def _record(self, event: str) -> None:
        if self.metrics:
            self.metrics.record_auth_event(event)
