"""
Authentication for the gateway: credential storage, token issuing, and the
register/login operations built on them.
"""

from .credentials import Credential, CredentialStore, PasswordHasher, SingleCredentialStore
from .service import AuthService
from .tokens import Claims, TokenIssuer

__all__ = [
    "AuthService",
    "Claims",
    "Credential",
    "CredentialStore",
    "PasswordHasher",
    "SingleCredentialStore",
    "TokenIssuer",
]
