"""
Unit tests for TokenIssuer.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest

from service_gateway.app.auth.tokens import Claims, TokenIssuer
from shared.errors import ConfigurationError, InvalidTokenError
from shared.test_helpers import TEST_JWT_SECRET, MockTokenGenerator

OTHER_SECRET = "another-signing-key-0123456789abcdef-xyz"


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


class TestTokenIssuer:
    """Test cases for TokenIssuer."""

    @pytest.fixture
    def issuer(self):
        """Create issuer with the test signing key."""
        return TokenIssuer(TEST_JWT_SECRET, ttl_seconds=3600)

    def test_issue_and_verify(self, issuer):
        """Test a freshly issued token verifies to its identity."""
        token = issuer.issue("alice")
        claims = issuer.verify(token)

        assert isinstance(claims, Claims)
        assert claims.identity == "alice"
        assert claims.issued_at is not None
        assert claims.expires_at - claims.issued_at == timedelta(seconds=3600)
        assert claims.extra == {}

    def test_extra_claims_round_trip(self, issuer):
        """Test extra claims are carried but cannot override reserved ones."""
        token = issuer.issue("alice", email="alice@example.com", sub="mallory")
        claims = issuer.verify(token)

        assert claims.identity == "alice"
        assert claims.extra == {"email": "alice@example.com"}

    def test_ttl_zero_disables_expiry(self):
        """Test tokens issued with TTL 0 carry no exp claim."""
        issuer = TokenIssuer(TEST_JWT_SECRET, ttl_seconds=0)
        token = issuer.issue("alice")

        payload = pyjwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])
        assert "exp" not in payload
        assert issuer.verify(token).expires_at is None

    def test_empty_secret_rejected(self):
        """Test an empty signing key is a configuration error."""
        with pytest.raises(ConfigurationError):
            TokenIssuer("")

    def test_tampered_signature(self, issuer):
        """Test a token with another key's signature fails verification."""
        token = issuer.issue("alice")
        forged = TokenIssuer(OTHER_SECRET).issue("alice")
        header, payload, _ = token.split(".")
        tampered = ".".join([header, payload, forged.split(".")[2]])

        with pytest.raises(InvalidTokenError):
            issuer.verify(tampered)

    def test_tampered_payload(self, issuer):
        """Test changing the payload invalidates the signature."""
        token = issuer.issue("alice")
        header, _, signature = token.split(".")
        now = int(datetime.now(timezone.utc).timestamp())
        tampered = ".".join([header, _b64({"sub": "mallory", "iat": now}), signature])

        with pytest.raises(InvalidTokenError):
            issuer.verify(tampered)

    def test_wrong_key(self, issuer):
        """Test tokens signed under another key are rejected."""
        token = MockTokenGenerator(secret=OTHER_SECRET).generate_access_token("alice")

        with pytest.raises(InvalidTokenError):
            issuer.verify(token)

    def test_expired_token(self):
        """Test a token past its exp claim is rejected."""
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        issuer = TokenIssuer(TEST_JWT_SECRET, ttl_seconds=60, clock=lambda: issued)
        token = issuer.issue("alice")

        with pytest.raises(InvalidTokenError) as exc_info:
            issuer.verify(token)

        assert exc_info.value.message == "Token has expired"

    def test_garbage_token(self, issuer):
        """Test a non-JWT string is rejected."""
        with pytest.raises(InvalidTokenError):
            issuer.verify("not-a-token")

    def test_missing_subject(self, issuer):
        """Test a correctly signed token without sub is rejected."""
        token = pyjwt.encode({"email": "alice@example.com"}, TEST_JWT_SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            issuer.verify(token)

    def test_accepts_standard_hs256_tokens(self, issuer):
        """Test tokens from another HS256 implementation verify under the same key."""
        token = MockTokenGenerator().generate_access_token("alice", email="alice@example.com")
        claims = issuer.verify(token)

        assert claims.identity == "alice"
        assert claims.extra["email"] == "alice@example.com"

    def test_issuer_tokens_readable_by_pyjwt(self, issuer):
        """Test issued tokens decode with PyJWT."""
        token = issuer.issue("alice")
        payload = pyjwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])

        assert payload["sub"] == "alice"
