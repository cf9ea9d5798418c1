"""
Integration tests for the register/login/token flow.
"""

import pytest
import jwt
from fastapi.testclient import TestClient

from service_gateway.app.main import GatewayService
from shared.test_helpers import (
    TEST_JWT_SECRET,
    StubGeocodingProvider,
    TestDataFactory,
    TestEnvironment,
)


class TestAuthFlow:
    """Integration tests for complete auth flow."""

    @pytest.fixture
    def provider(self):
        """Create stub provider."""
        return StubGeocodingProvider(addresses=TestDataFactory.create_test_addresses())

    @pytest.fixture
    def client(self, provider):
        """Create test client for a fresh gateway."""
        service = GatewayService(config=TestEnvironment.get_mock_config(), provider=provider)
        return TestClient(service.app)

    def _search(self, client, token):
        return client.post(
            "/api/address/search",
            json={"query": "Ленина"},
            headers={"Authorization": f"Bearer {token}"}
        )

    def test_complete_auth_flow(self, client):
        """Test register, login, and use of both tokens."""
        # 1. Register
        register_response = client.post("/api/register", json={"username": "alice", "password": "pw1"})
        assert register_response.status_code == 200
        register_token = register_response.json()["token"]

        # 2. Login
        login_response = client.post("/api/login", json={"username": "alice", "password": "pw1"})
        assert login_response.status_code == 200
        login_token = login_response.json()["token"]

        # 3. Both tokens carry the identity
        for token in (register_token, login_token):
            payload = jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])
            assert payload["sub"] == "alice"
            assert payload["exp"] - payload["iat"] == 3600

        # 4. Both tokens open the protected routes
        assert self._search(client, register_token).status_code == 200
        assert self._search(client, login_token).status_code == 200

    def test_reregistration_replaces_credential(self, client):
        """Test the last registration wins."""
        client.post("/api/register", json={"username": "alice", "password": "pw1"})
        client.post("/api/register", json={"username": "bob", "password": "pw2"})

        assert client.post("/api/login", json={"username": "alice", "password": "pw1"}).status_code == 401
        assert client.post("/api/login", json={"username": "bob", "password": "pw2"}).status_code == 200

    def test_tokens_survive_reregistration(self, client):
        """Test tokens stay valid after the credential is replaced."""
        alice_token = client.post(
            "/api/register", json={"username": "alice", "password": "pw1"}
        ).json()["token"]
        client.post("/api/register", json={"username": "bob", "password": "pw2"})

        assert self._search(client, alice_token).status_code == 200

    def test_login_mismatches(self, client):
        """Test wrong identity, wrong secret, and login before register."""
        assert client.post("/api/login", json={"username": "alice", "password": "pw1"}).status_code == 401

        client.post("/api/register", json={"username": "alice", "password": "pw1"})

        for body in (
            {"username": "alice", "password": "pw2"},
            {"username": "Alice", "password": "pw1"},
            {"username": "alice"},
        ):
            response = client.post("/api/login", json=body)
            assert response.status_code == 401
            assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_token_from_other_gateway_rejected(self, client):
        """Test a token signed by a gateway with another key is refused."""
        other = GatewayService(
            config=TestEnvironment.get_mock_config(jwt_secret="some-other-signing-key-0123456789abcdef"),
            provider=StubGeocodingProvider()
        )
        foreign_token = TestClient(other.app).post(
            "/api/register", json={"username": "alice", "password": "pw1"}
        ).json()["token"]

        assert self._search(client, foreign_token).status_code == 401

    def test_auth_metrics(self, client):
        """Test register and login outcomes are exported."""
        client.post("/api/register", json={"username": "alice", "password": "pw1"})
        client.post("/api/login", json={"username": "alice", "password": "nope"})

        metrics = client.get("/metrics").text
        assert 'auth_events_total{event="register"} 1.0' in metrics
        assert 'auth_events_total{event="login_failed"} 1.0' in metrics
