"""
GeoProxy API gateway: token issuing plus authenticated address search and
reverse geocoding.
"""

from typing import Dict, Optional

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool

from shared.base_service import BaseService
from shared.config import GatewayConfig, get_config
from shared.errors import ConfigurationError

from .adapters import DadataClient, GeocodingProvider
from .auth import AuthService, Claims, PasswordHasher, SingleCredentialStore, TokenIssuer
from .domain import AuthGate, GeocodeAdapter
from .domain.models import (
    AddressResponse,
    GeocodeRequest,
    SearchRequest,
    TokenResponse,
    UserCredentials,
    decode_request,
)


def _json_body(model) -> Dict:
    """OpenAPI request body for routes that decode their own payload."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        provider: Optional[GeocodingProvider] = None,
    ):
        config = config or get_config()
        if not config.jwt_secret:
            raise ConfigurationError(
                "Token signing key is not configured",
                details={"env": ["GEOPROXY_JWT_SECRET", "SECRET_KEY"]}
            )

        super().__init__(config.service_name, config)

        self.hasher = PasswordHasher(rounds=config.bcrypt_rounds)
        self.credential_store = SingleCredentialStore(self.hasher)
        self.token_issuer = TokenIssuer(config.jwt_secret, ttl_seconds=config.token_ttl_seconds)
        self.auth_service = AuthService(
            self.credential_store,
            self.token_issuer,
            self.hasher,
            metrics=self.metrics,
        )
        self.auth_gate = AuthGate(self.token_issuer, metrics=self.metrics)

        if provider is None:
            if not config.validate_dadata():
                self.logger.warning(
                    "DaData credentials not configured; address routes will fail",
                    env=["DADATA_API_KEY", "DADATA_SECRET_KEY"]
                )
            provider = DadataClient(
                config.dadata_api_key,
                config.dadata_secret_key,
                base_url=config.dadata_base_url,
                timeout=config.provider_timeout_seconds,
                result_count=config.provider_result_count,
                failure_threshold=config.provider_failure_threshold,
                recovery_timeout=config.provider_recovery_timeout,
                metrics=self.metrics,
            )
        self.provider = provider
        self.geocoder = GeocodeAdapter(provider)

        self._setup_gateway_routes()

    def _setup_gateway_routes(self):
        """Set up gateway routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": self.service_name,
                "message": "GeoProxy - API Gateway",
                "version": "1.0.0"
            }

        @self.app.post(
            "/api/register",
            response_model=TokenResponse,
            openapi_extra=_json_body(UserCredentials),
        )
        async def register(request: Request):
            """Register the credential, replacing any previous one, and issue a token."""
            credentials = decode_request(UserCredentials, await request.body())
            token = await run_in_threadpool(
                self.auth_service.register, credentials.username, credentials.password
            )
            return TokenResponse(token=token)

        @self.app.post(
            "/api/login",
            response_model=TokenResponse,
            openapi_extra=_json_body(UserCredentials),
        )
        async def login(request: Request):
            """Issue a token if the credentials match the registered ones."""
            credentials = decode_request(UserCredentials, await request.body())
            token = await run_in_threadpool(
                self.auth_service.login, credentials.username, credentials.password
            )
            return TokenResponse(token=token)

        @self.app.post(
            "/api/address/search",
            response_model=AddressResponse,
            openapi_extra=_json_body(SearchRequest),
        )
        async def address_search(
            request: Request,
            claims: Claims = Depends(self.auth_gate.authenticate_request),
        ):
            """Search addresses by free-form query."""
            return await self.geocoder.handle_search(await request.body(), claims)

        @self.app.post(
            "/api/address/geocode",
            response_model=AddressResponse,
            openapi_extra=_json_body(GeocodeRequest),
        )
        async def address_geocode(
            request: Request,
            claims: Claims = Depends(self.auth_gate.authenticate_request),
        ):
            """Find addresses for a latitude/longitude pair."""
            return await self.geocoder.handle_reverse(await request.body(), claims)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check gateway dependencies."""
        if not self.provider.is_configured():
            status = "unconfigured"
        elif self.provider.is_open():
            status = "open"
        else:
            status = "ok"
        return {"provider": status}


def create_app():
    """Create FastAPI application."""
    service = GatewayService()
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
