"""
Shared configuration management for the GeoProxy gateway.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DADATA_BASE_URL = "https://suggestions.dadata.ru/suggestions/api/4_1/rs"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="GEOPROXY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 8080


class GatewayConfig(BaseConfig):
    """Gateway configuration: token signing, hashing and the upstream provider."""

    service_name: str = "gateway"

    # Token signing
    jwt_secret: str = Field(
        default="",
        validation_alias=AliasChoices("jwt_secret", "GEOPROXY_JWT_SECRET", "SECRET_KEY"),
    )
    token_ttl_seconds: int = Field(default=3600, ge=0)

    # Credential hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # DaData provider
    dadata_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("dadata_api_key", "GEOPROXY_DADATA_API_KEY", "DADATA_API_KEY"),
    )
    dadata_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("dadata_secret_key", "GEOPROXY_DADATA_SECRET_KEY", "DADATA_SECRET_KEY"),
    )
    dadata_base_url: str = DEFAULT_DADATA_BASE_URL
    provider_timeout_seconds: float = Field(default=10.0, gt=0)
    provider_result_count: int = Field(default=10, ge=1, le=20)
    provider_failure_threshold: int = Field(default=5, ge=1)
    provider_recovery_timeout: float = Field(default=30.0, ge=0)

    def validate_dadata(self) -> bool:
        """Check if DaData credentials are configured."""
        return bool(self.dadata_api_key and self.dadata_secret_key)


def get_config(**overrides) -> GatewayConfig:
    """Load gateway configuration from the environment, applying overrides."""
    return GatewayConfig(**overrides)
