"""
Canonical request/response models for the gateway.

Coordinates stay strings end to end: the provider's decimal-degree text is
returned exactly as received.
"""

from typing import List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shared.errors import MalformedRequestError

ModelT = TypeVar("ModelT", bound=BaseModel)


class Address(BaseModel):
    """Normalized geocoding result, independent of provider field names."""

    city: str = Field("", description="City name")
    street: str = Field("", description="Street name")
    house: str = Field("", description="House number")
    lat: str = Field("", description="Latitude, decimal degrees")
    lon: str = Field("", description="Longitude, decimal degrees")

    model_config = {
        "json_schema_extra": {
            "example": {
                "city": "Москва",
                "street": "Ленина",
                "house": "10",
                "lat": "55.7558",
                "lon": "37.6173"
            }
        }
    }


class AddressResponse(BaseModel):
    """Response envelope for both geocoding operations."""

    addresses: List[Address] = Field(default_factory=list)


class SearchRequest(BaseModel):
    """Request body for address search."""

    query: str = Field("", description="Free-form address query")

    model_config = {
        "json_schema_extra": {"example": {"query": "Москва Ленина"}}
    }


class GeocodeRequest(BaseModel):
    """Request body for reverse geocoding; longitude travels as ``lng``."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"lat": "55.7558", "lng": "37.6173"}},
    )

    lat: str = Field("", description="Latitude, decimal degrees")
    lon: str = Field("", alias="lng", description="Longitude, decimal degrees")


class UserCredentials(BaseModel):
    """Request body for register and login."""

    username: str = Field("", description="Identity to register or log in as")
    password: str = Field("", description="Plaintext secret")

    model_config = {
        "json_schema_extra": {"example": {"username": "user", "password": "password123"}}
    }


class TokenResponse(BaseModel):
    """Bearer token issued by register and login."""

    token: str


def decode_request(model: Type[ModelT], body: bytes) -> ModelT:
    """Decode a raw JSON request body, raising MalformedRequestError on failure."""
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedRequestError(
            f"Invalid {model.__name__} body",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc
