"""
Geocode adapter: request decoding and provider delegation for the
address routes.
"""

from typing import TYPE_CHECKING, List, Optional

from shared.errors import UpstreamError
from shared.logging import get_logger

from ..auth.tokens import Claims
from .models import Address, AddressResponse, GeocodeRequest, SearchRequest, decode_request

if TYPE_CHECKING:
    from ..adapters.provider import GeocodingProvider


class GeocodeAdapter:
    """Translates address requests into provider calls.

    The adapter holds no state of its own; results come back in provider
    order with no deduplication.
    """

    def __init__(self, provider: "GeocodingProvider"):
        self.provider = provider
        self.logger = get_logger("gateway.geocoding")

    async def search(self, query: str) -> List[Address]:
        """Forward a free-form query to the provider."""
        try:
            addresses = await self.provider.search(query)
        except UpstreamError:
            raise
        except Exception as e:
            self.logger.error("Provider search failed", error=str(e), exc_info=True)
            raise UpstreamError(service="geocoding provider", message=str(e)) from e
        return list(addresses or [])

    async def reverse(self, lat: str, lon: str) -> List[Address]:
        """Forward a coordinate pair to the provider."""
        try:
            addresses = await self.provider.reverse(lat, lon)
        except UpstreamError:
            raise
        except Exception as e:
            self.logger.error("Provider reverse lookup failed", error=str(e), exc_info=True)
            raise UpstreamError(service="geocoding provider", message=str(e)) from e
        return list(addresses or [])

    async def handle_search(self, body: bytes, claims: Optional[Claims] = None) -> AddressResponse:
        """Decode a search body and return matching addresses."""
        request = decode_request(SearchRequest, body)
        self._log_user(claims)
        return AddressResponse(addresses=await self.search(request.query))

    async def handle_reverse(self, body: bytes, claims: Optional[Claims] = None) -> AddressResponse:
        """Decode a geocode body and return nearby addresses."""
        request = decode_request(GeocodeRequest, body)
        self._log_user(claims)
        return AddressResponse(addresses=await self.reverse(request.lat, request.lon))

    def _log_user(self, claims: Optional[Claims]) -> None:
        if claims is not None:
            self.logger.info("Authenticated user", identity=claims.identity)
