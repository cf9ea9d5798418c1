"""
DaData suggestions API client.
"""

import time
from typing import Any, Dict, List, Optional

import httpx

from shared.circuit_breaker import CircuitBreaker, CircuitBreakerOpenException
from shared.config import DEFAULT_DADATA_BASE_URL
from shared.errors import UpstreamError, UpstreamUnavailableError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..domain.models import Address
from .provider import GeocodingProvider


class DadataClient(GeocodingProvider):
    """Geocoding provider backed by the DaData suggestions API.

    Search uses ``suggest/address`` and reverse geocoding uses
    ``geolocate/address``. Coordinates are sent and returned as the
    strings DaData uses, without numeric conversion.
    """

    SERVICE_NAME = "dadata"

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str = DEFAULT_DADATA_BASE_URL,
        timeout: float = 10.0,
        result_count: int = 10,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.api_key = api_key
        self.secret_key = secret_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.result_count = result_count
        self.metrics = metrics
        self.logger = get_logger("gateway.dadata_client")

        self.circuit_breaker = CircuitBreaker(
            self.SERVICE_NAME,
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
            expected_exception=(httpx.HTTPError, UpstreamUnavailableError)
        )

    @property
    def provider_name(self) -> str:
        return self.SERVICE_NAME

    def is_configured(self) -> bool:
        return bool(self.api_key and self.secret_key)

    def is_open(self) -> bool:
        return self.circuit_breaker.is_open()

    async def search(self, query: str) -> List[Address]:
        """Suggest addresses for a free-form query.

        Suggestions without both a city and a street are not usable as
        addresses and are dropped.
        """
        suggestions = await self._post(
            "search",
            "/suggest/address",
            {"query": query, "count": self.result_count}
        )
        addresses = [self._to_address(item) for item in suggestions]
        return [address for address in addresses if address.city and address.street]

    async def reverse(self, lat: str, lon: str) -> List[Address]:
        """Find addresses nearest to a coordinate pair."""
        suggestions = await self._post(
            "reverse",
            "/geolocate/address",
            {"lat": lat, "lon": lon, "count": self.result_count}
        )
        return [self._to_address(item) for item in suggestions]

    async def _post(self, operation: str, path: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Execute a provider call with circuit breaker + error handling."""
        if not self.is_configured():
            self.logger.error("DaData credentials not configured", operation=operation)
            raise UpstreamError(
                service=self.SERVICE_NAME,
                message="API credentials not configured"
            )

        url = f"{self.base_url}{path}"

        async def _request() -> List[Dict[str, Any]]:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload, headers=self._headers())

            if response.status_code != 200:
                self.logger.error(
                    "DaData request failed",
                    url=url,
                    status_code=response.status_code,
                    response=response.text
                )
                error_class = UpstreamUnavailableError if _is_provider_fault(response.status_code) else UpstreamError
                raise error_class(
                    service=self.SERVICE_NAME,
                    message=f"Unexpected status {response.status_code}",
                    details={"status_code": response.status_code}
                )

            try:
                body = response.json()
            except ValueError as exc:
                raise UpstreamUnavailableError(
                    service=self.SERVICE_NAME,
                    message="Response is not valid JSON"
                ) from exc

            suggestions = body.get("suggestions") if isinstance(body, dict) else None
            if not isinstance(suggestions, list):
                raise UpstreamUnavailableError(
                    service=self.SERVICE_NAME,
                    message="Response has no suggestions list"
                )
            return suggestions

        start_time = time.time()
        try:
            suggestions = await self.circuit_breaker.call(_request)
        except CircuitBreakerOpenException as exc:
            self._record(operation, "circuit_open", start_time)
            self.logger.warning("DaData circuit breaker open", operation=operation)
            raise UpstreamError(
                service=self.SERVICE_NAME,
                message="circuit breaker open"
            ) from exc
        except UpstreamError:
            self._record(operation, "error", start_time)
            raise
        except httpx.TimeoutException as exc:
            self._record(operation, "timeout", start_time)
            self.logger.error("DaData request timed out", operation=operation, timeout=self.timeout)
            raise UpstreamError(
                service=self.SERVICE_NAME,
                message=f"timed out after {self.timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            self._record(operation, "error", start_time)
            self.logger.error("DaData transport error", operation=operation, error=str(exc))
            raise UpstreamError(
                service=self.SERVICE_NAME,
                message=str(exc) or exc.__class__.__name__
            ) from exc

        self._record(operation, "ok", start_time)
        self.logger.debug("DaData suggestions retrieved", operation=operation, count=len(suggestions))
        return suggestions

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Token {self.api_key}",
            "X-Secret": self.secret_key,
        }

    def _record(self, operation: str, outcome: str, start_time: float) -> None:
        if self.metrics:
            self.metrics.record_upstream_call(operation, outcome, time.time() - start_time)

    @staticmethod
    def _to_address(suggestion: Any) -> Address:
        data = suggestion.get("data") if isinstance(suggestion, dict) else None
        if not isinstance(data, dict):
            data = {}
        return Address(
            city=_text(data.get("city")),
            street=_text(data.get("street")),
            house=_text(data.get("house")),
            lat=_text(data.get("geo_lat")),
            lon=_text(data.get("geo_lon")),
        )


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _is_provider_fault(status_code: int) -> bool:
    # Other 4xx answers reject the request itself and leave the breaker alone
    return status_code >= 500 or status_code == 429
