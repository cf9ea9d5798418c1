"""
Interface for upstream geocoding providers.
"""

from abc import ABC, abstractmethod
from typing import List

from ..domain.models import Address


class GeocodingProvider(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - search(): Free-form address search
    - reverse(): Coordinates to addresses
    - provider_name: Name of the provider

    Implementations return canonical addresses in provider order and raise
    UpstreamError for any failure.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the geocoding provider."""

    @abstractmethod
    async def search(self, query: str) -> List[Address]:
        """Find addresses matching a free-form query."""

    @abstractmethod
    async def reverse(self, lat: str, lon: str) -> List[Address]:
        """Find addresses near a decimal-degree coordinate pair."""

    def is_configured(self) -> bool:
        """Whether the provider has what it needs to make calls."""
        return True

    def is_open(self) -> bool:
        """Whether calls are currently being refused without a network attempt."""
        return False
