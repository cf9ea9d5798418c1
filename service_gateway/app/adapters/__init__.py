"""
Adapters package for the Gateway Service.

Contains the upstream geocoding provider interface and its DaData
implementation. Adapters encapsulate:

- Base URLs and request shapes
- Circuit breaking and deadlines
- Error handling that maps to UpstreamError

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .dadata_client import DadataClient
from .provider import GeocodingProvider

__all__ = [
    "DadataClient",
    "GeocodingProvider",
]
