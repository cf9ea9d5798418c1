"""
Domain utilities for the Gateway Service.

Includes the canonical address models, the bearer-token gate for protected
routes, and the geocode adapter that sits between the routes and the
upstream provider.
"""

from .auth_middleware import AuthGate
from .geocoding import GeocodeAdapter
from .models import Address, AddressResponse, GeocodeRequest, SearchRequest

__all__ = [
    "Address",
    "AddressResponse",
    "AuthGate",
    "GeocodeAdapter",
    "GeocodeRequest",
    "SearchRequest",
]
