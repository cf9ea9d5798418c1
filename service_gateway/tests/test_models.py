"""
Unit tests for the canonical request/response models.
"""

import json

import pytest

from service_gateway.app.domain.models import (
    Address,
    AddressResponse,
    GeocodeRequest,
    SearchRequest,
    UserCredentials,
    decode_request,
)
from shared.errors import MalformedRequestError


class TestAddress:
    """Test cases for Address."""

    def test_json_round_trip_keeps_coordinates(self):
        """Test coordinate strings survive encode/decode byte for byte."""
        address = Address(city="Москва", street="Ленина", house="10", lat="55.755800", lon="37.61730")

        decoded = Address.model_validate_json(address.model_dump_json())

        assert decoded == address
        assert decoded.lat == "55.755800"
        assert decoded.lon == "37.61730"

    def test_field_order(self):
        """Test JSON field order is city, street, house, lat, lon."""
        encoded = json.loads(Address(city="a", street="b", house="c", lat="1", lon="2").model_dump_json())

        assert list(encoded) == ["city", "street", "house", "lat", "lon"]

    def test_defaults_are_empty_strings(self):
        """Test missing fields default to the empty string."""
        assert Address().model_dump() == {"city": "", "street": "", "house": "", "lat": "", "lon": ""}

    def test_response_envelope(self):
        """Test the response envelope shape."""
        response = AddressResponse(addresses=[Address(city="Москва", street="Ленина")])

        assert json.loads(response.model_dump_json())["addresses"][0]["city"] == "Москва"
        assert AddressResponse().addresses == []


class TestDecodeRequest:
    """Test cases for decode_request."""

    def test_search_request(self):
        """Test search bodies decode."""
        assert decode_request(SearchRequest, '{"query": "Ленина"}'.encode("utf-8")).query == "Ленина"

    def test_geocode_request_alias(self):
        """Test lng populates lon."""
        request = decode_request(GeocodeRequest, b'{"lat": "55.7558", "lng": "37.6173"}')

        assert request.lat == "55.7558"
        assert request.lon == "37.6173"

    def test_missing_fields_default(self):
        """Test absent fields become empty strings."""
        request = decode_request(UserCredentials, b'{}')

        assert request.username == ""
        assert request.password == ""

    def test_wrong_type(self):
        """Test a number where a string is expected fails."""
        with pytest.raises(MalformedRequestError) as exc_info:
            decode_request(SearchRequest, b'{"query": 1}')

        assert exc_info.value.code == "MALFORMED_REQUEST"
        assert exc_info.value.details["errors"]

    def test_invalid_json(self):
        """Test invalid JSON fails."""
        with pytest.raises(MalformedRequestError):
            decode_request(UserCredentials, b'{"username": "alice"')
