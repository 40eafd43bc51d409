"""
Unit tests for the MapQuest-backed geocoder.
Provider responses are served by httpx.MockTransport.
"""
import httpx
import pytest

from sportshub.core.exceptions import GeoResolutionError
from sportshub.geo.resolver import GeoResolver

GEOCODER_URL = "https://geocoder.test/geocoding/v1/address"


def mapquest_body(*locations, statuscode=0, messages=None):
    return {
        "info": {"statuscode": statuscode, "messages": messages or []},
        "results": [{"providedLocation": {"location": "query"}, "locations": list(locations)}],
    }


GOOGLEPLEX = {
    "street": "1600 Amphitheatre Pkwy",
    "adminArea5": "Mountain View",
    "adminArea3": "CA",
    "adminArea1": "US",
    "postalCode": "94043",
    "latLng": {"lat": 37.422, "lng": -122.0842},
}

SECOND_CANDIDATE = {
    "street": "",
    "adminArea5": "Mountain View",
    "adminArea3": "CA",
    "adminArea1": "US",
    "postalCode": "",
    "latLng": {"lat": 37.3861, "lng": -122.0839},
}


def make_resolver(handler) -> GeoResolver:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeoResolver(client, api_key="test-key", base_url=GEOCODER_URL)


@pytest.mark.unit
@pytest.mark.asyncio
class TestGeoResolver:
    """Test address resolution and provider failure handling."""

    async def test_resolve_first_candidate(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=mapquest_body(GOOGLEPLEX, SECOND_CANDIDATE))

        resolver = make_resolver(handler)
        point = await resolver.resolve("1600 Amphitheatre Parkway, Mountain View, CA")
        await resolver.aclose()

        assert seen["params"]["location"] == "1600 Amphitheatre Parkway, Mountain View, CA"
        assert seen["params"]["key"] == "test-key"
        assert point.longitude == pytest.approx(-122.0842)
        assert point.latitude == pytest.approx(37.422)
        assert point.street == "1600 Amphitheatre Pkwy"
        assert point.city == "Mountain View"
        assert point.state == "CA"
        assert point.zipcode == "94043"
        assert point.country == "US"
        assert point.formatted_address == "1600 Amphitheatre Pkwy, Mountain View, CA 94043, US"

    async def test_formatted_address_skips_empty_parts(self):
        resolver = make_resolver(lambda request: httpx.Response(200, json=mapquest_body(SECOND_CANDIDATE)))
        point = await resolver.resolve("Mountain View")

        assert point.street is None
        assert point.zipcode is None
        assert point.formatted_address == "Mountain View, CA, US"

    async def test_zero_results_raises(self):
        resolver = make_resolver(lambda request: httpx.Response(200, json=mapquest_body()))

        with pytest.raises(GeoResolutionError, match="No location found"):
            await resolver.resolve("nowhere at all")

    async def test_provider_error_status_raises(self):
        body = mapquest_body(GOOGLEPLEX, statuscode=403, messages=["Invalid key"])
        resolver = make_resolver(lambda request: httpx.Response(200, json=body))

        with pytest.raises(GeoResolutionError):
            await resolver.resolve("90210")

    async def test_http_error_raises(self):
        resolver = make_resolver(lambda request: httpx.Response(500, text="upstream down"))

        with pytest.raises(GeoResolutionError, match="Could not geocode"):
            await resolver.resolve("90210")

    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        resolver = make_resolver(handler)

        with pytest.raises(GeoResolutionError):
            await resolver.resolve("90210")

    async def test_blank_address_is_rejected_without_calling_provider(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=mapquest_body(GOOGLEPLEX))

        resolver = make_resolver(handler)

        with pytest.raises(GeoResolutionError):
            await resolver.resolve("   ")
        assert calls == []
