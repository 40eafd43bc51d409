"""
Address geocoding against the MapQuest Geocoding API.
"""
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request
from pydantic import BaseModel

from sportshub.core.config import settings
from sportshub.core.exceptions import GeoResolutionError
from sportshub.core.logging import logger


class GeoPoint(BaseModel):
    longitude: float
    latitude: float
    formatted_address: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    country: Optional[str] = None


class GeoResolver:
    """
    Turns a free-text address or postal code into a ``GeoPoint``.

    The provider may return several candidates; the first one is used as-is.
    Any provider failure, including an empty candidate list, raises
    ``GeoResolutionError``.
    """

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str], base_url: str = settings.GEOCODER_URL):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url

    async def resolve(self, address: str) -> GeoPoint:
        if not address or not address.strip():
            raise GeoResolutionError("Please add an address")

        params = {"location": address.strip(), "maxResults": 1}
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Geocoder returned HTTP {e.response.status_code} for {address!r}")
            raise GeoResolutionError(f"Could not geocode address '{address}'")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geocoder request failed for {address!r}: {e}")
            raise GeoResolutionError(f"Could not geocode address '{address}'")

        candidates = self._candidates(body)
        if not candidates:
            raise GeoResolutionError(f"No location found for '{address}'")

        point = self._to_point(candidates[0])
        logger.debug(f"Geocoded {address!r} to ({point.longitude}, {point.latitude})")
        return point

    async def aclose(self) -> None:
        await self.client.aclose()

    def _candidates(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        info = body.get("info") or {}
        if info.get("statuscode", 0) != 0:
            messages = "; ".join(info.get("messages") or [])
            logger.warning(f"Geocoder error status {info.get('statuscode')}: {messages}")
            return []
        results = body.get("results") or []
        if not results:
            return []
        return [loc for loc in results[0].get("locations") or [] if loc.get("latLng")]

    @staticmethod
    def _to_point(location: Dict[str, Any]) -> GeoPoint:
        lat_lng = location["latLng"]
        street = location.get("street") or None
        city = location.get("adminArea5") or None
        state = location.get("adminArea3") or None
        zipcode = location.get("postalCode") or None
        country = location.get("adminArea1") or None

        state_zip = " ".join(part for part in (state, zipcode) if part)
        formatted = ", ".join(part for part in (street, city, state_zip, country) if part)

        return GeoPoint(
            longitude=float(lat_lng["lng"]),
            latitude=float(lat_lng["lat"]),
            formatted_address=formatted or None,
            street=street,
            city=city,
            state=state,
            zipcode=zipcode,
            country=country,
        )


def build_geo_resolver() -> GeoResolver:
    client = httpx.AsyncClient(timeout=settings.GEOCODER_TIMEOUT)
    return GeoResolver(client, settings.GEOCODER_API_KEY)


def get_geo_resolver(request: Request) -> GeoResolver:
    return request.app.state.geo_resolver
