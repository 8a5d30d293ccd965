"""
GeocodingService – coordinates for streets and single addresses.

Used only to centre the map; a failed or empty lookup yields None and never
blocks anything else.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple
from urllib.parse import urlencode

from leafleter.exceptions.errors import LookupFailedError
from leafleter.logic.adapters.nominatim_client import NominatimClient
from leafleter.logic.services.lookup_cache import LookupCache
from leafleter.models.street import Street

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


def osm_map_url(lat: float, lon: float, zoom: int = 18) -> str:
    """openstreetmap.org URL with a marker at the given position."""
    query = urlencode({"mlat": f"{lat:.6f}", "mlon": f"{lon:.6f}"})
    return f"https://www.openstreetmap.org/?{query}#map={zoom}/{lat:.6f}/{lon:.6f}"


class GeocodingService:
    """Memoising facade over the Nominatim client."""

    def __init__(
        self,
        client: NominatimClient,
        *,
        street_cache: Optional[LookupCache[LatLon]] = None,
        address_cache: Optional[LookupCache[LatLon]] = None,
    ) -> None:
        self._client = client
        self._streets: LookupCache[LatLon] = street_cache if street_cache is not None else LookupCache()
        self._addresses: LookupCache[LatLon] = address_cache if address_cache is not None else LookupCache()

    def _search(self, cache: LookupCache[LatLon], key: tuple, street: str, city: str) -> Optional[LatLon]:
        hit = cache.get(key)
        if hit is not None:
            return hit
        try:
            coords = self._client.search(street, city)
        except LookupFailedError as ex:
            logger.warning("Geocoding failed for %s, %s: %s", street, city, ex)
            return None
        if coords is not None:
            cache.put(key, coords)
        return coords

    def geocode_street(self, name: str, municipality: str) -> Optional[LatLon]:
        return self._search(self._streets, (name, municipality), name, municipality)

    def geocode_address(self, name: str, number: int, municipality: str) -> Optional[LatLon]:
        return self._search(
            self._addresses, (name, number, municipality), f"{number} {name}", municipality
        )

    def locate(self, street: Street, number: Optional[int] = None) -> Optional[LatLon]:
        """Exact address first, then the street itself."""
        coords = None
        if number is not None:
            coords = self.geocode_address(street.name, number, street.municipality)
        if coords is None:
            coords = self.geocode_street(street.name, street.municipality)
        return coords

    def clear(self) -> None:
        self._streets.clear()
        self._addresses.clear()
