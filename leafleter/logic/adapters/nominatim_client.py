"""
===============================================================================
Nominatim Adapter – structured street search returning coordinates
===============================================================================
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import requests

from leafleter.exceptions.errors import LookupFailedError

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]


class NominatimClient:
    """Structured search (``street`` + ``city``) against a Nominatim endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        user_agent: str = "leafleter",
        accept_language: str = "en",
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", user_agent)
        self._session.headers.setdefault("Accept-Language", accept_language)

    def search(self, street: str, city: str) -> Optional[LatLon]:
        """
        Return ``(lat, lon)`` of the best match, or None if nothing matched.

        *street* may carry a leading house number ("12 Ady Endre utca").

        Raises:
            LookupFailedError: transport error, HTTP error or malformed answer.
        """
        params = {"street": street, "city": city, "format": "json", "limit": 1}
        try:
            resp = self._session.get(self._url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as ex:
            raise LookupFailedError(f"Nominatim request failed: {ex}") from ex
        except ValueError as ex:
            raise LookupFailedError("Nominatim returned a non-JSON response.") from ex

        if not isinstance(data, list) or not data:
            logger.debug("Nominatim: no match for %s, %s", street, city)
            return None
        try:
            return float(data[0]["lat"]), float(data[0]["lon"])
        except (KeyError, TypeError, ValueError) as ex:
            raise LookupFailedError("Unexpected Nominatim response format.") from ex
