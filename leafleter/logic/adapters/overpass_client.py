"""
===============================================================================
Overpass Adapter – house-number tags for a street from OpenStreetMap
-------------------------------------------------------------------------------
Purpose:
    Keep HTTP details out of the resolver. The adapter only returns the raw
    ``addr:housenumber`` tag values; filtering to plain integers is the
    resolver's job.
===============================================================================
"""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from leafleter.exceptions.errors import LookupFailedError

logger = logging.getLogger(__name__)


def _ql_string(value: str) -> str:
    """Escape a value for use inside a double-quoted Overpass QL literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_house_number_query(street: str, municipality: str, timeout: int = 25) -> str:
    """
    Overpass QL matching any element tagging *street* with a house number.

    Elements with a matching ``addr:city`` and elements without one are both
    included, since many OSM addresses omit the city tag.
    """
    s = _ql_string(street)
    c = _ql_string(municipality)
    lines = [f"[out:json][timeout:{timeout}];", "("]
    for kind in ("node", "way", "relation"):
        lines.append(f'  {kind}["addr:street"="{s}"]["addr:housenumber"]["addr:city"="{c}"];')
    for kind in ("node", "way", "relation"):
        lines.append(f'  {kind}["addr:street"="{s}"]["addr:housenumber"];')
    lines += [");", "out body;"]
    return "\n".join(lines)


class OverpassClient:
    """Thin client for the Overpass interpreter endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        user_agent: str = "leafleter",
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", user_agent)

    def fetch_house_number_tags(self, street: str, municipality: str) -> List[str]:
        """
        Return the distinct ``addr:housenumber`` tag values for the street.

        Raises:
            LookupFailedError: transport error, HTTP error or non-JSON answer.
        """
        query = build_house_number_query(street, municipality)
        try:
            resp = self._session.post(
                self._url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as ex:
            raise LookupFailedError(f"Overpass request failed: {ex}") from ex
        except ValueError as ex:
            raise LookupFailedError("Overpass returned a non-JSON response.") from ex

        if not isinstance(payload, dict):
            raise LookupFailedError("Unexpected Overpass response format.")
        elements = payload.get("elements") or []

        tags: List[str] = []
        seen: set[str] = set()
        for element in elements:
            if not isinstance(element, dict):
                continue
            value = (element.get("tags") or {}).get("addr:housenumber")
            if value is None:
                continue
            value = str(value).strip()
            if value and value not in seen:
                seen.add(value)
                tags.append(value)
        logger.debug("Overpass: %d house-number tags for %s, %s", len(tags), street, municipality)
        return tags
