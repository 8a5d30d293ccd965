"""
leafleter/tests/test_lookup_adapters.py

Overpass and Nominatim clients against a mocked requests session.
"""

from __future__ import annotations

import unittest
from unittest import mock

import requests

from leafleter.exceptions.errors import LookupFailedError
from leafleter.logic.adapters.nominatim_client import NominatimClient
from leafleter.logic.adapters.overpass_client import OverpassClient, build_house_number_query


def _session(payload=None, error: Exception | None = None) -> mock.Mock:
    session = mock.Mock()
    session.headers = {}
    response = mock.Mock()
    response.raise_for_status.return_value = None
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    if error is not None:
        session.post.side_effect = error
        session.get.side_effect = error
    else:
        session.post.return_value = response
        session.get.return_value = response
    return session


class TestOverpassQuery(unittest.TestCase):
    def test_query_covers_all_element_kinds(self) -> None:
        query = build_house_number_query("Ady Endre utca", "Miskolc")
        self.assertTrue(query.startswith("[out:json]"))
        for kind in ("node", "way", "relation"):
            self.assertIn(f'{kind}["addr:street"="Ady Endre utca"]["addr:housenumber"];', query)
            self.assertIn(f'{kind}["addr:street"="Ady Endre utca"]["addr:housenumber"]["addr:city"="Miskolc"];', query)

    def test_quotes_are_escaped(self) -> None:
        self.assertIn('\\"', build_house_number_query('Say "hi" utca', "M"))


class TestOverpassClient(unittest.TestCase):
    def test_distinct_tags(self) -> None:
        session = _session({"elements": [
            {"tags": {"addr:housenumber": "3"}},
            {"tags": {"addr:housenumber": "3"}},
            {"tags": {"addr:housenumber": "5/A"}},
            {"tags": {"name": "no number"}},
            {"type": "node"},
        ]})
        client = OverpassClient("https://overpass.example/api", user_agent="test-agent", session=session)
        self.assertEqual(client.fetch_house_number_tags("Ács utca", "Miskolc"), ["3", "5/A"])
        self.assertEqual(session.headers["User-Agent"], "test-agent")
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://overpass.example/api")
        self.assertIn(b"addr:housenumber", kwargs["data"])

    def test_transport_error(self) -> None:
        client = OverpassClient("u", session=_session(error=requests.ConnectionError("down")))
        with self.assertRaises(LookupFailedError):
            client.fetch_house_number_tags("a", "b")

    def test_non_json(self) -> None:
        client = OverpassClient("u", session=_session(ValueError("not json")))
        with self.assertRaises(LookupFailedError):
            client.fetch_house_number_tags("a", "b")

    def test_unexpected_shape(self) -> None:
        client = OverpassClient("u", session=_session(["not", "an", "object"]))
        with self.assertRaises(LookupFailedError):
            client.fetch_house_number_tags("a", "b")


class TestNominatimClient(unittest.TestCase):
    def test_first_match(self) -> None:
        session = _session([{"lat": "48.1", "lon": "20.7"}, {"lat": "0", "lon": "0"}])
        client = NominatimClient("https://nominatim.example/search", session=session)
        self.assertEqual(client.search("Ady Endre utca", "Miskolc"), (48.1, 20.7))
        _, kwargs = session.get.call_args
        self.assertEqual(kwargs["params"]["street"], "Ady Endre utca")
        self.assertEqual(kwargs["params"]["limit"], 1)

    def test_no_match(self) -> None:
        client = NominatimClient("u", session=_session([]))
        self.assertIsNone(client.search("a", "b"))

    def test_malformed_match(self) -> None:
        client = NominatimClient("u", session=_session([{"lat": "x"}]))
        with self.assertRaises(LookupFailedError):
            client.search("a", "b")

    def test_http_error(self) -> None:
        session = _session([])
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("503")
        with self.assertRaises(LookupFailedError):
            NominatimClient("u", session=session).search("a", "b")


if __name__ == "__main__":
    unittest.main()
