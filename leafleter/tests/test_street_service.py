"""
leafleter/tests/test_street_service.py
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from leafleter.exceptions.errors import ValidationError
from leafleter.logic.repository.json_document_repository import JsonDocumentRepository
from leafleter.logic.services.street_service import SEED_STREETS, StreetService
from leafleter.models.street import Interval


class TestStreetService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = JsonDocumentRepository(Path(self._tmp.name) / "leafleter.json")
        self.service = StreetService(self.repo)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_seed_twice_adds_nothing(self) -> None:
        first = self.service.seed()
        second = self.service.seed()
        self.assertEqual(first, second)
        self.assertEqual(len(self.repo.list_streets()), len(SEED_STREETS))

    def test_blank_bounds_are_open(self) -> None:
        street_id = self.service.add_street(name="Kis utca", municipality="Miskolc", start=" ", end="")
        street = self.repo.get_street(street_id)
        self.assertIsNone(street.start)
        self.assertIsNone(street.end)

    def test_form_values_are_coerced(self) -> None:
        street_id = self.service.add_street(
            name="Kis utca", municipality="Miskolc", start="2", end="10", interval="even"
        )
        street = self.repo.get_street(street_id)
        self.assertEqual((street.start, street.end, street.interval), (2, 10, Interval.EVEN))

    def test_rejects_bad_input(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", start="two")
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", start=9, end=1)
        with self.assertRaises(ValidationError):
            self.service.add_street(name="", municipality="Miskolc")

    def test_rejects_negative_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", start="-2", end="2")
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", end=-1)
        self.assertEqual(self.repo.list_streets(), [])
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", start="-2", end="2")
        with self.assertRaises(ValidationError):
            self.service.add_street(name="Kis utca", municipality="Miskolc", end=-1)


if __name__ == "__main__":
    unittest.main()
