"""
leafleter/tests/test_models.py

Id derivation and the small domain models.
"""

from __future__ import annotations

import re
import unittest

from leafleter.logic.id_deriver import derive_id
from leafleter.models.note import AddressNote, utc_now_iso
from leafleter.models.sector import DEFAULT_SECTOR_COLOR, Sector
from leafleter.models.street import Interval, Street


class TestDeriveId(unittest.TestCase):
    def test_same_parts_same_id(self) -> None:
        a = derive_id("Miskolc", "Ady Endre utca", 1, 9, "all")
        b = derive_id("Miskolc", "Ady Endre utca", 1, 9, "all")
        self.assertEqual(a, b)
        self.assertRegex(a, r"^[0-9a-f]{16}$")

    def test_ids_are_stable_across_runs(self) -> None:
        # sha256("Miskolc|Ady Endre utca|1|9|all")[:16] etc.
        self.assertEqual(derive_id("Miskolc", "Ady Endre utca", 1, 9, "all"), "1f7a72e92d328630")
        self.assertEqual(Street.derive_id("Miskolc", "Ady Endre utca", 14, None, Interval.ALL), "785f5d8da790f8b8")
        self.assertEqual(Sector.derive_id("North", ""), "b0abf646c990d4bf")

    def test_any_part_changes_id(self) -> None:
        base = derive_id("Miskolc", "Ady Endre utca", 1, 9, "all")
        self.assertNotEqual(base, derive_id("Miskolc", "Ady Endre utca", 14, None, "all"))
        self.assertNotEqual(base, derive_id("Miskolc", "Ady Endre utca", 1, 9, "odd"))

    def test_none_renders_empty(self) -> None:
        self.assertEqual(derive_id("a", None), derive_id("a", ""))


class TestStreet(unittest.TestCase):
    def test_interval_parse_falls_back_to_all(self) -> None:
        self.assertIs(Interval.parse("odd"), Interval.ODD)
        self.assertIs(Interval.parse("weird"), Interval.ALL)
        self.assertIs(Interval.parse(None), Interval.ALL)

    def test_labels(self) -> None:
        self.assertEqual(Street("x", "Ady Endre utca", "Miskolc", 1, 9).label, "Ady Endre utca (1–9)")
        self.assertEqual(Street("x", "Ady Endre utca", "Miskolc", 14, None).label, "Ady Endre utca (14–)")
        self.assertEqual(Street("x", "Kis utca", "Miskolc", 5, 5).label, "Kis utca (5)")
        self.assertEqual(Street("x", "Kis utca", "Miskolc").label, "Kis utca")

    def test_is_bounded(self) -> None:
        self.assertTrue(Street("x", "a", "b", 1, 9).is_bounded)
        self.assertFalse(Street("x", "a", "b", 1, None).is_bounded)

    def test_dict_shape(self) -> None:
        s = Street("id1", "Áfonyás utca", "Miskolc", 1, None, "odd")
        self.assertEqual(
            s.to_dict(),
            {"id": "id1", "name": "Áfonyás utca", "municipality": "Miskolc",
             "start": 1, "end": None, "interval": "odd"},
        )
        self.assertEqual(Street.from_dict(s.to_dict()), s)


class TestNotesAndSectors(unittest.TestCase):
    def test_timestamp_format(self) -> None:
        self.assertTrue(re.match(r"^\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z$", utc_now_iso()))

    def test_note_uses_camel_case_street_key(self) -> None:
        note = AddressNote("n1", "s1", 3, "kutya", "2025-01-01T00:00:00.000Z")
        self.assertEqual(note.to_dict()["streetId"], "s1")
        self.assertEqual(AddressNote.from_dict(note.to_dict()), note)

    def test_sector_default_color(self) -> None:
        sector = Sector.from_dict({"id": "x", "name": "North"})
        self.assertEqual(sector.color, DEFAULT_SECTOR_COLOR)
        self.assertEqual(sector.note, "")


if __name__ == "__main__":
    unittest.main()
