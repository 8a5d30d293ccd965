"""
leafleter/tests/test_json_document_repository.py

Persistence behaviour of the JSON file repository.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from leafleter.exceptions.errors import NotFoundError, ValidationError
from leafleter.logic.repository.json_document_repository import JsonDocumentRepository
from leafleter.models.street import Street

REPO_LOGGER = "leafleter.logic.repository.json_document_repository"


class RepoTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "data" / "leafleter.json"
        self.repo = JsonDocumentRepository(self.path)

    def tearDown(self) -> None:
        self._tmp.cleanup()


class TestLoad(RepoTestCase):
    def test_first_run_creates_file(self) -> None:
        with self.assertLogs(REPO_LOGGER, "INFO"):
            doc = self.repo.load()
        self.assertEqual(doc["streets"], [])
        self.assertTrue(self.path.exists())

    def test_corrupt_file_is_reinitialised(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs(REPO_LOGGER, "WARNING"):
            doc = self.repo.load()
        self.assertEqual(doc["sectors"], [])
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8"))["streets"], [])

    def test_non_object_is_reinitialised(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[1, 2]", encoding="utf-8")
        with self.assertLogs(REPO_LOGGER, "WARNING"):
            self.assertEqual(self.repo.load()["notes"], [])

    def test_malformed_entities_are_left_out(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({
            "streets": [{"name": "Kis utca", "municipality": "Miskolc"}, {"id": "x"}],
            "sectors": [{"id": "s1"}],
            "notes": [{"id": "n1", "streetId": "a", "number": 1}],
            "streetNotes": [{"id": "m1", "text": "no street"}],
        }), encoding="utf-8")
        with self.assertLogs(REPO_LOGGER, "WARNING"):
            self.assertEqual(self.repo.list_sectors(), [])
        self.assertEqual(self.repo.list_notes("a", 1), [])
        self.assertEqual(self.repo.list_street_notes("a"), [])
        self.assertEqual([s.name for s in self.repo.list_streets()], ["Kis utca"])

    def test_mutation_after_repair_keeps_good_data(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"sectors": [{"id": "s1"}, {"id": "s2", "name": "North"}]}),
                             encoding="utf-8")
        with self.assertLogs(REPO_LOGGER, "WARNING"):
            self.repo.add_street_note("a", "dog")
        self.assertEqual([s.id for s in self.repo.list_sectors()], ["s2"])
        self.assertEqual(len(self.repo.list_street_notes("a")), 1)

    def test_older_document_gets_missing_keys(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"streets": []}), encoding="utf-8")
        doc = self.repo.load()
        self.assertEqual(doc["streetSectors"], {})
        self.assertEqual(doc["streetNotes"], [])


class TestStreets(RepoTestCase):
    def test_upsert_is_idempotent(self) -> None:
        data = {"name": "Ady Endre utca", "municipality": "Miskolc", "start": 1, "end": 9}
        first = self.repo.upsert_street(data)
        second = self.repo.upsert_street(dict(data))
        self.assertEqual(first, second)
        self.assertEqual(len(self.repo.list_streets()), 1)
        self.assertEqual(first, Street.derive_id("Miskolc", "Ady Endre utca", 1, 9, "all"))

    def test_upsert_never_updates(self) -> None:
        street_id = self.repo.upsert_street({"id": "fixed", "name": "A", "municipality": "M"})
        self.repo.upsert_street({"id": "fixed", "name": "B", "municipality": "M"})
        self.assertEqual(self.repo.get_street(street_id).name, "A")

    def test_blank_name_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.repo.upsert_street({"name": "  ", "municipality": "Miskolc"})

    def test_grouped_and_sorted(self) -> None:
        for name in ("Zöld utca", "Ács utca", "Áchim utca", "Béke tér"):
            self.repo.upsert_street({"name": name, "municipality": "Miskolc"})
        self.repo.upsert_street({"name": "Fő utca", "municipality": "Felsőzsolca"})
        grouped = self.repo.list_grouped_by_municipality()
        self.assertEqual(list(grouped), ["Miskolc", "Felsőzsolca"])
        self.assertEqual(
            [s.name for s in grouped["Miskolc"]],
            ["Áchim utca", "Ács utca", "Béke tér", "Zöld utca"],
        )

    def test_get_unknown_street(self) -> None:
        self.assertIsNone(self.repo.get_street("nope"))


class TestHouseNumbers(RepoTestCase):
    def test_set_normalises(self) -> None:
        self.repo.set_house_numbers("s1", [3, 1, 2, 2])
        self.assertEqual(self.repo.list_house_numbers("s1"), [1, 2, 3])

    def test_empty_set_clears(self) -> None:
        self.repo.set_house_numbers("s1", [1])
        self.repo.set_house_numbers("s1", [-1])
        self.assertNotIn("s1", self.repo.export_raw()["houseNumbers"])

    def test_unknown_street_has_none(self) -> None:
        self.assertEqual(self.repo.list_house_numbers("s1"), [])


class TestNotes(RepoTestCase):
    def test_add_list_delete(self) -> None:
        note_id = self.repo.add_note("s1", 5, "  no mailbox ")
        notes = self.repo.list_notes("s1", 5)
        self.assertEqual([n.text for n in notes], ["no mailbox"])
        self.assertTrue(self.repo.has_notes("s1", 5))
        self.assertFalse(self.repo.has_notes("s1", 6))
        self.repo.delete_note(note_id)
        self.assertEqual(self.repo.list_notes("s1", 5), [])

    def test_two_identical_notes_get_distinct_ids(self) -> None:
        a = self.repo.add_note("s1", 5, "x")
        b = self.repo.add_note("s1", 5, "x")
        self.assertNotEqual(a, b)

    def test_blank_note_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.repo.add_note("s1", 5, "   ")
        with self.assertRaises(ValidationError):
            self.repo.add_street_note("s1", "")

    def test_delete_unknown_note_is_a_no_op(self) -> None:
        self.repo.add_note("s1", 5, "x")
        before = self.repo.export_raw()
        with mock.patch.object(self.repo, "_write") as write:
            self.repo.delete_note("does-not-exist")
            self.repo.delete_street_note("does-not-exist")
        write.assert_not_called()
        self.assertEqual(self.repo.export_raw(), before)

    def test_street_notes(self) -> None:
        note_id = self.repo.add_street_note("s1", "dog at the gate")
        self.assertEqual([n.id for n in self.repo.list_street_notes("s1")], [note_id])
        self.repo.delete_street_note(note_id)
        self.assertEqual(self.repo.list_street_notes("s1"), [])


class TestSectors(RepoTestCase):
    def test_upsert_updates_color(self) -> None:
        first = self.repo.add_or_update_sector("North", "team A", "#ff0000")
        second = self.repo.add_or_update_sector("North", "team A", "#00ff00")
        self.assertEqual(first, second)
        sectors = self.repo.list_sectors()
        self.assertEqual(len(sectors), 1)
        self.assertEqual(sectors[0].color, "#00ff00")

    def test_missing_color_keeps_existing(self) -> None:
        sector_id = self.repo.add_or_update_sector("North", "", "#ff0000")
        self.repo.add_or_update_sector("North", "", None)
        self.assertEqual(self.repo.get_sector(sector_id).color, "#ff0000")

    def test_delete_cascades_to_assignments(self) -> None:
        sector_id = self.repo.add_or_update_sector("North")
        self.repo.assign_sector("s1", sector_id)
        self.repo.assign_sector("s2", sector_id)
        self.repo.delete_sector(sector_id)
        self.assertIsNone(self.repo.get_street_sector("s1"))
        self.assertEqual(self.repo.export_raw()["streetSectors"], {})

    def test_assign_unknown_sector(self) -> None:
        with self.assertRaises(NotFoundError):
            self.repo.assign_sector("s1", "nope")

    def test_clear_assignment(self) -> None:
        sector_id = self.repo.add_or_update_sector("North")
        self.repo.assign_sector("s1", sector_id)
        self.assertEqual(self.repo.get_street_sector("s1"), sector_id)
        self.repo.assign_sector("s1", None)
        self.assertIsNone(self.repo.get_street_sector("s1"))

    def test_blank_sector_name_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            self.repo.add_or_update_sector("  ")


if __name__ == "__main__":
    unittest.main()
