"""JSON file implementation of DocumentRepository.

Every call re-reads the data file; every mutating call rewrites the whole
document (temp file + replace) before returning. There is no in-memory cache
between calls, so the file on disk is always the current state.
"""

from __future__ import annotations

import json
import locale
import logging
import time
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from leafleter.exceptions.errors import NotFoundError, StorageError, ValidationError
from leafleter.logic.id_deriver import derive_id
from leafleter.logic.repository.document_normalizer import (
    coerce_int,
    dropped_entries,
    empty_document,
    normalize_document,
    normalize_numbers,
)
from leafleter.models.note import AddressNote, StreetNote, utc_now_iso
from leafleter.models.sector import DEFAULT_SECTOR_COLOR, Sector
from leafleter.models.street import Interval, Street

logger = logging.getLogger(__name__)


def name_sort_key(name: str) -> tuple:
    """
    Locale-aware ordering for street names.

    Primary key ignores accents and case (``Áchim`` sorts with ``Achim``), ties
    are broken by the active collation and finally the raw string.
    """
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", name) if not unicodedata.combining(ch)
    ).casefold()
    try:
        collated = locale.strxfrm(name)
    except (ValueError, OSError):
        collated = name
    return base, collated, name


class JsonDocumentRepository:
    """Single-file JSON backend for the leafleter document."""

    def __init__(self, data_file: str | Path) -> None:
        """
        Args:
            data_file: Path of the JSON document; parent folders are created on write.
        """
        self._path = Path(data_file)

    @property
    def path(self) -> Path:
        return self._path

    # =========================================================================
    # File access
    # =========================================================================

    def load(self) -> Dict[str, Any]:
        """
        Return the current document.

        A missing file (first run) or an unreadable/corrupt one is replaced by an
        empty default document; both cases are logged, corruption as a warning.
        Individual malformed entities are left out of the result (WARNING).
        """
        if not self._path.exists():
            logger.info("No data file at %s yet, initialising an empty document", self._path)
            return self._init_default()

        try:
            raw = self._path.read_text(encoding="utf-8")
            doc = json.loads(raw)
        except (OSError, ValueError) as ex:
            logger.warning("Data file %s is unreadable (%s); reinitialising", self._path, ex)
            return self._init_default()

        if not isinstance(doc, dict):
            logger.warning("Data file %s does not hold a JSON object; reinitialising", self._path)
            return self._init_default()
        clean = normalize_document(doc)
        dropped = dropped_entries(doc, clean)
        if dropped:
            logger.warning("Data file %s has malformed entries, ignoring them: %s", self._path, dropped)
        return clean

    def _init_default(self) -> Dict[str, Any]:
        doc = empty_document()
        try:
            self._write(doc)
        except StorageError:
            logger.exception("Could not persist the default document")
        return doc

    def _write(self, doc: Dict[str, Any]) -> None:
        """Rewrite the whole document atomically."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(doc, f, indent=2, ensure_ascii=False)
            tmp.replace(self._path)
        except OSError as ex:
            raise StorageError(f"Could not write {self._path}: {ex}") from ex

    # =========================================================================
    # Whole document
    # =========================================================================

    def export_raw(self) -> Dict[str, Any]:
        return self.load()

    def replace(self, candidate: Any) -> Dict[str, Any]:
        doc = normalize_document(candidate)
        self._write(doc)
        logger.info(
            "Document replaced: %d streets, %d notes, %d street notes, %d sectors",
            len(doc["streets"]), len(doc["notes"]), len(doc["streetNotes"]), len(doc["sectors"]),
        )
        return doc

    # =========================================================================
    # Streets
    # =========================================================================

    def upsert_street(self, street: Street | Dict[str, Any]) -> str:
        """
        Insert a street unless one with the same derived id exists.

        Existing records are never updated. Returns the id either way.

        Raises:
            ValidationError: name or municipality blank after trimming.
        """
        data = street.to_dict() if isinstance(street, Street) else dict(street)
        name = str(data.get("name") or "").strip()
        municipality = str(data.get("municipality") or "").strip()
        if not name or not municipality:
            raise ValidationError("Street name and municipality are required.")
        start = coerce_int(data.get("start"))
        end = coerce_int(data.get("end"))
        interval = Interval.parse(data.get("interval"))
        street_id = str(data.get("id") or "").strip() or Street.derive_id(
            municipality, name, start, end, interval
        )

        doc = self.load()
        if any(s.get("id") == street_id for s in doc["streets"]):
            return street_id
        doc["streets"].append(Street(street_id, name, municipality, start, end, interval).to_dict())
        self._write(doc)
        logger.debug("Street added: %s / %s (%s)", municipality, name, street_id)
        return street_id

    def list_streets(self) -> List[Street]:
        return [Street.from_dict(s) for s in self.load()["streets"]]

    def get_street(self, street_id: str) -> Optional[Street]:
        for s in self.load()["streets"]:
            if s.get("id") == street_id:
                return Street.from_dict(s)
        return None

    def list_grouped_by_municipality(self) -> Dict[str, List[Street]]:
        """Streets bucketed by municipality (first-seen order), names sorted per bucket."""
        grouped: Dict[str, List[Street]] = {}
        for s in self.list_streets():
            grouped.setdefault(s.municipality, []).append(s)
        for streets in grouped.values():
            streets.sort(key=lambda st: name_sort_key(st.name))
        return grouped

    # =========================================================================
    # House numbers
    # =========================================================================

    def set_house_numbers(self, street_id: str, numbers: Iterable[int]) -> None:
        doc = self.load()
        cleaned = normalize_numbers(numbers)
        if cleaned:
            doc["houseNumbers"][street_id] = cleaned
        else:
            # an empty set is the same as "not resolved yet"
            doc["houseNumbers"].pop(street_id, None)
        self._write(doc)
        logger.debug("House numbers stored for %s: %d", street_id, len(cleaned))

    def list_house_numbers(self, street_id: str) -> List[int]:
        return list(self.load()["houseNumbers"].get(street_id) or [])

    # =========================================================================
    # Address notes
    # =========================================================================

    def list_notes(self, street_id: str, number: int) -> List[AddressNote]:
        return [
            AddressNote.from_dict(n) for n in self.load()["notes"]
            if n.get("streetId") == street_id and n.get("number") == number
        ]

    def has_notes(self, street_id: str, number: int) -> bool:
        return bool(self.list_notes(street_id, number))

    def add_note(self, street_id: str, number: int, text: str) -> str:
        text = (text or "").strip()
        num = coerce_int(number)
        if not street_id or num is None or not text:
            raise ValidationError("A note needs a street, an integer house number and text.")
        note_id = derive_id(street_id, num, text, time.time_ns())
        note = AddressNote(note_id, street_id, num, text, utc_now_iso())

        doc = self.load()
        doc["notes"].append(note.to_dict())
        self._write(doc)
        logger.debug("Note %s added for %s %d", note_id, street_id, num)
        return note_id

    def delete_note(self, note_id: str) -> None:
        """Remove the note with *note_id*; unknown ids are ignored."""
        doc = self.load()
        before = len(doc["notes"])
        doc["notes"] = [n for n in doc["notes"] if n.get("id") != note_id]
        if len(doc["notes"]) != before:
            self._write(doc)
            logger.debug("Note %s deleted", note_id)

    # =========================================================================
    # Street notes
    # =========================================================================

    def list_street_notes(self, street_id: str) -> List[StreetNote]:
        return [
            StreetNote.from_dict(n) for n in self.load()["streetNotes"]
            if n.get("streetId") == street_id
        ]

    def add_street_note(self, street_id: str, text: str) -> str:
        text = (text or "").strip()
        if not street_id or not text:
            raise ValidationError("A street note needs a street and text.")
        note_id = derive_id(street_id, text, time.time_ns())
        note = StreetNote(note_id, street_id, text, utc_now_iso())

        doc = self.load()
        doc["streetNotes"].append(note.to_dict())
        self._write(doc)
        logger.debug("Street note %s added for %s", note_id, street_id)
        return note_id

    def delete_street_note(self, note_id: str) -> None:
        doc = self.load()
        before = len(doc["streetNotes"])
        doc["streetNotes"] = [n for n in doc["streetNotes"] if n.get("id") != note_id]
        if len(doc["streetNotes"]) != before:
            self._write(doc)
            logger.debug("Street note %s deleted", note_id)

    # =========================================================================
    # Sectors
    # =========================================================================

    def list_sectors(self) -> List[Sector]:
        return [Sector.from_dict(s) for s in self.load()["sectors"]]

    def get_sector(self, sector_id: str) -> Optional[Sector]:
        for s in self.load()["sectors"]:
            if s.get("id") == sector_id:
                return Sector.from_dict(s)
        return None

    def add_or_update_sector(self, name: str, note: str = "", color: Optional[str] = None) -> str:
        """
        Upsert a sector keyed by hash(name, note).

        Unlike streets, an existing sector is updated in place.
        """
        name = (name or "").strip()
        note = (note or "").strip()
        if not name:
            raise ValidationError("Sector name is required.")
        sector_id = Sector.derive_id(name, note)

        doc = self.load()
        for s in doc["sectors"]:
            if s.get("id") == sector_id:
                s["name"] = name
                s["note"] = note
                s["color"] = color or s.get("color") or DEFAULT_SECTOR_COLOR
                logger.debug("Sector %s updated", sector_id)
                break
        else:
            doc["sectors"].append(Sector(sector_id, name, note, color or DEFAULT_SECTOR_COLOR).to_dict())
            logger.debug("Sector %s added", sector_id)
        self._write(doc)
        return sector_id

    def delete_sector(self, sector_id: str) -> None:
        """Remove the sector and every street assignment pointing at it."""
        doc = self.load()
        before = len(doc["sectors"])
        doc["sectors"] = [s for s in doc["sectors"] if s.get("id") != sector_id]
        dangling = [k for k, v in doc["streetSectors"].items() if v == sector_id]
        for street_id in dangling:
            del doc["streetSectors"][street_id]
        if len(doc["sectors"]) != before or dangling:
            self._write(doc)
            logger.debug("Sector %s deleted, %d assignments cleared", sector_id, len(dangling))

    def assign_sector(self, street_id: str, sector_id: Optional[str]) -> None:
        """
        Assign *street_id* to a sector, or clear the assignment with ``None``.

        Raises:
            NotFoundError: the sector id is unknown.
        """
        doc = self.load()
        if sector_id is None:
            if doc["streetSectors"].pop(street_id, None) is not None:
                self._write(doc)
            return
        if not any(s.get("id") == sector_id for s in doc["sectors"]):
            raise NotFoundError(f"Sector not found: {sector_id}")
        doc["streetSectors"][street_id] = sector_id
        self._write(doc)

    def get_street_sector(self, street_id: str) -> Optional[str]:
        return self.load()["streetSectors"].get(street_id)
