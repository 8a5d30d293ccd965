"""StreetController - use cases behind the street list view."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from leafleter.exceptions.errors import LeafleterError, LookupFailedError
from leafleter.logic.context import LeafleterContext
from leafleter.logic.services.geocoding_service import osm_map_url
from leafleter.logic.services.house_number_resolver import Resolution
from leafleter.models.note import AddressNote, StreetNote
from leafleter.models.sector import Sector
from leafleter.models.street import Street

logger = logging.getLogger(__name__)

Outcome = Tuple[bool, Optional[str]]


@dataclass
class StreetRow:
    """Street plus what the tree needs to render it."""

    street: Street
    sector: Optional[Sector] = None

    @property
    def label(self) -> str:
        return self.street.label


class StreetController:
    """
    Thin orchestration layer between the Tk view and the services.

    Mutations return ``(success, error_message)``; the view shows the message.
    Network calls (``fetch_house_numbers``, ``locate``) may run on a worker
    thread, everything touching storage runs on the Tk thread.
    """

    def __init__(self, ctx: LeafleterContext) -> None:
        self._ctx = ctx

    # ------------------------------------------------------------------ #
    # Streets
    # ------------------------------------------------------------------ #
    def seed(self) -> None:
        self._ctx.streets.seed()

    def grouped_streets(self) -> Dict[str, List[StreetRow]]:
        repo = self._ctx.repo
        sectors = {s.id: s for s in repo.list_sectors()}
        assignments = repo.export_raw()["streetSectors"]
        return {
            municipality: [StreetRow(s, sectors.get(assignments.get(s.id, ""))) for s in streets]
            for municipality, streets in repo.list_grouped_by_municipality().items()
        }

    def add_street(self, **form: Any) -> Outcome:
        try:
            self._ctx.streets.add_street(**form)
            return True, None
        except LeafleterError as ex:
            logger.warning("Add street rejected: %s", ex)
            return False, str(ex)

    # ------------------------------------------------------------------ #
    # House numbers
    # ------------------------------------------------------------------ #
    def initial_numbers(self, street: Street) -> Resolution:
        return self._ctx.resolver.resolve_initial(street)

    def fetch_house_numbers(self, street: Street) -> List[int]:
        """Network part of the lookup; raises LookupFailedError."""
        return self._ctx.resolver.fetch_house_numbers(street)

    def finish_lookup(self, street: Street, result: List[int] | LookupFailedError) -> Resolution:
        if isinstance(result, LookupFailedError):
            logger.warning("Lookup failed for %s: %s", street.label, result)
            return self._ctx.resolver.lookup_failed(result)
        return self._ctx.resolver.apply_lookup_result(street, result)

    def apply_manual_range(self, street: Street, start: Any, end: Any) -> Tuple[Optional[Resolution], Optional[str]]:
        try:
            return self._ctx.resolver.apply_manual_range(street, start, end), None
        except LeafleterError as ex:
            return None, str(ex)

    def has_notes(self, street: Street, number: int) -> bool:
        return self._ctx.repo.has_notes(street.id, number)

    # ------------------------------------------------------------------ #
    # Notes
    # ------------------------------------------------------------------ #
    def list_notes(self, street: Street, number: int) -> List[AddressNote]:
        return self._ctx.repo.list_notes(street.id, number)

    def add_note(self, street: Street, number: int, text: str) -> Outcome:
        if not text.strip():
            return False, None
        try:
            self._ctx.repo.add_note(street.id, number, text)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    def delete_note(self, note_id: str) -> Outcome:
        try:
            self._ctx.repo.delete_note(note_id)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    def list_street_notes(self, street: Street) -> List[StreetNote]:
        return self._ctx.repo.list_street_notes(street.id)

    def add_street_note(self, street: Street, text: str) -> Outcome:
        if not text.strip():
            return False, None
        try:
            self._ctx.repo.add_street_note(street.id, text)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    def delete_street_note(self, note_id: str) -> Outcome:
        try:
            self._ctx.repo.delete_street_note(note_id)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    # ------------------------------------------------------------------ #
    # Sectors
    # ------------------------------------------------------------------ #
    def list_sectors(self) -> List[Sector]:
        return self._ctx.repo.list_sectors()

    def save_sector(self, name: str, note: str, color: Optional[str]) -> Outcome:
        try:
            self._ctx.repo.add_or_update_sector(name, note, color)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    def delete_sector(self, sector_id: str) -> Outcome:
        try:
            self._ctx.repo.delete_sector(sector_id)
            return True, None
        except LeafleterError as ex:
            return False, str(ex)

    def current_sector(self, street: Street) -> Optional[Sector]:
        repo = self._ctx.repo
        sector_id = repo.get_street_sector(street.id)
        return repo.get_sector(sector_id) if sector_id else None

    def assign_sector(self, street: Street, sector_id: Optional[str]) -> Outcome:
        try:
            self._ctx.repo.assign_sector(street.id, sector_id)
            return True, None
        except LeafleterError as ex:
            logger.warning("Sector assignment rejected: %s", ex)
            return False, str(ex)

    # ------------------------------------------------------------------ #
    # Map
    # ------------------------------------------------------------------ #
    def locate(self, street: Street, number: Optional[int] = None) -> Optional[str]:
        """openstreetmap.org URL for the address (or street), None if not found."""
        coords = self._ctx.geocoder.locate(street, number)
        if coords is None:
            return None
        return osm_map_url(coords[0], coords[1], self._ctx.map_zoom)

    def default_map_url(self) -> str:
        lat, lon = self._ctx.map_center
        return osm_map_url(lat, lon, self._ctx.map_zoom)

    # ------------------------------------------------------------------ #
    # Import / export
    # ------------------------------------------------------------------ #
    def export_document(self) -> Outcome:
        try:
            result = self._ctx.import_export.export_document()
        except LeafleterError as ex:
            logger.error("Export failed: %s", ex)
            return False, str(ex)
        if result.cancelled:
            return False, None
        return True, result.file_path

    def import_document(self) -> Outcome:
        try:
            doc = self._ctx.import_export.import_interactive()
        except LeafleterError as ex:
            logger.error("Import failed: %s", ex)
            return False, str(ex)
        if doc is None:
            return False, None
        return True, None
