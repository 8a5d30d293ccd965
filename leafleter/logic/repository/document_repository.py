"""
===============================================================================
Document Repository Protocol – data access contract for the leafleter document
-------------------------------------------------------------------------------
Purpose:
    Define the contract services and views use to read and mutate streets,
    house numbers, notes and sectors. The JSON file implementation rewrites the
    whole document on every mutation; an embedded database can implement the
    same Protocol without touching callers.
===============================================================================
"""
from __future__ import annotations
from typing import Protocol, Dict, List, Optional, Iterable, Any

from leafleter.models.note import AddressNote, StreetNote
from leafleter.models.sector import Sector
from leafleter.models.street import Street


class DocumentRepository(Protocol):
    """Read/write contract for the leafleter document."""

    # ===== Whole document =====

    def load(self) -> Dict[str, Any]:
        """Return the document. Never raises for a missing or corrupt file."""
        ...

    def export_raw(self) -> Dict[str, Any]:
        ...

    def replace(self, candidate: Any) -> Dict[str, Any]:
        """Normalise *candidate* and persist it as the new document."""
        ...

    # ===== Streets =====

    def upsert_street(self, street: Street | Dict[str, Any]) -> str:
        ...

    def list_streets(self) -> List[Street]:
        ...

    def get_street(self, street_id: str) -> Optional[Street]:
        ...

    def list_grouped_by_municipality(self) -> Dict[str, List[Street]]:
        ...

    # ===== House numbers =====

    def set_house_numbers(self, street_id: str, numbers: Iterable[int]) -> None:
        ...

    def list_house_numbers(self, street_id: str) -> List[int]:
        ...

    # ===== Notes =====

    def list_notes(self, street_id: str, number: int) -> List[AddressNote]:
        ...

    def has_notes(self, street_id: str, number: int) -> bool:
        ...

    def add_note(self, street_id: str, number: int, text: str) -> str:
        ...

    def delete_note(self, note_id: str) -> None:
        ...

    def list_street_notes(self, street_id: str) -> List[StreetNote]:
        ...

    def add_street_note(self, street_id: str, text: str) -> str:
        ...

    def delete_street_note(self, note_id: str) -> None:
        ...

    # ===== Sectors =====

    def list_sectors(self) -> List[Sector]:
        ...

    def get_sector(self, sector_id: str) -> Optional[Sector]:
        ...

    def add_or_update_sector(self, name: str, note: str = "", color: Optional[str] = None) -> str:
        ...

    def delete_sector(self, sector_id: str) -> None:
        ...

    def assign_sector(self, street_id: str, sector_id: Optional[str]) -> None:
        ...

    def get_street_sector(self, street_id: str) -> Optional[str]:
        ...
