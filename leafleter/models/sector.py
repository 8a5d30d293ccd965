"""Sector model: a user-defined grouping of streets (e.g. a distribution zone)."""

from __future__ import annotations

from dataclasses import dataclass

from leafleter.logic.id_deriver import derive_id

DEFAULT_SECTOR_COLOR = "#3388ff"


@dataclass
class Sector:
    id: str
    name: str
    note: str = ""
    color: str = DEFAULT_SECTOR_COLOR

    @staticmethod
    def derive_id(name: str, note: str) -> str:
        return derive_id(name, note)

    @classmethod
    def from_dict(cls, data: dict) -> "Sector":
        return cls(
            id=data["id"],
            name=data["name"],
            note=data.get("note", "") or "",
            color=data.get("color") or DEFAULT_SECTOR_COLOR,
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "note": self.note, "color": self.color}
