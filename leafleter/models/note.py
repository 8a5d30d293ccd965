from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2025-01-31T12:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class AddressNote:
    id: str
    street_id: str
    number: int
    text: str
    created_at: str

    @classmethod
    def from_dict(cls, data: dict) -> "AddressNote":
        return cls(
            id=data["id"],
            street_id=data["streetId"],
            number=int(data["number"]),
            text=data["text"],
            created_at=data.get("created_at", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "streetId": self.street_id,
            "number": self.number,
            "text": self.text,
            "created_at": self.created_at,
        }


@dataclass
class StreetNote:
    id: str
    street_id: str
    text: str
    created_at: str

    @classmethod
    def from_dict(cls, data: dict) -> "StreetNote":
        return cls(
            id=data["id"],
            street_id=data["streetId"],
            text=data["text"],
            created_at=data.get("created_at", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "streetId": self.street_id,
            "text": self.text,
            "created_at": self.created_at,
        }
