"""
Street domain model.

A named thoroughfare in a municipality, optionally bounded by a house-number
range and a parity filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from leafleter.logic.id_deriver import derive_id


class Interval(str, Enum):
    ALL = "all"
    EVEN = "even"
    ODD = "odd"

    @classmethod
    def parse(cls, value: Any) -> "Interval":
        """Unknown or missing values fall back to ALL."""
        if isinstance(value, Interval):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.ALL


@dataclass
class Street:
    id: str
    name: str
    municipality: str
    start: Optional[int] = None
    end: Optional[int] = None
    interval: Interval = Interval.ALL

    def __post_init__(self) -> None:
        self.interval = Interval.parse(self.interval)

    @staticmethod
    def derive_id(municipality: str, name: str, start: Optional[int], end: Optional[int],
                  interval: Interval | str) -> str:
        return derive_id(municipality, name, start, end, Interval.parse(interval).value)

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def label(self) -> str:
        """Header text: ``name (1–9)``, ``name (14–)``, ``name (5)`` or bare name."""
        if self.start is not None and self.end is not None and self.start != self.end:
            return f"{self.name} ({self.start}–{self.end})"
        if self.start is not None and self.end is None:
            return f"{self.name} ({self.start}–)"
        if self.start is not None and self.start == self.end:
            return f"{self.name} ({self.start})"
        return self.name

    @classmethod
    def from_dict(cls, data: dict) -> "Street":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            municipality=str(data.get("municipality", "")),
            start=data.get("start"),
            end=data.get("end"),
            interval=Interval.parse(data.get("interval")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "municipality": self.municipality,
            "start": self.start,
            "end": self.end,
            "interval": self.interval.value,
        }
