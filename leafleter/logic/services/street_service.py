"""StreetService – seeding and user-driven creation of streets."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from leafleter.exceptions.errors import ValidationError
from leafleter.logic.repository.document_normalizer import coerce_int
from leafleter.logic.repository.document_repository import DocumentRepository
from leafleter.models.street import Interval

logger = logging.getLogger(__name__)

SEED_STREETS: List[Dict[str, Any]] = [
    {"name": "Áchim utca", "start": 1, "end": None, "interval": "all", "municipality": "Miskolc"},
    {"name": "Ács utca", "start": 1, "end": None, "interval": "all", "municipality": "Miskolc"},
    {"name": "Adler Károly utca", "start": 1, "end": None, "interval": "all", "municipality": "Miskolc"},
    {"name": "Ady Endre utca", "start": 1, "end": 9, "interval": "all", "municipality": "Miskolc"},
    {"name": "Ady Endre utca", "start": 14, "end": None, "interval": "all", "municipality": "Miskolc"},
    {"name": "Áfonyás utca", "start": 1, "end": None, "interval": "odd", "municipality": "Miskolc"},
]


def _optional_int(value: Any, label: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    n = coerce_int(value)
    if n is None:
        raise ValidationError(f"{label} must be a whole number.")
    if n < 0:
        raise ValidationError(f"{label} cannot be negative.")
    return n


class StreetService:
    def __init__(self, repo: DocumentRepository) -> None:
        self._repo = repo

    def seed(self, streets: Iterable[Dict[str, Any]] = SEED_STREETS) -> List[str]:
        """Upsert the built-in streets; repeated calls add nothing."""
        return [self._repo.upsert_street(s) for s in streets]

    def add_street(
        self,
        *,
        name: str,
        municipality: str,
        start: Any = None,
        end: Any = None,
        interval: str = Interval.ALL.value,
    ) -> str:
        """
        Add a street from form input; blank bounds mean "no bound".

        Raises:
            ValidationError: blank name/municipality, non-integer, negative or
                inverted bounds.
        """
        s = _optional_int(start, "Start")
        e = _optional_int(end, "End")
        if s is not None and e is not None and e < s:
            raise ValidationError("End must not be smaller than start.")
        street_id = self._repo.upsert_street({
            "name": name,
            "municipality": municipality,
            "start": s,
            "end": e,
            "interval": Interval.parse(interval).value,
        })
        logger.info("Street %s, %s saved as %s", name, municipality, street_id)
        return street_id
