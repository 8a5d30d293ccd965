"""
Validation and normalisation of the persisted leafleter document.

``normalize_document`` runs on every load of the data file and on every import.
Missing top-level keys of older documents become empty collections; entities
that do not satisfy the data model are dropped one by one.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from leafleter.exceptions.errors import ValidationError
from leafleter.models.note import utc_now_iso
from leafleter.models.sector import DEFAULT_SECTOR_COLOR, Sector
from leafleter.models.street import Interval, Street
from leafleter.logic.id_deriver import derive_id

logger = logging.getLogger(__name__)

LIST_KEYS = ("streets", "notes", "streetNotes", "sectors")
MAP_KEYS = ("houseNumbers", "streetSectors")

_INT_RE = re.compile(r"^[+-]?\d+$")


def empty_document() -> Dict[str, Any]:
    return {
        "streets": [],
        "houseNumbers": {},
        "notes": [],
        "streetNotes": [],
        "sectors": [],
        "streetSectors": {},
    }


# --------------------------------------------------------------------------- #
#  Scalar coercion
# --------------------------------------------------------------------------- #

def coerce_int(value: Any) -> Optional[int]:
    """Return *value* as int, or None if it is not an integer in any usual spelling."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        return int(s) if _INT_RE.match(s) else None
    return None


def normalize_numbers(values: Iterable[Any]) -> List[int]:
    """Integer-coerce, drop negatives and non-integers, dedupe, sort ascending."""
    out = set()
    for v in values:
        n = coerce_int(v)
        if n is not None and n >= 0:
            out.add(n)
    return sorted(out)


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def normalize_timestamp(value: Any) -> str:
    """ISO-8601 UTC in the ``...T12:00:00.000Z`` form; unparseable or empty → now."""
    s = _text(value)
    if not s:
        return utc_now_iso()
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return utc_now_iso()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --------------------------------------------------------------------------- #
#  Entity normalisers (None = drop)
# --------------------------------------------------------------------------- #

def normalize_street(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    name = _text(raw.get("name"))
    municipality = _text(raw.get("municipality"))
    if not name or not municipality:
        return None
    start = coerce_int(raw.get("start"))
    end = coerce_int(raw.get("end"))
    interval = Interval.parse(raw.get("interval"))
    street_id = _text(raw.get("id")) or Street.derive_id(municipality, name, start, end, interval)
    return Street(street_id, name, municipality, start, end, interval).to_dict()


def normalize_address_note(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    street_id = _text(raw.get("streetId"))
    number = coerce_int(raw.get("number"))
    text = _text(raw.get("text"))
    if not street_id or number is None or not text:
        return None
    created_at = normalize_timestamp(raw.get("created_at"))
    note_id = _text(raw.get("id")) or derive_id(street_id, number, text, created_at)
    return {"id": note_id, "streetId": street_id, "number": number, "text": text,
            "created_at": created_at}


def normalize_street_note(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    street_id = _text(raw.get("streetId"))
    text = _text(raw.get("text"))
    if not street_id or not text:
        return None
    created_at = normalize_timestamp(raw.get("created_at"))
    note_id = _text(raw.get("id")) or derive_id(street_id, text, created_at)
    return {"id": note_id, "streetId": street_id, "text": text, "created_at": created_at}


def normalize_sector(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    name = _text(raw.get("name"))
    if not name:
        return None
    note = _text(raw.get("note"))
    color = _text(raw.get("color")) or DEFAULT_SECTOR_COLOR
    sector_id = _text(raw.get("id")) or Sector.derive_id(name, note)
    return Sector(sector_id, name, note, color).to_dict()


def _unique(items: Iterable[Optional[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Drop None entries and later duplicates of an id."""
    seen: set[str] = set()
    out: List[Dict[str, Any]] = []
    for item in items:
        if item is None or item["id"] in seen:
            continue
        seen.add(item["id"])
        out.append(item)
    return out


# --------------------------------------------------------------------------- #
#  Whole document
# --------------------------------------------------------------------------- #

def normalize_document(obj: Any) -> Dict[str, Any]:
    """
    Validate *obj* and return a new document in canonical shape.

    Raises:
        ValidationError: if *obj* is not a JSON object at all.
    """
    if not isinstance(obj, dict):
        raise ValidationError("Invalid document format: expected a JSON object.")

    def _list(key: str) -> list:
        value = obj.get(key)
        return value if isinstance(value, list) else []

    def _map(key: str) -> dict:
        value = obj.get(key)
        return value if isinstance(value, dict) else {}

    doc = empty_document()
    doc["streets"] = _unique(normalize_street(s) for s in _list("streets"))
    doc["notes"] = _unique(normalize_address_note(n) for n in _list("notes"))
    doc["streetNotes"] = _unique(normalize_street_note(n) for n in _list("streetNotes"))
    doc["sectors"] = _unique(normalize_sector(s) for s in _list("sectors"))

    for street_id, values in _map("houseNumbers").items():
        key = _text(street_id)
        numbers = normalize_numbers(values) if isinstance(values, list) else []
        if key and numbers:
            doc["houseNumbers"][key] = numbers

    sector_ids = {s["id"] for s in doc["sectors"]}
    for street_id, sector_id in _map("streetSectors").items():
        key = _text(street_id)
        target = _text(sector_id)
        if key and target in sector_ids:
            doc["streetSectors"][key] = target

    dropped = dropped_entries(obj, doc)
    if dropped:
        logger.debug("Normalisation dropped %s", dropped)
    return doc


def dropped_entries(raw: Dict[str, Any], clean: Dict[str, Any]) -> Dict[str, int]:
    """Per collection, how many entries of *raw* did not survive into *clean*."""
    out: Dict[str, int] = {}
    for key in LIST_KEYS + MAP_KEYS:
        value = raw.get(key)
        before = len(value) if isinstance(value, (list, dict)) else 0
        if before > len(clean[key]):
            out[key] = before - len(clean[key])
    return out
