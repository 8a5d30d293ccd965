"""Content-hash identifiers for entities that arrive without an id.

The ids are lookup keys only. A truncated digest gives no collision guarantee
worth relying on for anything security related.
"""
from __future__ import annotations

import hashlib

ID_LENGTH = 16
DELIMITER = "|"


def derive_id(*parts: object) -> str:
    """
    Return a stable 16-hex-character id for the given ordered parts.

    ``None`` parts render as an empty string, everything else via ``str()``.
    Identical parts always yield the identical id, across runs.
    """
    key = DELIMITER.join("" if p is None else str(p) for p in parts)
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:ID_LENGTH]
