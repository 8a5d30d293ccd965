"""
===============================================================================
HouseNumberResolver – which house numbers does a street show?
-------------------------------------------------------------------------------
Sources, in rank order:
    1. persisted override   (numbers already stored for the street)
    2. bounded range        (start..end filtered by interval, then stored)
    3. external lookup      (open-ended streets, only once the user expands
                             the street; numeric OSM house numbers, stored)
    4. manual entry         (user supplies start/end when the lookup is empty)

Resolved numbers are never re-resolved automatically; only a manual entry
replaces them.
===============================================================================
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from leafleter.exceptions.errors import LookupFailedError, ValidationError
from leafleter.logic.repository.document_normalizer import coerce_int, normalize_numbers
from leafleter.logic.repository.document_repository import DocumentRepository
from leafleter.logic.services.lookup_cache import LookupCache
from leafleter.models.street import Interval, Street

logger = logging.getLogger(__name__)

_NUMERIC_TAG = re.compile(r"^\d+$")

HouseNumberLookup = Callable[[str, str], List[str]]


class ResolutionState(str, Enum):
    RESOLVED = "resolved"
    DEFERRED = "deferred"
    MANUAL_ENTRY = "manual_entry"
    LOOKUP_FAILED = "lookup_failed"


class ResolutionSource(str, Enum):
    OVERRIDE = "override"
    RANGE = "range"
    LOOKUP = "lookup"
    MANUAL = "manual"


@dataclass
class Resolution:
    state: ResolutionState
    numbers: List[int] = field(default_factory=list)
    source: Optional[ResolutionSource] = None
    message: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.state is ResolutionState.RESOLVED

    @property
    def allows_manual_entry(self) -> bool:
        return self.state in (ResolutionState.MANUAL_ENTRY, ResolutionState.LOOKUP_FAILED)


def generate_house_numbers(start: int, end: int, interval: Interval | str = Interval.ALL) -> List[int]:
    """Every integer in ``[start, end]`` matching the parity filter, ascending."""
    iv = Interval.parse(interval)
    numbers = range(start, end + 1)
    if iv is Interval.EVEN:
        return [i for i in numbers if i % 2 == 0]
    if iv is Interval.ODD:
        return [i for i in numbers if i % 2 != 0]
    return list(numbers)


def numeric_house_numbers(tags: List[str]) -> List[int]:
    """Keep strictly numeric tags ("12", not "12/A"), coerce, dedupe, sort."""
    return sorted({int(t) for t in tags if _NUMERIC_TAG.match(str(t).strip())})


class HouseNumberResolver:
    """
    Resolves the house-number set of a street.

    Parameters
    ----------
    repo : DocumentRepository
        Storage for overrides and resolved sets.
    lookup : Callable[[str, str], list[str]]
        External address-dataset lookup (street name, municipality) → raw
        house-number tags. Raises LookupFailedError on transport problems.
    cache : LookupCache, optional
        Memoises successful lookups per (street, municipality) for the session.
    """

    def __init__(
        self,
        repo: DocumentRepository,
        lookup: HouseNumberLookup,
        cache: Optional[LookupCache[List[int]]] = None,
    ) -> None:
        self._repo = repo
        self._lookup = lookup
        self._cache: LookupCache[List[int]] = cache if cache is not None else LookupCache()

    @property
    def cache(self) -> LookupCache[List[int]]:
        return self._cache

    # ------------------------------------------------------------------ #
    # Local sources (no network)
    # ------------------------------------------------------------------ #
    def resolve_initial(self, street: Street) -> Resolution:
        """
        Resolve from the override or the bounded range.

        Open-ended streets come back DEFERRED until the user expands them.
        """
        stored = self._repo.list_house_numbers(street.id)
        if stored:
            return Resolution(ResolutionState.RESOLVED, stored, ResolutionSource.OVERRIDE)

        if street.is_bounded:
            # streets from older files may still carry a negative start
            numbers = normalize_numbers(
                generate_house_numbers(street.start, street.end, street.interval)  # type: ignore[arg-type]
            )
            if numbers:
                self._repo.set_house_numbers(street.id, numbers)
                logger.debug("Generated %d house numbers for %s", len(numbers), street.label)
                return Resolution(ResolutionState.RESOLVED, numbers, ResolutionSource.RANGE)
            return Resolution(
                ResolutionState.MANUAL_ENTRY,
                message=f"The range of {street.label} contains no house numbers.",
            )

        return Resolution(ResolutionState.DEFERRED)

    # ------------------------------------------------------------------ #
    # External lookup
    # ------------------------------------------------------------------ #
    @staticmethod
    def _cache_key(street: Street) -> Tuple[str, str]:
        return street.name, street.municipality

    def fetch_house_numbers(self, street: Street) -> List[int]:
        """
        Numeric house numbers known to the external dataset (cached per session).

        Safe to call from a worker thread; touches no storage.

        Raises:
            LookupFailedError: the lookup could not be performed.
        """
        key = self._cache_key(street)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Lookup cache hit for %s, %s", *key)
            return list(cached)

        logger.info("Looking up house numbers for %s, %s", *key)
        numbers = numeric_house_numbers(self._lookup(*key))
        self._cache.put(key, numbers)
        return list(numbers)

    def apply_lookup_result(self, street: Street, numbers: List[int]) -> Resolution:
        """
        Persist a non-empty lookup result, otherwise ask for manual entry.

        Numbers stored while the lookup was running (a manual entry) win over
        the late result.
        """
        stored = self._repo.list_house_numbers(street.id)
        if stored:
            logger.info("Ignoring late lookup result for %s; numbers already stored", street.label)
            return Resolution(ResolutionState.RESOLVED, stored, ResolutionSource.OVERRIDE)
        if numbers:
            self._repo.set_house_numbers(street.id, numbers)
            return Resolution(ResolutionState.RESOLVED, list(numbers), ResolutionSource.LOOKUP)
        return Resolution(
            ResolutionState.MANUAL_ENTRY,
            message="No house numbers found in OpenStreetMap.",
        )

    @staticmethod
    def lookup_failed(error: Exception) -> Resolution:
        return Resolution(
            ResolutionState.LOOKUP_FAILED,
            message=f"House-number lookup failed: {error}",
        )

    def resolve_on_expand(self, street: Street) -> Resolution:
        """
        Full resolution as triggered by the first expand of a street.

        Local sources win; otherwise the (cached) external lookup decides
        between RESOLVED, MANUAL_ENTRY and LOOKUP_FAILED.
        """
        initial = self.resolve_initial(street)
        if initial.state is not ResolutionState.DEFERRED:
            return initial
        try:
            numbers = self.fetch_house_numbers(street)
        except LookupFailedError as ex:
            logger.warning("Lookup failed for %s: %s", street.label, ex)
            return self.lookup_failed(ex)
        return self.apply_lookup_result(street, numbers)

    # ------------------------------------------------------------------ #
    # Manual entry
    # ------------------------------------------------------------------ #
    @staticmethod
    def parse_manual_range(start: Any, end: Any) -> Tuple[int, int]:
        """
        Validate a manual start/end pair.

        Raises:
            ValidationError: not integers, negative, or end < start.
        """
        s = coerce_int(start)
        e = coerce_int(end)
        if s is None or e is None:
            raise ValidationError("Please enter valid start and end numbers.")
        if s < 0:
            raise ValidationError("House numbers cannot be negative.")
        if e < s:
            raise ValidationError("The end number must not be smaller than the start number.")
        return s, e

    def apply_manual_range(self, street: Street, start: Any, end: Any) -> Resolution:
        """Store every integer in ``[start, end]`` (no parity filter) for the street."""
        s, e = self.parse_manual_range(start, end)
        numbers = list(range(s, e + 1))
        self._repo.set_house_numbers(street.id, numbers)
        logger.info("Manual house numbers %d-%d stored for %s", s, e, street.label)
        return Resolution(ResolutionState.RESOLVED, numbers, ResolutionSource.MANUAL)
