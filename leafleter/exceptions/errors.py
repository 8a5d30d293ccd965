"""Leafleter feature exceptions."""
from __future__ import annotations


class LeafleterError(Exception):
    """Base exception for the leafleter feature."""


class ValidationError(LeafleterError):
    """Raised when input does not satisfy the data model rules."""


class ParseError(LeafleterError):
    """Raised when an import file is not well-formed JSON."""


class NotFoundError(LeafleterError):
    """Raised when a referenced entity does not exist."""


class StorageError(LeafleterError):
    """Raised when the data file cannot be written."""


class LookupFailedError(LeafleterError):
    """Raised when an external lookup service cannot be reached or answers garbage."""
