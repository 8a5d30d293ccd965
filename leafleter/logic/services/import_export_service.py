"""
===============================================================================
ImportExportService – whole-document export to and import from a JSON file
-------------------------------------------------------------------------------
Export writes the stored document verbatim (pretty-printed). Import parses,
normalises and then wholly replaces the stored document; nothing is merged.
Dialog callbacks supply paths and return None when the user cancels.
===============================================================================
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from leafleter.exceptions.errors import ParseError, StorageError
from leafleter.logic.repository.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

PathPrompt = Callable[[], Optional[str]]


@dataclass
class ExportResult:
    ok: bool
    file_path: Optional[str] = None
    cancelled: bool = False


class ImportExportService:
    """
    Parameters
    ----------
    repo : DocumentRepository
        Source of the export and target of the import.
    ask_save_path / ask_open_path : Callable[[], str | None], optional
        Destination/source pickers used when no explicit path is passed.
    """

    def __init__(
        self,
        repo: DocumentRepository,
        *,
        ask_save_path: Optional[PathPrompt] = None,
        ask_open_path: Optional[PathPrompt] = None,
    ) -> None:
        self._repo = repo
        self._ask_save = ask_save_path
        self._ask_open = ask_open_path

    def export_document(self, path: Optional[str | Path] = None) -> ExportResult:
        """
        Write the current document to *path* (or a user-chosen destination).

        Cancelling the destination choice is not an error.

        Raises:
            StorageError: the destination could not be written.
        """
        if path is None and self._ask_save is not None:
            path = self._ask_save()
        if not path:
            logger.info("Export cancelled")
            return ExportResult(ok=False, cancelled=True)

        target = Path(path)
        doc = self._repo.export_raw()
        try:
            target.write_text(json.dumps(doc, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as ex:
            raise StorageError(f"Could not write {target}: {ex}") from ex
        logger.info("Exported document to %s", target)
        return ExportResult(ok=True, file_path=str(target))

    def import_document(self, path: str | Path) -> Dict[str, Any]:
        """
        Replace the stored document with the normalised content of *path*.

        Raises:
            ParseError: the file is not UTF-8 encoded, well-formed JSON.
            ValidationError: the JSON is not an object.
            StorageError: the file cannot be read or the result not be stored.
        """
        source = Path(path)
        try:
            raw = source.read_bytes()
        except OSError as ex:
            raise StorageError(f"Could not read {source}: {ex}") from ex
        try:
            # UnicodeDecodeError is a ValueError
            candidate = json.loads(raw.decode("utf-8"))
        except ValueError as ex:
            raise ParseError(f"{source.name} is not valid JSON: {ex}") from ex

        doc = self._repo.replace(candidate)
        logger.info("Imported document from %s", source)
        return doc

    def import_interactive(self) -> Optional[Dict[str, Any]]:
        """Ask for a source file and import it; None if the user cancelled."""
        path = self._ask_open() if self._ask_open is not None else None
        if not path:
            logger.info("Import cancelled")
            return None
        return self.import_document(path)
