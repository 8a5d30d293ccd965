"""
LeafleterContext – wiring of repository, services and adapters.

Built once per process by the entry point (or by tests with fakes) and passed
to controllers and views; nothing here is module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from core.config.config_service import ConfigService, config_service
from leafleter.logic.adapters import file_dialogs
from leafleter.logic.adapters.nominatim_client import NominatimClient
from leafleter.logic.adapters.overpass_client import OverpassClient
from leafleter.logic.repository.json_document_repository import JsonDocumentRepository
from leafleter.logic.services.geocoding_service import GeocodingService
from leafleter.logic.services.house_number_resolver import HouseNumberResolver
from leafleter.logic.services.import_export_service import ImportExportService
from leafleter.logic.services.lookup_cache import LookupCache
from leafleter.logic.services.street_service import StreetService


@dataclass
class LeafleterContext:
    repo: JsonDocumentRepository
    streets: StreetService
    resolver: HouseNumberResolver
    geocoder: GeocodingService
    import_export: ImportExportService
    map_zoom: int = 18
    map_center: Tuple[float, float] = (48.104, 20.791)


def build_context(
    config: Optional[ConfigService] = None,
    *,
    data_file: Optional[str | Path] = None,
    dialog_parent: object = None,
) -> LeafleterContext:
    """Create the runtime context from configuration."""
    cfg = config or config_service
    lookup = cfg.lookup

    repo = JsonDocumentRepository(data_file or cfg.storage.data_file)
    overpass = OverpassClient(
        lookup.overpass_url, timeout=lookup.timeout_seconds, user_agent=lookup.user_agent
    )
    nominatim = NominatimClient(
        lookup.nominatim_url,
        timeout=lookup.timeout_seconds,
        user_agent=lookup.user_agent,
        accept_language=lookup.accept_language,
    )
    max_entries = lookup.cache_max_entries

    return LeafleterContext(
        repo=repo,
        streets=StreetService(repo),
        resolver=HouseNumberResolver(
            repo, overpass.fetch_house_number_tags, LookupCache(max_entries)
        ),
        geocoder=GeocodingService(
            nominatim,
            street_cache=LookupCache(max_entries),
            address_cache=LookupCache(max_entries),
        ),
        import_export=ImportExportService(
            repo,
            ask_save_path=lambda: file_dialogs.ask_save_json(dialog_parent),
            ask_open_path=lambda: file_dialogs.ask_open_json(dialog_parent),
        ),
        map_zoom=cfg.map.zoom,
        map_center=(cfg.map.default_lat, cfg.map.default_lon),
    )
