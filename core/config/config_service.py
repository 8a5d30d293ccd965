"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

ENV_PREFIX = "LEAFLETER_"


def _user_data_dir() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Leafleter"
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "leafleter"


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Leafleter" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "leafleter" / "config.ini"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Storage": {
        "data_file": (_user_data_dir() / "data" / "leafleter.json").as_posix(),
    },
    "Lookup": {
        "nominatim_url": "https://nominatim.openstreetmap.org/search",
        "overpass_url": "https://overpass-api.de/api/interpreter",
        "user_agent": "leafleter/0.1 (desktop)",
        "accept_language": "en",
        "timeout_seconds": "30",
        "cache_max_entries": "0",
    },
    "Map": {
        "default_lat": "48.104",
        "default_lon": "20.791",
        "zoom": "18",
    },
    "General": {
        "app_name": "Leafleter",
        "version": "0.1.0",
        "log_level": "INFO",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class StorageConfig:
    data_file: Path


@dataclass
class LookupConfig:
    nominatim_url: str = ""
    overpass_url: str = ""
    user_agent: str = ""
    accept_language: str = "en"
    timeout_seconds: float = 30.0
    cache_max_entries: int = 0


@dataclass
class MapConfig:
    default_lat: float = 48.104
    default_lon: float = 20.791
    zoom: int = 18


@dataclass
class GeneralConfig:
    app_name: str = ""
    version: str = ""
    log_level: str = "INFO"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


_TYPES: Dict[str, type] = {"Path": Path, "bool": bool, "int": int, "float": float, "str": str}


def _cast(value: Any, typ: type | str) -> Any:
    if isinstance(typ, str):
        # annotations are strings under `from __future__ import annotations`
        typ = _TYPES.get(typ, str)
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays() -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self) -> None:
        self._lock = RLock()
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: environment variables
            env = _env_overlays()
            _apply(merged, env, "env", "os.environ", sources)

            # Layer 2: user overrides
            user_ini = _user_config_path()
            if user_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(user_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp), "user", str(user_ini), sources)

            self._sources = sources

            self.storage = _build_dataclass(StorageConfig, merged.get("Storage", {}))
            self.lookup = _build_dataclass(LookupConfig, merged.get("Lookup", {}))
            self.map = _build_dataclass(MapConfig, merged.get("Map", {}))
            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
