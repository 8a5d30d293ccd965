"""
leafleter/tests/test_config_service.py

Layered configuration: embedded defaults, environment overlay, user INI.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.config.config_service import ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.env = {"XDG_CONFIG_HOME": self._tmp.name, "APPDATA": self._tmp.name}

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _service(self, **extra: str) -> ConfigService:
        with mock.patch.dict(os.environ, {**self.env, **extra}):
            return ConfigService()

    def test_defaults(self) -> None:
        cfg = self._service()
        self.assertEqual(cfg.map.zoom, 18)
        self.assertEqual(cfg.lookup.cache_max_entries, 0)
        self.assertTrue(cfg.lookup.overpass_url.startswith("https://"))
        self.assertIsInstance(cfg.storage.data_file, Path)
        self.assertEqual(cfg.meta_source("Map", "zoom")["layer"], "code")

    def test_env_overlay(self) -> None:
        cfg = self._service(LEAFLETER_LOOKUP__TIMEOUT_SECONDS="5", LEAFLETER_MAP__ZOOM="12")
        self.assertEqual(cfg.lookup.timeout_seconds, 5.0)
        self.assertEqual(cfg.map.zoom, 12)
        self.assertEqual(cfg.meta_source("Lookup", "timeout_seconds")["layer"], "env")

    def test_user_ini_wins_over_env(self) -> None:
        ini = Path(self._tmp.name) / "leafleter" / "config.ini"
        ini.parent.mkdir(parents=True)
        ini.write_text("[Storage]\ndata_file = /tmp/elsewhere.json\n", encoding="utf-8")
        cfg = self._service(LEAFLETER_STORAGE__DATA_FILE="/tmp/env.json")
        self.assertEqual(cfg.storage.data_file, Path("/tmp/elsewhere.json"))

    def test_source_of_unknown_key(self) -> None:
        self.assertIsNone(self._service().meta_source("Map", "nope"))

    def test_user_ini_source_is_recorded(self) -> None:
        ini = Path(self._tmp.name) / "leafleter" / "config.ini"
        ini.parent.mkdir(parents=True)
        ini.write_text("[Map]\nzoom = 11\n", encoding="utf-8")
        cfg = self._service()
        self.assertEqual(cfg.map.zoom, 11)
        self.assertEqual(cfg.meta_source("Map", "zoom")["layer"], "user")


if __name__ == "__main__":
    unittest.main()
