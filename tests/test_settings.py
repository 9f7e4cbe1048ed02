# tests/test_settings.py

"""Tests for the Settings configuration class and catalogue snapshot."""

import dataclasses
import unittest
from pathlib import Path

from src.config.catalog import CatalogConfig, load_catalog_config
from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and source registry."""

    def test_request_timeout_is_positive_int(self) -> None:
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_result_limit(self) -> None:
        self.assertEqual(Settings.RESULT_LIMIT, 18)

    def test_quantiles_ordered(self) -> None:
        self.assertLess(Settings.LOWER_QUANTILE, Settings.UPPER_QUANTILE)
        self.assertGreaterEqual(Settings.LOWER_QUANTILE, 0.0)
        self.assertLessEqual(Settings.UPPER_QUANTILE, 1.0)

    def test_available_sources_are_rakuten_and_yahoo(self) -> None:
        ids = [s["id"] for s in Settings.AVAILABLE_SOURCES]
        self.assertEqual(ids, ["rakuten", "yahoo"])

    def test_each_source_has_required_keys(self) -> None:
        """Every source must have id, label, and client keys."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src.get("id", "?")):
                self.assertIn("id", src)
                self.assertIn("label", src)
                self.assertIn("client", src)

    def test_required_keywords_cover_both_languages(self) -> None:
        self.assertIn("ウイスキー", Settings.REQUIRED_CATEGORY_KEYWORDS)
        self.assertIn("whisky", Settings.REQUIRED_CATEGORY_KEYWORDS)

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_impersonate_browser_is_string(self) -> None:
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(len(Settings.IMPERSONATE_BROWSER) > 0)


class TestCatalogConfig(unittest.TestCase):
    """CatalogConfig snapshot behaviour."""

    def test_from_settings_copies_lists_as_tuples(self) -> None:
        config = CatalogConfig.from_settings()
        self.assertIsInstance(config.excluded_keywords, tuple)
        self.assertEqual(
            list(config.seller_blacklist), Settings.SELLER_BLACKLIST
        )
        self.assertEqual(config.result_limit, Settings.RESULT_LIMIT)

    def test_is_immutable(self) -> None:
        config = CatalogConfig.from_settings()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.bypass_filter = True  # type: ignore[misc]

    def test_loaded_once_per_process(self) -> None:
        self.assertIs(load_catalog_config(), load_catalog_config())


if __name__ == "__main__":
    unittest.main()
