# src/filters/canonicalizer.py

"""Canonical identity keys for grouping listings across marketplaces."""

import logging
from abc import ABC, abstractmethod

from src.config.catalog import CatalogConfig
from src.filters.title_parser import (
    build_noise_pattern,
    normalise_title,
    parse_abv,
    parse_age,
    parse_volume,
    strip_measurements,
)

logger = logging.getLogger("whisky_offers.canonicalizer")


class KeyStrategy(ABC):
    """Maps a listing title to the key used to group "the same product"."""

    @abstractmethod
    def canonicalize(self, title: str) -> str:
        """Return the grouping key for *title*. Must never raise."""
        ...


class TitleCanonicalizer(KeyStrategy):
    """Coarse textual identity: leading brand tokens plus measurements.

    The key has the form ``"{tokens}|{volume}ml|{strength}%|{age}"``.
    Missing measurements fall back to the configured defaults (700ml,
    40%, ``NAS``).  Measurement expressions inside the brand-token run
    are dropped so that ``40%`` and ``40度`` produce the same tokens.
    """

    def __init__(self, config: CatalogConfig) -> None:
        self.config = config
        self._noise = build_noise_pattern(config.noise_terms)

    def clean(self, title: str) -> str:
        """Return the lowercased, noise-stripped form of *title*."""
        return normalise_title(title, self._noise)

    def canonicalize(self, title: str) -> str:
        """Build the canonical key for *title*."""
        cleaned = self.clean(title)

        volume = parse_volume(cleaned)
        if volume is None:
            volume = self.config.default_volume_ml
        abv = parse_abv(cleaned)
        if abv is None:
            abv = self.config.default_abv_percent
        age = parse_age(cleaned) or self.config.no_age_statement

        leading = " ".join(
            cleaned.split()[: self.config.brand_token_count]
        )
        tokens = strip_measurements(leading)

        key = f"{tokens}|{volume}ml|{abv}%|{age}"
        logger.debug("Canonical key for '%s': %s", title, key)
        return key
