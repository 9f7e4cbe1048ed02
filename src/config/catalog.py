# src/config/catalog.py

"""Immutable snapshot of the catalogue rules shared by every request."""

from dataclasses import dataclass
from functools import lru_cache

from src.config.settings import Settings


@dataclass(frozen=True)
class CatalogConfig:
    """Read-only keyword lists and defaults for canonicalising and filtering.

    Built once per process from :class:`Settings` and passed explicitly to
    the canonicaliser, the category filter and the aggregator, so tests can
    swap in their own rules with :func:`dataclasses.replace`.
    """

    excluded_keywords: tuple[str, ...]
    required_keywords: tuple[str, ...]
    seller_blacklist: tuple[str, ...]
    noise_terms: tuple[str, ...]
    bypass_filter: bool = False
    default_volume_ml: int = 700
    default_abv_percent: int = 40
    no_age_statement: str = "NAS"
    brand_token_count: int = 6
    lower_quantile: float = 0.05
    upper_quantile: float = 0.95
    result_limit: int = 18

    @classmethod
    def from_settings(cls) -> "CatalogConfig":
        """Snapshot the current :class:`Settings` values."""
        return cls(
            excluded_keywords=tuple(Settings.EXCLUDED_CATEGORY_KEYWORDS),
            required_keywords=tuple(Settings.REQUIRED_CATEGORY_KEYWORDS),
            seller_blacklist=tuple(Settings.SELLER_BLACKLIST),
            noise_terms=tuple(Settings.TITLE_NOISE_TERMS),
            bypass_filter=Settings.NO_FILTER,
            default_volume_ml=Settings.DEFAULT_VOLUME_ML,
            default_abv_percent=Settings.DEFAULT_ABV_PERCENT,
            no_age_statement=Settings.NO_AGE_STATEMENT,
            brand_token_count=Settings.BRAND_TOKEN_COUNT,
            lower_quantile=Settings.LOWER_QUANTILE,
            upper_quantile=Settings.UPPER_QUANTILE,
            result_limit=Settings.RESULT_LIMIT,
        )


@lru_cache(maxsize=1)
def load_catalog_config() -> CatalogConfig:
    """Return the process-wide catalogue config, loading it on first use."""
    return CatalogConfig.from_settings()
