# src/filters/category_filter.py

"""Keep only whisky listings from acceptable sellers."""

import logging

from src.config.catalog import CatalogConfig
from src.models.listing import RawListing

logger = logging.getLogger("whisky_offers.filters")


class CategoryFilter:
    """Reject other beverage categories, non-whisky hits and blacklisted shops."""

    def __init__(self, config: CatalogConfig) -> None:
        self.config = config
        self._excluded = [kw.lower() for kw in config.excluded_keywords]
        self._required = [kw.lower() for kw in config.required_keywords]
        self._blacklist = [
            name.lower() for name in config.seller_blacklist if name
        ]

    def is_blacklisted_seller(self, seller_name: str | None) -> bool:
        """Case-insensitive substring match against the seller blacklist."""
        if not seller_name:
            return False
        lowered = seller_name.lower()
        return any(name in lowered for name in self._blacklist)

    def accepts(self, listing: RawListing) -> bool:
        """Return True when *listing* should take part in the comparison."""
        if self.config.bypass_filter:
            return True
        title = listing.title.lower()
        if any(kw in title for kw in self._excluded):
            return False
        if not any(kw in title for kw in self._required):
            return False
        if self.is_blacklisted_seller(listing.seller_name):
            return False
        return True

    def filter(
        self, listings: list[RawListing],
    ) -> tuple[list[RawListing], int]:
        """Apply :meth:`accepts` to every listing.

        Returns the kept listings (order preserved) and the rejected count.
        """
        kept: list[RawListing] = []
        rejected = 0
        for listing in listings:
            if self.accepts(listing):
                kept.append(listing)
            else:
                logger.debug(
                    "Rejected listing (source=%s, title=%s, seller=%s)",
                    listing.source,
                    listing.title,
                    listing.seller_name,
                )
                rejected += 1

        if rejected:
            logger.info(
                "Category filter rejected %d of %d listings",
                rejected,
                len(listings),
            )
        return kept, rejected
