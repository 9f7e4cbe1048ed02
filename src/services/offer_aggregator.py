# src/services/offer_aggregator.py

"""Fan a query out to every marketplace and reconcile the offers."""

import asyncio
import importlib
import logging
import math
from dataclasses import dataclass, field
from typing import Any

from src.clients.base_client import BaseMarketplaceClient
from src.config.catalog import CatalogConfig, load_catalog_config
from src.config.settings import Settings
from src.filters.canonicalizer import KeyStrategy, TitleCanonicalizer
from src.filters.category_filter import CategoryFilter
from src.filters.price_band import compute_band
from src.models.listing import RawListing
from src.models.offer_group import OfferGroup, PriceBand
from src.services.errors import InvalidQueryError, UpstreamError

logger = logging.getLogger("whisky_offers.aggregator")


@dataclass
class SourceFailure:
    """A marketplace that contributed no listings, and why."""

    source: str
    reason: str


@dataclass
class AggregationResult:
    """Container for one completed, ranked aggregation."""

    query: str
    items: list[OfferGroup] = field(
        default_factory=lambda: list[OfferGroup]()
    )
    failed_sources: list[SourceFailure] = field(
        default_factory=lambda: list[SourceFailure]()
    )
    band: PriceBand = field(default_factory=PriceBand.unbounded)
    total_listings: int = 0
    rejected_count: int = 0
    group_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Serialise as the ``{query, items, failed_sources}`` response."""
        return {
            "query": self.query,
            "items": [group.to_dict() for group in self.items],
            "failed_sources": [
                {"source": f.source, "reason": f.reason}
                for f in self.failed_sources
            ],
        }


def load_client_class(dotted_path: str) -> type[Any]:
    """Dynamically import a client class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_clients(
    sources: list[dict[str, str]] | None = None,
) -> list[BaseMarketplaceClient]:
    """Instantiate one client per configured source, in registry order."""
    selected = Settings.AVAILABLE_SOURCES if sources is None else sources
    return [load_client_class(src["client"])() for src in selected]


def group_listings(
    listings: list[RawListing],
    strategy: KeyStrategy,
) -> dict[str, list[RawListing]]:
    """Bucket listings by canonical key, preserving discovery order."""
    groups: dict[str, list[RawListing]] = {}
    for listing in listings:
        key = strategy.canonicalize(listing.title)
        groups.setdefault(key, []).append(listing)
    return groups


def select_representative(
    members: list[RawListing],
    band: PriceBand,
) -> RawListing:
    """Pick the cheapest in-band member of a group.

    Falls back to the cheapest priced member when none is in band, and to
    the first member when no member has a price.
    """
    priced = [m for m in members if m.price is not None]
    if not priced:
        return members[0]
    eligible = [
        m for m in priced if m.price is not None and band.contains(m.price)
    ]
    # min() keeps the earliest member on price ties
    return min(eligible or priced, key=lambda m: m.price or 0)


def rank_groups(
    groups: list[OfferGroup],
    budget: int | None = None,
) -> list[OfferGroup]:
    """Order groups by distance to *budget*, then by price; unknown prices last."""

    def sort_key(group: OfferGroup) -> tuple[float, bool, int]:
        price = group.representative.price
        missing = price is None
        if budget:
            distance = (
                math.inf if price is None else float(abs(price - budget))
            )
        else:
            distance = 0.0
        return distance, missing, price or 0

    return sorted(groups, key=sort_key)


class OfferAggregator:
    """Coordinates marketplace clients, filtering, grouping and ranking."""

    def __init__(
        self,
        clients: list[BaseMarketplaceClient] | None = None,
        config: CatalogConfig | None = None,
        strategy: KeyStrategy | None = None,
    ) -> None:
        self.config = config or load_catalog_config()
        self.clients = build_clients() if clients is None else clients
        self.category_filter = CategoryFilter(self.config)
        self.strategy = strategy or TitleCanonicalizer(self.config)

    # ── Private helpers ──────────────────────────────────

    async def _run_clients(
        self,
        query: str,
    ) -> tuple[list[RawListing], list[SourceFailure]]:
        """Dispatch every client concurrently and wait for all of them.

        A failing client contributes no listings and one
        :class:`SourceFailure`; the others are unaffected.
        """
        tasks = [
            asyncio.to_thread(client.search, query)
            for client in self.clients
        ]
        batches = await asyncio.gather(*tasks, return_exceptions=True)

        listings: list[RawListing] = []
        failures: list[SourceFailure] = []
        for client, batch in zip(self.clients, batches):
            if isinstance(batch, list):
                listings.extend(batch)
                continue
            if not isinstance(batch, Exception):
                raise batch
            reason = (
                batch.reason
                if isinstance(batch, UpstreamError)
                else f"{type(batch).__name__}: {batch}"
            )
            failures.append(
                SourceFailure(source=client.source_name, reason=reason)
            )
            logger.error(
                "Source %s failed for query '%s': %s",
                client.source_name,
                query,
                reason,
                exc_info=batch,
            )

        return listings, failures

    def _build_groups(
        self,
        listings: list[RawListing],
        band: PriceBand,
    ) -> list[OfferGroup]:
        """Group *listings* and attach each group's representative."""
        return [
            OfferGroup(
                key=key,
                representative=select_representative(members, band),
                members=members,
            )
            for key, members in group_listings(
                listings, self.strategy
            ).items()
        ]

    # ── Public API ───────────────────────────────────────

    def close(self) -> None:
        """Close every client's HTTP session."""
        for client in self.clients:
            client.close()

    async def aggregate(
        self,
        query: str,
        budget: int | None = None,
    ) -> AggregationResult:
        """Search all marketplaces for *query* and return ranked offer groups.

        Raises:
            InvalidQueryError: *query* is blank or *budget* is negative.
            UpstreamError: every configured marketplace failed.
        """
        cleaned = " ".join((query or "").split())
        if not cleaned:
            raise InvalidQueryError("query is required")
        if budget is not None and budget < 0:
            raise InvalidQueryError("budget must be zero or positive")

        result = AggregationResult(query=cleaned)
        listings, result.failed_sources = await self._run_clients(
            cleaned
        )
        if self.clients and len(result.failed_sources) == len(
            self.clients
        ):
            reasons = "; ".join(
                f"{f.source}: {f.reason}" for f in result.failed_sources
            )
            raise UpstreamError("all", reasons)

        result.total_listings = len(listings)
        accepted, result.rejected_count = self.category_filter.filter(
            listings
        )

        result.band = compute_band(
            [
                listing.price
                for listing in accepted
                if listing.price is not None
            ],
            self.config.lower_quantile,
            self.config.upper_quantile,
        )

        groups = self._build_groups(accepted, result.band)
        result.group_count = len(groups)
        result.items = rank_groups(groups, budget)[
            : self.config.result_limit
        ]

        logger.info(
            "Query '%s' (budget=%s): %d listings, %d rejected, "
            "%d groups, %d returned, %d failed sources",
            cleaned,
            budget,
            result.total_listings,
            result.rejected_count,
            result.group_count,
            len(result.items),
            len(result.failed_sources),
        )
        return result
