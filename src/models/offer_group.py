# src/models/offer_group.py

"""Grouped offers and the price band used to pick their representative."""

from dataclasses import dataclass, field
from typing import Any

from src.models.listing import RawListing


@dataclass(frozen=True)
class PriceBand:
    """Inclusive ``[low, high]`` price bounds; both ``None`` when unbounded."""

    low: int | None
    high: int | None

    @classmethod
    def unbounded(cls) -> "PriceBand":
        """A band that trims nothing (no prices were available)."""
        return cls(low=None, high=None)

    @property
    def is_bounded(self) -> bool:
        return self.low is not None and self.high is not None

    def contains(self, price: int) -> bool:
        """Return True when *price* is inside the band."""
        if self.low is not None and price < self.low:
            return False
        if self.high is not None and price > self.high:
            return False
        return True


@dataclass
class OfferGroup:
    """Listings believed to be the same product, with one representative."""

    key: str
    representative: RawListing
    members: list[RawListing] = field(
        default_factory=lambda: list[RawListing]()
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise as ``{key, cheapest, offers}``."""
        return {
            "key": self.key,
            "cheapest": self.representative.to_dict(),
            "offers": [m.to_dict() for m in self.members],
        }
