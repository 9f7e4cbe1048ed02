# src/models/listing.py

"""Raw marketplace listing model for inter-module data flow."""

from dataclasses import dataclass, field
from typing import Any

from src.filters.title_parser import parse_abv, parse_volume


@dataclass(frozen=True)
class RawListing:
    """A single search hit from one marketplace, as returned upstream.

    ``volume_ml`` and ``abv_percent`` are parsed from the title once at
    construction and are ``None`` when the title does not state them.
    """

    source: str
    external_id: str
    title: str
    price: int | None = None
    url: str | None = None
    image: str | None = None
    seller_name: str | None = None
    volume_ml: int | None = field(init=False, default=None)
    abv_percent: int | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "volume_ml", parse_volume(self.title))
        object.__setattr__(self, "abv_percent", parse_abv(self.title))

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-ready dict."""
        return {
            "source": self.source,
            "external_id": self.external_id,
            "title": self.title,
            "price": self.price,
            "url": self.url,
            "image": self.image,
            "seller_name": self.seller_name,
            "volume_ml": self.volume_ml,
            "abv_percent": self.abv_percent,
        }
