# src/clients/yahoo_client.py

"""Client for the Yahoo! Shopping (Japan) item search API."""

from typing import Any

from src.clients.base_client import BaseMarketplaceClient
from src.config.settings import Settings
from src.models.listing import RawListing


class YahooClient(BaseMarketplaceClient):
    """Client for the Yahoo! Shopping V3 item search API (cheapest first)."""

    SEARCH_API = (
        "https://shopping.yahooapis.jp/"
        "ShoppingWebService/V3/itemSearch"
    )

    def __init__(self, app_id: str | None = None) -> None:
        super().__init__(
            "yahoo",
            Settings.YAHOO_APP_ID if app_id is None else app_id,
        )

    def _endpoint(self) -> str:
        return self.SEARCH_API

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "appid": self.app_id,
            "query": query,
            "results": str(self.settings.RESULTS_PER_SOURCE),
            "sort": "+price",
        }

    def _extract_hits(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        hits: list[dict[str, Any]] = data.get("hits") or []
        return hits

    def _parse_hit(self, hit: dict[str, Any]) -> RawListing | None:
        title = self.clean_text(hit.get("name"))
        url = str(hit.get("url") or "")
        if not title or not url:
            return None

        # Yahoo reports a missing price as 0, so 0 never counts as a price
        price = self.to_price(hit.get("price")) or None
        if price is None:
            label: dict[str, Any] = hit.get("priceLabel") or {}
            price = self.to_price(label.get("defaultPrice")) or None

        image: dict[str, Any] = hit.get("image") or {}
        seller: dict[str, Any] = hit.get("seller") or {}
        seller_name = self.clean_text(seller.get("name"))

        return RawListing(
            source="yahoo",
            external_id=str(hit.get("code") or url),
            title=title,
            price=price,
            url=url,
            image=image.get("medium") or image.get("small") or None,
            seller_name=seller_name or None,
        )
