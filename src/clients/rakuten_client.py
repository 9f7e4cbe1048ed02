# src/clients/rakuten_client.py

"""Client for the Rakuten Ichiba item search API."""

from typing import Any

from src.clients.base_client import BaseMarketplaceClient
from src.config.settings import Settings
from src.models.listing import RawListing


class RakutenClient(BaseMarketplaceClient):
    """Client for the Rakuten Ichiba item search API (cheapest first)."""

    SEARCH_API = (
        "https://app.rakuten.co.jp/services/api/"
        "IchibaItem/Search/20220601"
    )

    def __init__(self, app_id: str | None = None) -> None:
        super().__init__(
            "rakuten",
            Settings.RAKUTEN_APP_ID if app_id is None else app_id,
        )

    def _endpoint(self) -> str:
        return self.SEARCH_API

    def _build_params(self, query: str) -> dict[str, str]:
        return {
            "format": "json",
            "applicationId": self.app_id,
            "keyword": query,
            "hits": str(self.settings.RESULTS_PER_SOURCE),
            "imageFlag": "1",
            "sort": "+itemPrice",
        }

    def _extract_hits(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        # Each entry is wrapped as {"Item": {...}}
        wrapped: list[dict[str, Any]] = data.get("Items") or []
        return [w.get("Item") or {} for w in wrapped]

    @staticmethod
    def _first_image(hit: dict[str, Any]) -> str | None:
        """Prefer the medium image, then the small one."""
        for key in ("mediumImageUrls", "smallImageUrls"):
            images: list[dict[str, Any]] = hit.get(key) or []
            if images and images[0].get("imageUrl"):
                return str(images[0]["imageUrl"])
        return None

    def _parse_hit(self, hit: dict[str, Any]) -> RawListing | None:
        title = self.clean_text(hit.get("itemName"))
        url = str(hit.get("itemUrl") or "")
        if not title or not url:
            return None
        shop = self.clean_text(hit.get("shopName"))
        return RawListing(
            source="rakuten",
            external_id=str(hit.get("itemCode") or url),
            title=title,
            price=self.to_price(hit.get("itemPrice")),
            url=url,
            image=self._first_image(hit),
            seller_name=shop or None,
        )
