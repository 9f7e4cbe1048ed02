# src/clients/base_client.py

"""Abstract base class for all marketplace search API clients."""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.listing import RawListing
from src.services.errors import UpstreamError


class BaseMarketplaceClient(ABC):
    """Turns a free-text query into a flat list of :class:`RawListing`.

    Subclasses describe the endpoint, its query parameters and how a
    single hit maps onto a listing; the HTTP exchange and error mapping
    live here.  Any failure is raised as :class:`UpstreamError`; the
    aggregator decides what a failed source means for the request.
    """

    def __init__(self, source_name: str, app_id: str) -> None:
        self.source_name = source_name
        self.app_id = app_id
        self.logger = logging.getLogger(
            f"whisky_offers.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def _fetch_json(
        self,
        url: str,
        params: dict[str, str],
    ) -> dict[str, Any]:
        """GET *url* once and decode the JSON body.

        Raises :class:`UpstreamError` on transport errors, non-200
        responses or bodies that are not a JSON object.
        """
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            raise UpstreamError(
                self.source_name, f"request failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            self.logger.warning(
                "[%s] HTTP %d", self.source_name, resp.status_code
            )
            raise UpstreamError(
                self.source_name, f"HTTP {resp.status_code}"
            )

        try:
            data = json.loads(resp.text)
        except ValueError as exc:
            raise UpstreamError(
                self.source_name, "malformed JSON response"
            ) from exc
        if not isinstance(data, dict):
            raise UpstreamError(
                self.source_name, "unexpected response shape"
            )
        return data

    @staticmethod
    def clean_text(raw: Any) -> str:
        """Strip markup and entities from *raw* and collapse whitespace."""
        if raw is None:
            return ""
        text = str(raw)
        if "<" in text or "&" in text:
            text = BeautifulSoup(text, "lxml").get_text(" ")
        return re.sub(r"\s+", " ", text).strip()

    @staticmethod
    def to_price(value: Any) -> int | None:
        """Parse a yen price field; unknown or negative prices become None."""
        if value is None or isinstance(value, bool):
            return None
        try:
            price = int(float(str(value).replace(",", "")))
        except (ValueError, OverflowError):
            return None
        return price if price >= 0 else None

    def search(self, query: str) -> list[RawListing]:
        """Search this marketplace and return listings in upstream order."""
        if not self.app_id:
            raise UpstreamError(
                self.source_name, "application id is not configured"
            )

        data = self._fetch_json(
            self._endpoint(), self._build_params(query)
        )

        listings: list[RawListing] = []
        skipped = 0
        for hit in self._extract_hits(data):
            listing = self._parse_hit(hit)
            if listing is None:
                skipped += 1
                continue
            listings.append(listing)

        self.logger.info(
            "[%s] '%s' returned %d listings (%d skipped)",
            self.source_name,
            query,
            len(listings),
            skipped,
        )
        return listings

    @abstractmethod
    def _endpoint(self) -> str:
        """Return the search API URL."""
        ...

    @abstractmethod
    def _build_params(self, query: str) -> dict[str, str]:
        """Return the query-string parameters for *query*."""
        ...

    @abstractmethod
    def _extract_hits(self, data: dict[str, Any]) -> list[dict[str, Any]]:
        """Return the list of raw hit objects from a decoded response."""
        ...

    @abstractmethod
    def _parse_hit(self, hit: dict[str, Any]) -> RawListing | None:
        """Map one hit to a listing, or None when title or URL is missing."""
        ...
