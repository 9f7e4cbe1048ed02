# tests/test_api.py

"""Tests for the HTTP search endpoint."""

import dataclasses
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from src.api.app import app, get_aggregator
from src.config.catalog import CatalogConfig
from src.models.listing import RawListing
from src.services.errors import UpstreamError
from src.services.offer_aggregator import OfferAggregator


class _StaticClient:
    """Stub marketplace client with fixed listings."""

    def __init__(self, source_name: str, listings: list[RawListing]) -> None:
        self.source_name = source_name
        self.app_id = "x"
        self._listings = listings
        self.closed = False

    def search(self, query: str) -> list[RawListing]:
        return list(self._listings)

    def close(self) -> None:
        self.closed = True


class _FailingClient:
    """Stub marketplace client that always fails."""

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.app_id = "x"
        self.closed = False

    def search(self, query: str) -> list[RawListing]:
        raise UpstreamError(self.source_name, "HTTP 500")

    def close(self) -> None:
        self.closed = True


def _listing(title: str, price: int | None, source: str) -> RawListing:
    return RawListing(
        source=source,
        external_id=f"{source}-{price}",
        title=title,
        price=price,
        url=f"https://{source}.example.com/{price}",
    )


class TestSearchEndpoint(unittest.TestCase):
    """GET /api/search behaviour."""

    def _use(self, *clients: object) -> None:
        config = dataclasses.replace(
            CatalogConfig.from_settings(), bypass_filter=False
        )
        app.dependency_overrides[get_aggregator] = lambda: OfferAggregator(
            clients=list(clients),  # type: ignore[arg-type]
            config=config,
        )
        self.addCleanup(app.dependency_overrides.clear)

    def setUp(self) -> None:
        patcher = patch("src.api.app.setup_logging")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.http = TestClient(app)

    def test_returns_grouped_items(self) -> None:
        self._use(
            _StaticClient(
                "rakuten",
                [_listing("【限定】サントリー ウイスキー 700ml 40%", 4000, "rakuten")],
            ),
            _StaticClient(
                "yahoo",
                [_listing("サントリー ウイスキー 700ml 40度", 9000, "yahoo")],
            ),
        )
        resp = self.http.get("/api/search", params={"q": "サントリー"})

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["query"], "サントリー")
        self.assertEqual(len(body["items"]), 1)
        item = body["items"][0]
        self.assertEqual(item["cheapest"]["price"], 4000)
        self.assertEqual(len(item["offers"]), 2)
        self.assertEqual(body["failed_sources"], [])

    def test_budget_passed_through(self) -> None:
        self._use(
            _StaticClient(
                "rakuten",
                [
                    _listing("Alpha whisky", 3000, "rakuten"),
                    _listing("Bravo whisky", 8000, "rakuten"),
                    _listing("Charlie whisky", 12000, "rakuten"),
                ],
            )
        )
        resp = self.http.get(
            "/api/search", params={"q": "whisky", "budget": 8000}
        )
        prices = [i["cheapest"]["price"] for i in resp.json()["items"]]
        self.assertEqual(prices, [8000, 12000, 3000])

    def test_empty_query_is_bad_request(self) -> None:
        self._use(_StaticClient("rakuten", []))
        resp = self.http.get("/api/search", params={"q": "  "})
        self.assertEqual(resp.status_code, 400)

    def test_missing_query_is_bad_request(self) -> None:
        self._use(_StaticClient("rakuten", []))
        self.assertEqual(self.http.get("/api/search").status_code, 400)

    def test_negative_budget_rejected(self) -> None:
        self._use(_StaticClient("rakuten", []))
        resp = self.http.get(
            "/api/search", params={"q": "whisky", "budget": -1}
        )
        self.assertEqual(resp.status_code, 422)

    def test_partial_failure_still_succeeds(self) -> None:
        self._use(
            _StaticClient(
                "rakuten", [_listing("Hibiki whisky", 9000, "rakuten")]
            ),
            _FailingClient("yahoo"),
        )
        resp = self.http.get("/api/search", params={"q": "hibiki"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body["items"]), 1)
        self.assertEqual(
            body["failed_sources"],
            [{"source": "yahoo", "reason": "HTTP 500"}],
        )

    def test_all_sources_failed_is_bad_gateway(self) -> None:
        self._use(_FailingClient("rakuten"), _FailingClient("yahoo"))
        resp = self.http.get("/api/search", params={"q": "hibiki"})
        self.assertEqual(resp.status_code, 502)


class TestAggregatorDependency(unittest.TestCase):
    """The default per-request aggregator releases its client sessions."""

    def setUp(self) -> None:
        patcher = patch("src.api.app.setup_logging")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.clients = [
            _StaticClient(
                "rakuten", [_listing("Hibiki whisky", 9000, "rakuten")]
            ),
            _FailingClient("yahoo"),
        ]
        build_patcher = patch(
            "src.services.offer_aggregator.build_clients",
            return_value=self.clients,
        )
        build_patcher.start()
        self.addCleanup(build_patcher.stop)

    def test_sessions_closed_after_success(self) -> None:
        resp = TestClient(app).get("/api/search", params={"q": "hibiki"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(all(c.closed for c in self.clients))

    def test_sessions_closed_after_bad_request(self) -> None:
        resp = TestClient(app).get("/api/search", params={"q": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(all(c.closed for c in self.clients))


class TestHealthEndpoint(unittest.TestCase):
    """GET /health behaviour."""

    @patch("src.api.app.build_clients")
    def test_reports_configured_sources(self, mock_build: object) -> None:
        mock_build.return_value = [  # type: ignore[attr-defined]
            _StaticClient("rakuten", []),
            _FailingClient("yahoo"),
        ]
        with patch("src.api.app.setup_logging"):
            resp = TestClient(app).get("/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(
            [s["id"] for s in body["sources"]], ["rakuten", "yahoo"]
        )
        self.assertTrue(
            all(c.closed for c in mock_build.return_value)  # type: ignore[attr-defined]
        )


if __name__ == "__main__":
    unittest.main()
