# src/services/health_checker.py

"""Credential and connectivity probes for the configured marketplaces."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.services.offer_aggregator import load_client_class

logger = logging.getLogger("whisky_offers.health")

# A query every whisky marketplace should answer
PROBE_QUERY = "ウイスキー"


@dataclass
class HealthResult:
    """Outcome of probing one marketplace."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float = 0.0
    message: str = ""

    @property
    def is_down(self) -> bool:
        return self.status == "down"


def _classify(latency_ms: float) -> str:
    return "slow" if latency_ms > Settings.SLOW_SOURCE_MS else "ok"


def probe_source(source: dict[str, str]) -> HealthResult:
    """Run one live search against *source*.

    Missing credentials short-circuit to ``down`` without touching the
    network.  The probe never raises.
    """
    source_id = source["id"]
    try:
        client = load_client_class(source["client"])()
    except Exception as exc:
        return HealthResult(
            source_id, "down", message=f"Failed to load client: {exc}"
        )

    if not client.app_id:
        client.close()
        return HealthResult(
            source_id, "down", message="Application id is not configured"
        )

    started = time.monotonic()
    try:
        listings = client.search(PROBE_QUERY)
        latency_ms = (time.monotonic() - started) * 1000
    except Exception as exc:
        return HealthResult(
            source_id,
            "down",
            latency_ms=(time.monotonic() - started) * 1000,
            message=str(exc)[:80],
        )
    finally:
        client.close()

    status = _classify(latency_ms)
    note = f"{len(listings)} listings"
    if status == "slow":
        note += ", high latency"
    return HealthResult(source_id, status, latency_ms, note)


class HealthChecker:
    """Probes every configured marketplace concurrently."""

    def __init__(
        self, sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.sources = (
            Settings.AVAILABLE_SOURCES if sources is None else sources
        )

    async def check_all(self) -> list[HealthResult]:
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(probe_source, source)
                    for source in self.sources
                )
            )
        )
        for result in results:
            log = logger.warning if result.is_down else logger.info
            log(
                "Health %s: %s %.0fms (%s)",
                result.source_id,
                result.status,
                result.latency_ms,
                result.message,
            )
        return results
