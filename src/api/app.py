# src/api/app.py

"""HTTP surface for offer search: ``GET /api/search?q=&budget=``.

Run with ``uvicorn src.api.app:app``.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, status

from src.config.logging_config import setup_logging
from src.services.errors import InvalidQueryError, UpstreamError
from src.services.offer_aggregator import OfferAggregator, build_clients

logger = logging.getLogger("whisky_offers.api")


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Set up per-run logging when the API process starts."""
    log_file = setup_logging()
    logger.info("whisky_offers API starting, log file: %s", log_file)
    yield


def get_aggregator() -> Iterator[OfferAggregator]:
    """One aggregator per request; its client sessions close afterwards."""
    aggregator = OfferAggregator()
    try:
        yield aggregator
    finally:
        aggregator.close()


app = FastAPI(title="whisky_offers", version="0.1.0", lifespan=_lifespan)


@app.get("/health")
def healthcheck() -> dict[str, Any]:
    """Report which marketplaces have credentials configured."""
    clients = build_clients()
    try:
        sources = [
            {"id": client.source_name, "configured": bool(client.app_id)}
            for client in clients
        ]
    finally:
        for client in clients:
            client.close()
    configured = any(s["configured"] for s in sources)
    return {
        "status": "ok" if configured else "degraded",
        "sources": sources,
    }


@app.get("/api/search")
async def search_offers(
    q: str = Query(default="", description="Free-text search query"),
    budget: int | None = Query(
        default=None, ge=0, description="Target price in yen"
    ),
    aggregator: OfferAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    """Return ranked, de-duplicated offer groups for *q*."""
    try:
        result = await aggregator.aggregate(q, budget)
    except InvalidQueryError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except UpstreamError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"upstream marketplaces unavailable: {exc.reason}",
        ) from exc

    return result.to_dict()
