# src/filters/price_band.py

"""Quantile price band used to keep outliers out of "cheapest" selection."""

import logging
import math
from collections.abc import Iterable

from src.models.offer_group import PriceBand

logger = logging.getLogger("whisky_offers.filters")


def _quantile_index(count: int, quantile: float) -> int:
    """Index of the element at *quantile*, clamped to the list bounds."""
    index = math.floor((count - 1) * quantile)
    return max(0, min(count - 1, index))


def compute_band(
    prices: Iterable[int],
    lower_quantile: float = 0.05,
    upper_quantile: float = 0.95,
) -> PriceBand:
    """Return the ``[low, high]`` band at the given quantiles.

    Bounds are always elements of *prices* (no interpolation).  An empty
    input yields :meth:`PriceBand.unbounded`.
    """
    ordered = sorted(prices)
    if not ordered:
        logger.debug("No prices available, price band is unbounded")
        return PriceBand.unbounded()

    count = len(ordered)
    band = PriceBand(
        low=ordered[_quantile_index(count, lower_quantile)],
        high=ordered[_quantile_index(count, upper_quantile)],
    )
    logger.debug(
        "Price band over %d prices: %s..%s", count, band.low, band.high
    )
    return band
