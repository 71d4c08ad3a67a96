"""Consensus statistics over a set of decimal prices."""

import math
from collections import Counter
from typing import Iterable, List, Tuple

import numpy as np

from .schemas import PriceSummary


def _valid_prices(prices: Iterable) -> List[float]:
    """Finite, positive prices only; anything else is not a usable decimal price."""
    valid = []
    for p in prices:
        if p is None or isinstance(p, bool):
            continue
        try:
            value = float(p)
        except (TypeError, ValueError):
            continue
        if math.isfinite(value) and value > 0:
            valid.append(value)
    return valid


def mean_and_std(prices: List[float]) -> Tuple[float, float]:
    """Mean and sample standard deviation (n - 1). A single price has std 0."""
    arr = np.asarray(prices, dtype=float)
    mean = float(arr.mean())
    std = float(arr.std(ddof=1)) if arr.size > 1 else 0.0
    return mean, std


def summarize(prices: Iterable) -> PriceSummary:
    """count/mean/std/min/max plus a histogram keyed by the price to 2 decimals.

    None, NaN, non-positive and non-numeric entries are ignored; nothing valid
    gives count=0.
    """
    valid = _valid_prices(prices)
    if not valid:
        return PriceSummary()

    mean, std = mean_and_std(valid)
    counts = Counter(f"{p:.2f}" for p in valid)
    histogram = {key: counts[key] for key in sorted(counts, key=float)}

    return PriceSummary(
        count=len(valid),
        mean=mean,
        std=std,
        min=min(valid),
        max=max(valid),
        histogram=histogram,
    )
