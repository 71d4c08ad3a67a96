import logging
import math
from typing import Iterable, List, Mapping, Optional

from .cohorts import aggregate, qualifying_cohorts
from .config import settings
from .normalize import bet_key
from .schemas import BetKey, Quote, ValueBetResult
from .stats import mean_and_std

logger = logging.getLogger(__name__)

_ROUNDED_FIELDS = (
    "max_price", "mean_price", "threshold", "above_threshold",
    "consensus_prob", "implied_prob", "prob_diff",
)


def _best_price(group: List[Quote]) -> Quote:
    # Highest price; equal prices go to the alphabetically first bookmaker so the
    # result does not depend on the order rows arrived in
    return min(group, key=lambda q: (-q.price, q.bookmaker))


def analyze_cohort(
    key: BetKey, group: List[Quote], min_sample_size: Optional[int] = None
) -> Optional[ValueBetResult]:
    """Apply the value-bet rule to one cohort.

    Flags the cohort when its best price sits strictly above mean + 1 sample std.
    Returns None for thin cohorts and for cohorts where nothing stands out.
    Values are left unrounded so ranking sees full precision.
    """
    if min_sample_size is None:
        min_sample_size = settings.MIN_SAMPLE_SIZE
    if len(group) < min_sample_size:
        return None

    mean, std = mean_and_std([q.price for q in group])
    threshold = mean + std
    best = _best_price(group)
    if best.price <= threshold:
        return None

    consensus_prob = 100 / mean
    implied_prob = 100 / best.price
    return ValueBetResult(
        key=key,
        max_price=best.price,
        bookmaker=best.bookmaker,
        mean_price=mean,
        threshold=threshold,
        sample_size=len(group),
        above_threshold=best.price - threshold,
        consensus_prob=consensus_prob,
        implied_prob=implied_prob,
        prob_diff=implied_prob - consensus_prob,
    )


def rank_value_bets(results: Iterable[ValueBetResult], limit: Optional[int] = None) -> List[ValueBetResult]:
    """Most negative prob_diff first, then higher consensus_prob, then key text."""
    if limit is None:
        limit = settings.TOP_BETS_LIMIT
    ordered = sorted(results, key=lambda r: (r.prob_diff, -r.consensus_prob, r.key.text))
    return ordered[:limit]


def round_result(result: ValueBetResult) -> ValueBetResult:
    return result.model_copy(update={f: round(getattr(result, f), 2) for f in _ROUNDED_FIELDS})


def find_value_bets(
    quotes: Iterable[Quote],
    min_sample_size: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[ValueBetResult]:
    """Scan every bet cohort and return the top value bets, numbers rounded to 2 decimals."""
    if min_sample_size is None:
        min_sample_size = settings.MIN_SAMPLE_SIZE
    cohorts = qualifying_cohorts(aggregate(quotes, bet_key), min_sample_size)

    flagged = []
    for key, group in cohorts.items():
        result = analyze_cohort(key, group, min_sample_size)
        if result is not None:
            flagged.append(result)

    logger.info(f"{len(flagged)} of {len(cohorts)} qualifying cohorts flagged as value bets")
    return [round_result(r) for r in rank_value_bets(flagged, limit)]


# --- PRECOMPUTED SUMMARY TABLE ---

def _number(row: Mapping, column: str) -> float:
    value = float(row[column])
    if not math.isfinite(value):
        raise ValueError(f"{column} is not finite")
    return value


def coerce_precomputed(rows: Iterable[Mapping], limit: Optional[int] = None) -> List[ValueBetResult]:
    """Turn rows of a precomputed top-bets table into ValueBetResult records.

    The key comes from the ``Bet`` column, or ``key`` when ``Bet`` is absent.
    Rows whose key or statistics cannot be read are skipped. Table order is kept.
    """
    results = []
    skipped = 0
    for row in rows:
        raw_key = row.get("Bet")
        if raw_key is None or (isinstance(raw_key, float) and math.isnan(raw_key)):
            raw_key = row.get("key")
        try:
            result = ValueBetResult(
                key=BetKey.parse(raw_key),
                max_price=_number(row, "max_price"),
                bookmaker=str(row["bookmaker"]),
                mean_price=_number(row, "mean_price"),
                threshold=_number(row, "threshold"),
                sample_size=int(_number(row, "sample_size")),
                above_threshold=_number(row, "above_threshold"),
                consensus_prob=_number(row, "consensus_prob"),
                implied_prob=_number(row, "implied_prob"),
                prob_diff=_number(row, "prob_diff"),
            )
        except (KeyError, TypeError, ValueError) as e:
            skipped += 1
            logger.debug(f"Skipping precomputed row {raw_key!r}: {e}")
            continue
        results.append(round_result(result))

    if skipped:
        logger.warning(f"Skipped {skipped} unreadable rows in precomputed top bets")
    if limit is None:
        limit = settings.TOP_BETS_LIMIT
    return results[:limit]
