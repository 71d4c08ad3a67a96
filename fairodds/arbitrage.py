import logging
from typing import Iterable, List

from .cohorts import aggregate
from .display import format_market, format_point
from .normalize import line_key
from .schemas import ArbitragePair, Quote

logger = logging.getLogger(__name__)


def is_two_way_arb(price_over: float, price_under: float) -> tuple[bool, float]:
    """Whether the pair covers both outcomes for less than 100% implied probability.

    Returns (is_arb, implied_total).
    """
    implied_total = 1 / price_over + 1 / price_under
    return implied_total < 1.0, implied_total


def find_arbitrage_pairs(quotes: Iterable[Quote]) -> List[ArbitragePair]:
    """Every over/under combination on the same line priced under 100% in total.

    Full cross product per line rather than best-of-each, because the bettor may not
    have an account with every bookmaker. Sorted by edge, largest first, never capped.
    """
    sided = [q for q in quotes if q.label in ("over", "under")]
    if not sided:
        return []

    results = []
    for key, group in aggregate(sided, line_key).items():
        overs = [q for q in group if q.label == "over"]
        unders = [q for q in group if q.label == "under"]
        if not overs or not unders:
            continue

        for over in overs:
            for under in unders:
                is_arb, implied_total = is_two_way_arb(over.price, under.price)
                if not is_arb:
                    continue
                edge = 1.0 - implied_total
                results.append(ArbitragePair(
                    game=key.game,
                    player=key.player,
                    market=key.market,
                    market_display=format_market(key.market),
                    point=key.point,
                    point_display=format_point(key.point),
                    over_bookmaker=over.bookmaker,
                    over_price=round(over.price, 2),
                    under_bookmaker=under.bookmaker,
                    under_price=round(under.price, 2),
                    implied_total_pct=round(implied_total * 100, 2),
                    edge_pct=round(edge * 100, 2),
                ))

    results.sort(key=lambda r: r.edge_pct, reverse=True)
    logger.info(f"Found {len(results)} arbitrage pairs")
    return results
