import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError

from .config import settings
from .schemas import BetKey, LineKey, Quote

logger = logging.getLogger(__name__)

# Market codes grouped into the categories the detail views filter on
MARKET_CATEGORIES: Dict[str, List[str]] = {
    "points": ["player_points", "player_points_alternate"],
    "rebounds": ["player_rebounds", "player_rebounds_alternate"],
    "assists": ["player_assists", "player_assists_alternate"],
}

RawRows = Union[pd.DataFrame, Iterable[Mapping]]


def iter_records(rows: RawRows) -> Iterable[Mapping]:
    if isinstance(rows, pd.DataFrame):
        # NaN cells stay NaN; the schema rejects them
        return rows.to_dict(orient="records")
    return rows


def normalize_rows(rows: RawRows) -> List[Quote]:
    """Validate raw rows into Quote records.

    Rows with a missing field, a non-numeric line or a non-positive price are
    dropped; they only show up as a smaller sample downstream.
    """
    quotes = []
    dropped = 0
    for row in iter_records(rows):
        try:
            quotes.append(Quote.model_validate(row))
        except ValidationError as e:
            dropped += 1
            logger.debug(f"Dropping malformed row {dict(row)!r}: {e.error_count()} error(s)")
    if dropped:
        logger.debug(f"Normalized {len(quotes)} quotes, dropped {dropped} malformed rows")
    return quotes


def bet_key(quote: Quote) -> BetKey:
    return BetKey(quote.player, quote.label, quote.market, quote.point)


def line_key(quote: Quote) -> LineKey:
    return LineKey(quote.game, quote.player, quote.market, quote.point)


def filter_bookmakers(quotes: Iterable[Quote], allowed: Optional[Iterable[str]] = None) -> List[Quote]:
    """Keep quotes whose bookmaker is on the allow-list (the configured local books by default)."""
    if allowed is None:
        allowed = settings.LOCAL_BOOKMAKERS
    allowed = set(allowed)
    return [q for q in quotes if q.bookmaker in allowed]


def filter_market_category(quotes: Iterable[Quote], category: str) -> List[Quote]:
    markets = MARKET_CATEGORIES.get(category)
    if not markets:
        return []
    return [q for q in quotes if q.market in markets]
