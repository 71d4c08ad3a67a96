"""Lookups behind the detail views: game/player pickers, the over/under ladder,
one bet's bookmaker prices and a single line's price distributions."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .display import format_point
from .normalize import bet_key, filter_market_category
from .schemas import BetKey, PriceSummary, Quote
from .stats import summarize


@dataclass
class LadderRow:
    bookmaker: str
    over: Optional[float] = None
    under: Optional[float] = None


@dataclass
class LadderPoint:
    point: float
    point_display: str
    rows: List[LadderRow] = field(default_factory=list)


@dataclass
class PointDetail:
    over: List[Quote]
    under: List[Quote]
    over_summary: PriceSummary
    under_summary: PriceSummary


def game_options(quotes: Iterable[Quote]) -> List[str]:
    return sorted({q.game for q in quotes})


def player_options(quotes: Iterable[Quote], game: Optional[str] = None) -> List[str]:
    return sorted({q.player for q in quotes if game is None or q.game == game})


def game_player_map(quotes: Iterable[Quote]) -> Dict[str, List[str]]:
    mapping: Dict[str, set] = {}
    for q in quotes:
        mapping.setdefault(q.game, set()).add(q.player)
    return {game: sorted(players) for game, players in mapping.items()}


def over_under_ladder(quotes: Iterable[Quote]) -> List[LadderPoint]:
    """Per line, each bookmaker's over and under price side by side.

    Bookmakers are ordered by over price then under price, best first (a missing
    side counts as 0). Lines are ordered ascending. A later quote for the same
    bookmaker and side replaces an earlier one.
    """
    points: Dict[float, Dict[str, LadderRow]] = {}
    for q in quotes:
        if q.label not in ("over", "under"):
            continue
        books = points.setdefault(q.point, {})
        row = books.setdefault(q.bookmaker, LadderRow(bookmaker=q.bookmaker))
        setattr(row, q.label, q.price)

    ladder = []
    for point in sorted(points):
        rows = sorted(points[point].values(), key=lambda r: (-(r.over or 0), -(r.under or 0)))
        ladder.append(LadderPoint(point=point, point_display=format_point(point), rows=rows))
    return ladder


def bookmakers_for_bet(quotes: Iterable[Quote], key: BetKey) -> List[Tuple[str, float]]:
    return [(q.bookmaker, q.price) for q in quotes if bet_key(q) == key]


def point_detail(
    quotes: Iterable[Quote],
    game: str,
    player: str,
    category: str,
    point: float,
) -> Optional[PointDetail]:
    """Over and under prices for one player's line, best price first, with a
    distribution summary per side. None when nothing matches."""
    selected = [
        q for q in filter_market_category(quotes, category)
        if q.game == game and q.player == player and q.point == point
    ]
    if not selected:
        return None

    over = sorted((q for q in selected if q.label == "over"), key=lambda q: -q.price)
    under = sorted((q for q in selected if q.label == "under"), key=lambda q: -q.price)
    return PointDetail(
        over=over,
        under=under,
        over_summary=summarize(q.price for q in over),
        under_summary=summarize(q.price for q in under),
    )
