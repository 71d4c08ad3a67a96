"""Human-friendly text for points, market codes and bet keys."""

import re

# Prop categories shown in place of raw market codes, checked in this order
_CATEGORY_WORDS = ("points", "rebounds", "assists")


def format_point(point_value) -> str:
    """Render a line without a trailing ``.0`` (``25.0`` -> ``"25"``, ``25.5`` -> ``"25.5"``)."""
    try:
        as_float = float(point_value)
    except (TypeError, ValueError):
        return str(point_value)
    if as_float != as_float or as_float in (float("inf"), float("-inf")):
        return str(point_value)
    if as_float.is_integer():
        return str(int(as_float))
    return str(as_float)


def format_market(market_value) -> str:
    """``player_points_alternate`` -> ``Player Points Alternate``."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), str(market_value).replace("_", " "))


def market_title(market_value) -> str:
    lowered = str(market_value).lower()
    for word in _CATEGORY_WORDS:
        if word in lowered:
            return word.capitalize()
    return format_market(market_value)


def format_bet(key) -> str:
    """One-line label for a value-bet key, e.g. ``Nikola Jokic | Points | OVER | 25.5``."""
    return f"{key.player} | {market_title(key.market)} | {key.label.upper()} | {format_point(key.point)}"
