import math
from typing import Optional

from .schemas import StakeSolution


def _positive(value) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


def solve_stakes(price_over, price_under, target_payout) -> Optional[StakeSolution]:
    """Split stakes so whichever side wins pays back ``target_payout`` gross.

    Returns None when the target or either price is missing or not positive.

    The pair must already satisfy the arbitrage condition (1/over + 1/under < 1);
    that is not re-checked here, and without it total_profit comes out negative.

    return_over / return_under are each side's net win on its own stake.
    total_profit assumes the under side wins and nets off both stakes.
    """
    if not (_positive(price_over) and _positive(price_under) and _positive(target_payout)):
        return None

    price_over, price_under, target_payout = float(price_over), float(price_under), float(target_payout)

    stake_over = target_payout / price_over
    stake_under = target_payout / price_under
    return_over = price_over * stake_over - stake_over
    return_under = price_under * stake_under - stake_under
    total_profit = price_under * stake_under - (stake_over + stake_under)

    return StakeSolution(
        stake_over=round(stake_over, 2),
        stake_under=round(stake_under, 2),
        return_over=round(return_over, 2),
        return_under=round(return_under, 2),
        total_profit=round(total_profit, 2),
    )
