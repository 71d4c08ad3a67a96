import math
from typing import Dict, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .display import format_point


class BetKey(NamedTuple):
    """Identifies one specific bet: every bookmaker quoting it forms a value-bet cohort."""
    player: str
    label: str
    market: str
    point: float

    @property
    def text(self) -> str:
        # Legacy "player_label_market_point" form used by precomputed tables and CLI arguments
        return f"{self.player}_{self.label}_{self.market}_{format_point(self.point)}"

    @classmethod
    def parse(cls, text: str) -> "BetKey":
        """Read the legacy underscore-joined key back.

        The market code may itself contain underscores, so player and label are taken
        from the front, the point from the back and the market is whatever is left.
        Raises ValueError when the text cannot be split that way.
        """
        parts = str(text).split("_")
        if len(parts) < 4:
            raise ValueError(f"Bet key needs at least 4 segments: {text!r}")
        point = float(parts[-1])
        if not math.isfinite(point):
            raise ValueError(f"Bet key has a non-finite point: {text!r}")
        return cls(
            player=parts[0],
            label=parts[1].strip().lower(),
            market="_".join(parts[2:-1]),
            point=point,
        )


class LineKey(NamedTuple):
    """Identifies one line regardless of side, so overs and unders can be paired."""
    game: str
    player: str
    market: str
    point: float


class Quote(BaseModel):
    # Identity
    home_team: str
    away_team: str
    player: str = Field(alias="description")

    # Market
    market: str
    point: float
    label: str

    # Price
    bookmaker: str
    price: float

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("home_team", "away_team", "player", "market", "label", "bookmaker")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("label")
    @classmethod
    def _lower_label(cls, v: str) -> str:
        return v.lower()

    @field_validator("point")
    @classmethod
    def _finite_point(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("point must be finite")
        return v

    @field_validator("price")
    @classmethod
    def _positive_price(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("price must be a positive decimal")
        return v

    @computed_field
    @property
    def game(self) -> str:
        return f"{self.home_team} vs {self.away_team}"

    @property
    def implied_prob(self) -> float:
        return 1.0 / self.price


class ValueBetResult(BaseModel):
    key: BetKey
    max_price: float
    bookmaker: str
    mean_price: float
    threshold: float
    sample_size: int
    above_threshold: float
    consensus_prob: float
    implied_prob: float
    prob_diff: float

    model_config = ConfigDict(frozen=True)

    @property
    def bet(self) -> str:
        return self.key.text


class ArbitragePair(BaseModel):
    game: str
    player: str
    market: str
    market_display: str
    point: float
    point_display: str

    over_bookmaker: str
    over_price: float
    under_bookmaker: str
    under_price: float

    implied_total_pct: float
    edge_pct: float

    model_config = ConfigDict(frozen=True)


class StakeSolution(BaseModel):
    stake_over: float
    stake_under: float
    return_over: float
    return_under: float
    total_profit: float

    model_config = ConfigDict(frozen=True)


class PriceSummary(BaseModel):
    count: int = 0
    mean: Optional[float] = None
    std: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    # price formatted to 2 decimals -> occurrences
    histogram: Dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
