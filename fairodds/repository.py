import logging
import threading
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional

from .arbitrage import find_arbitrage_pairs
from .config import Settings, settings as default_settings
from .normalize import RawRows, filter_bookmakers, iter_records, normalize_rows
from .schemas import ArbitragePair, Quote, ValueBetResult
from .sources import DataSourceError, load_csv
from .value import coerce_precomputed, find_value_bets

logger = logging.getLogger(__name__)


class QuoteRepository:
    """Owns the normalized quote set for the lifetime of the process.

    The first read loads and normalizes raw rows; later reads reuse them until
    invalidate() is called. Loading is serialized by its own lock, so concurrent
    first reads trigger a single load while cached reads never wait on it.
    Everything derived from the quotes is computed fresh by the pure engine
    functions, except the top-bets list which is cached alongside the quotes.
    Results computed across an invalidate() are returned but not cached.
    """

    def __init__(
        self,
        raw_loader: Callable[[], RawRows],
        top_bets_loader: Optional[Callable[[], RawRows]] = None,
        local_bookmakers: Optional[Iterable[str]] = None,
        min_sample_size: Optional[int] = None,
        top_bets_limit: Optional[int] = None,
    ):
        self.raw_loader = raw_loader
        self.top_bets_loader = top_bets_loader
        self.local_bookmakers = list(local_bookmakers) if local_bookmakers is not None else None
        self.min_sample_size = min_sample_size if min_sample_size is not None else default_settings.MIN_SAMPLE_SIZE
        self.top_bets_limit = top_bets_limit if top_bets_limit is not None else default_settings.TOP_BETS_LIMIT

        # _lock guards the cached state below; _load_lock serializes raw loads
        self._lock = threading.Lock()
        self._load_lock = threading.Lock()
        self._generation = 0
        self._quotes: Optional[List[Quote]] = None
        self._top_bets: Dict[bool, List[ValueBetResult]] = {}

    @classmethod
    def from_settings(cls, config: Settings = None) -> "QuoteRepository":
        config = config or default_settings
        top_bets_loader = partial(load_csv, config.TOP_BETS_PATH) if config.TOP_BETS_PATH else None
        return cls(
            raw_loader=partial(load_csv, config.RAW_DATA_PATH),
            top_bets_loader=top_bets_loader,
            local_bookmakers=config.LOCAL_BOOKMAKERS,
            min_sample_size=config.MIN_SAMPLE_SIZE,
            top_bets_limit=config.TOP_BETS_LIMIT,
        )

    def invalidate(self) -> None:
        with self._lock:
            self._quotes = None
            self._top_bets = {}
            self._generation += 1
        logger.info("Quote cache cleared")

    def quotes(self, local_only: bool = False) -> List[Quote]:
        with self._lock:
            quotes = self._quotes
        if quotes is None:
            quotes = self._load_quotes()
        if local_only:
            return filter_bookmakers(quotes, self.local_bookmakers)
        return list(quotes)

    def top_bets(self, local_only: bool = False) -> List[ValueBetResult]:
        """Top value bets, from the precomputed table when one is readable.

        The precomputed table covers every bookmaker, so the local-only view is
        always derived from the filtered raw quotes instead.
        """
        with self._lock:
            cached = self._top_bets.get(local_only)
            generation = self._generation
        if cached is not None:
            return list(cached)

        results = None
        if not local_only:
            results = self._load_precomputed()
        if results is None:
            results = find_value_bets(
                self.quotes(local_only=local_only),
                min_sample_size=self.min_sample_size,
                limit=self.top_bets_limit,
            )

        with self._lock:
            # An invalidate() during the computation makes these results stale
            if self._generation == generation:
                self._top_bets[local_only] = results
        return list(results)

    def arbitrage_pairs(self, local_only: bool = False) -> List[ArbitragePair]:
        return find_arbitrage_pairs(self.quotes(local_only=local_only))

    def _load_quotes(self) -> List[Quote]:
        with self._load_lock:
            with self._lock:
                if self._quotes is not None:
                    return self._quotes
                generation = self._generation

            quotes = normalize_rows(self.raw_loader())
            logger.info(f"Loaded {len(quotes)} normalized quotes")

            with self._lock:
                if self._generation == generation:
                    self._quotes = quotes
            return quotes

    def _load_precomputed(self) -> Optional[List[ValueBetResult]]:
        if self.top_bets_loader is None:
            return None
        try:
            rows = iter_records(self.top_bets_loader())
        except DataSourceError as e:
            logger.warning(f"Precomputed top bets unavailable, computing from raw quotes: {e}")
            return None

        results = coerce_precomputed(rows, limit=self.top_bets_limit)
        if not results:
            logger.warning("Precomputed top bets table is empty, computing from raw quotes")
            return None
        return results
