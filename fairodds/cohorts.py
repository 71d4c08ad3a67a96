from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

from .schemas import Quote

K = TypeVar("K", bound=Hashable)


def aggregate(quotes: Iterable[Quote], key_fn: Callable[[Quote], K]) -> Dict[K, List[Quote]]:
    """Group quotes by key. Groups and their members keep input order."""
    groups: Dict[K, List[Quote]] = {}
    for q in quotes:
        key = key_fn(q)
        if key not in groups:
            groups[key] = []
        groups[key].append(q)
    return groups


def qualifying_cohorts(groups: Dict[K, List[Quote]], min_size: int) -> Dict[K, List[Quote]]:
    """Drop thin cohorts; outlier flags on a handful of prices are noise."""
    return {key: group for key, group in groups.items() if len(group) >= min_size}
