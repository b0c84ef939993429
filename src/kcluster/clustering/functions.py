"""Distance and aggregate functions for the k-means engine.

Point functions work on any numeric sequence (tuples, lists, arrays).
Series functions work on labeled indicator rows, one row per entity.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Sequence, Tuple

import numpy as np
import pandas as pd

from kcluster.clustering.errors import InvalidArgumentError

DistanceFn = Callable[[Any, Any], float]
AggregateFn = Callable[[Sequence[Any]], Any]


def euclidean(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two points."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


def sqeuclidean(a: Sequence[float], b: Sequence[float]) -> float:
    """Squared Euclidean distance between two points."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sum(diff * diff))


def manhattan(a: Sequence[float], b: Sequence[float]) -> float:
    """City-block distance between two points."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sum(np.abs(diff)))


def _stack(points: Iterable[Sequence[float]]) -> np.ndarray:
    stacked = np.asarray(list(points), dtype=np.float64)
    if stacked.size == 0:
        raise InvalidArgumentError("Cannot aggregate an empty collection")
    return stacked


def mean_point(points: Iterable[Sequence[float]]) -> Tuple[float, ...]:
    """Componentwise mean of a collection of points."""
    return tuple(float(v) for v in _stack(points).mean(axis=0))


def median_point(points: Iterable[Sequence[float]]) -> Tuple[float, ...]:
    """Componentwise median of a collection of points."""
    return tuple(float(v) for v in np.median(_stack(points), axis=0))


def series_distance(s1: pd.Series, s2: pd.Series) -> float:
    """Sum of squared differences between two indicator rows.

    Indicators missing from either row are skipped.
    """
    return float(((s1 - s2) ** 2).sum())


def series_mean(rows: Iterable[pd.Series]) -> pd.Series:
    """Mean of each indicator over a collection of rows."""
    rows = list(rows)
    if not rows:
        raise InvalidArgumentError("Cannot aggregate an empty collection")
    frame = pd.DataFrame(rows).reset_index(drop=True)
    return frame.mean()


DISTANCES: Dict[str, DistanceFn] = {
    "euclidean": euclidean,
    "sqeuclidean": sqeuclidean,
    "manhattan": manhattan,
    "series": series_distance,
}

AGGREGATES: Dict[str, AggregateFn] = {
    "mean": mean_point,
    "median": median_point,
    "series_mean": series_mean,
}


def get_distance(name: str) -> DistanceFn:
    """Look up a distance function by name."""
    try:
        return DISTANCES[name]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown distance {name!r}, expected one of: {', '.join(DISTANCES)}"
        ) from None


def get_aggregate(name: str) -> AggregateFn:
    """Look up an aggregate function by name."""
    try:
        return AGGREGATES[name]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown aggregate {name!r}, expected one of: {', '.join(AGGREGATES)}"
        ) from None
