"""Dataset sources and result presentation helpers.

The engine only sees an ordered list of inputs. These helpers turn
tabular data into such a list and pair the resulting assignment back
with row keys.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Hashable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from kcluster.clustering.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

SAMPLE_POINTS: List[Tuple[float, float]] = [
    (0.0, 1.0), (1.0, 1.0),
    (10.0, 1.0), (13.0, 3.0),
    (4.0, 10.0), (5.0, 8.0),
]


def sample_points() -> List[Tuple[float, float]]:
    """Six 2D points forming three visually separate groups."""
    return list(SAMPLE_POINTS)


def frame_rows(frame: pd.DataFrame) -> List[pd.Series]:
    """Rows of a frame as a list of Series, one input per row."""
    return [row for _, row in frame.iterrows()]


def load_dataset(
    path: Union[str, Path],
    columns: Optional[Sequence[str]] = None,
    index_col: Optional[str] = None,
    as_series: bool = False,
) -> Tuple[List[Hashable], List[Any]]:
    """Read a CSV file into row keys and clustering inputs.

    Args:
        path: CSV file path
        columns: Numeric columns to use (default: all numeric columns)
        index_col: Column holding row keys (default: positional index)
        as_series: Return rows as Series instead of float tuples

    Returns:
        Tuple of (row keys, inputs)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    frame = pd.read_csv(path, index_col=index_col)

    if columns is not None:
        missing = [c for c in columns if c not in frame.columns]
        if missing:
            raise InvalidArgumentError(f"Columns not found in {path.name}: {missing}")
        frame = frame[list(columns)]
    else:
        frame = frame.select_dtypes(include="number")

    if frame.empty:
        raise InvalidArgumentError(f"No numeric rows in {path}")

    frame = frame.astype(float)
    n_missing = int(frame.isna().any(axis=1).sum())
    if n_missing:
        logger.warning(f"Dropping {n_missing} rows with missing values from {path.name}")
        frame = frame.dropna()

    logger.info(f"Loaded {len(frame)} rows x {frame.shape[1]} columns from {path}")

    keys = list(frame.index)
    if as_series:
        return keys, frame_rows(frame)
    return keys, [tuple(row) for row in frame.itertuples(index=False, name=None)]


def label_clusters(keys: Sequence[Hashable], assignment: Sequence[int]) -> pd.Series:
    """Pair each row key with its cluster index."""
    if len(keys) != len(assignment):
        raise InvalidArgumentError(
            f"Got {len(keys)} keys for an assignment of length {len(assignment)}"
        )
    return pd.Series([int(c) for c in assignment], index=list(keys), name="cluster")


def group_members(
    dataset: Sequence[Any],
    assignment: Sequence[int],
    n_clusters: int,
) -> List[List[Any]]:
    """Members of every cluster index, in dataset order."""
    groups: List[List[Any]] = [[] for _ in range(n_clusters)]
    for item, cluster in zip(dataset, assignment):
        groups[int(cluster)].append(item)
    return groups
