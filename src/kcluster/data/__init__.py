"""Data sources and presentation helpers."""

from __future__ import annotations

from kcluster.data.loader import (
    frame_rows,
    group_members,
    label_clusters,
    load_dataset,
    sample_points,
)

__all__ = [
    "sample_points",
    "load_dataset",
    "frame_rows",
    "label_clusters",
    "group_members",
]
