"""Generic K-Means clustering with strategy pattern.

This module provides reproducible clustering over arbitrary inputs,
driven by caller-supplied distance and aggregate functions.
"""

from __future__ import annotations

from kcluster.clustering.errors import (
    DidNotConvergeError,
    EmptyClusterError,
    InvalidArgumentError,
)
from kcluster.clustering.functions import get_aggregate, get_distance
from kcluster.clustering.interface import (
    Clusterer,
    ClusteringResult,
    EmptyClusterPolicy,
)
from kcluster.clustering.kmeans import KMeansClusterer, assign, closest, kmeans, run_kmeans

__all__ = [
    "Clusterer",
    "ClusteringResult",
    "EmptyClusterPolicy",
    "KMeansClusterer",
    "kmeans",
    "run_kmeans",
    "assign",
    "closest",
    "get_distance",
    "get_aggregate",
    "InvalidArgumentError",
    "EmptyClusterError",
    "DidNotConvergeError",
]
