"""kcluster: generic K-Means clustering.

Clusters arbitrary inputs given:
- a distance function between a centroid and an input
- an aggregate function computing a centroid from inputs
- a target number of clusters
"""

from __future__ import annotations

__version__ = "0.1.0"

# Public API exports
from kcluster.clustering import (
    ClusteringResult,
    DidNotConvergeError,
    EmptyClusterError,
    EmptyClusterPolicy,
    InvalidArgumentError,
    KMeansClusterer,
    kmeans,
    run_kmeans,
)
from kcluster.utils import resolve_rng, setup_logger

__all__ = [
    # Version info
    "__version__",
    # Clustering
    "kmeans",
    "run_kmeans",
    "KMeansClusterer",
    "ClusteringResult",
    "EmptyClusterPolicy",
    # Errors
    "InvalidArgumentError",
    "EmptyClusterError",
    "DidNotConvergeError",
    # Utils
    "resolve_rng",
    "setup_logger",
]
