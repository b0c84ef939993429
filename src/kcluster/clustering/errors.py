"""Exceptions raised by the clustering engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from kcluster.clustering.interface import ClusteringResult


class InvalidArgumentError(ValueError):
    """Raised before any iteration when the run is not well defined."""


class EmptyClusterError(RuntimeError):
    """Raised under the ``raise`` policy when a cluster loses all members.

    Attributes:
        cluster: Index of the cluster that emptied
        iteration: Update round in which it happened
    """

    def __init__(self, cluster: int, iteration: int):
        super().__init__(
            f"Cluster {cluster} has no members after update round {iteration}"
        )
        self.cluster = cluster
        self.iteration = iteration


class DidNotConvergeError(RuntimeError):
    """Raised when assignments keep changing after ``max_iter`` update rounds.

    The last assignment and centroids are available on ``result``.
    """

    def __init__(self, max_iter: int, result: Optional[ClusteringResult] = None):
        super().__init__(f"K-means did not converge within {max_iter} iterations")
        self.max_iter = max_iter
        self.result = result
