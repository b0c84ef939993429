"""Clustering interface with strategy pattern.

This module provides the result container and the abstract
clusterer that concrete algorithms plug into, with JSON export
for an audit trail of every run.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from kcluster.clustering.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class EmptyClusterPolicy(str, Enum):
    """What to do when a cluster loses all of its members."""

    RESEED = "reseed"
    KEEP = "keep"
    RAISE = "raise"

    @classmethod
    def coerce(cls, value: Union[str, "EmptyClusterPolicy"]) -> "EmptyClusterPolicy":
        """Convert a policy name to the enum, rejecting unknown names."""
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise InvalidArgumentError(
                f"Unknown empty cluster policy {value!r}, expected one of: {choices}"
            ) from None


def _to_serializable(value: Any) -> Any:
    """Convert centroid values (tuples, arrays, Series) to JSON types."""
    if isinstance(value, pd.Series):
        return {str(k): _to_serializable(v) for k, v in value.items()}
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return value.item()
    if isinstance(value, dict):
        return {str(k): _to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_serializable(v) for v in value]
    return value


@dataclass
class ClusteringResult:
    """Result of a clustering run with full provenance.

    Attributes:
        labels: Cluster index for each input, positionally aligned with the dataset
        centroids: Final centroid of each cluster (length n_clusters)
        n_clusters: Requested number of clusters
        n_iter: Number of update rounds performed
        converged: Whether two consecutive assignments were identical
        parameters: Dictionary of clustering parameters used
        empty_cluster_events: Clusters that emptied during updates
        seed: Random seed used for initialization (None if a generator was injected)
    """
    labels: NDArray[np.int32]
    centroids: List[Any]
    n_clusters: int
    n_iter: int
    converged: bool
    parameters: Dict[str, Any]
    empty_cluster_events: List[Dict[str, Any]] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def assignment(self) -> List[int]:
        """Labels as a plain list of ints."""
        return [int(label) for label in self.labels]

    def cluster_sizes(self) -> List[int]:
        """Number of members per cluster index."""
        return np.bincount(self.labels, minlength=self.n_clusters).tolist()

    def to_json(self, path: Optional[Union[str, Path]] = None) -> str:
        """Export result to JSON for audit trail.

        Args:
            path: Optional path to save JSON file

        Returns:
            JSON string representation
        """
        data = {
            "labels": self.labels.tolist(),
            "centroids": _to_serializable(self.centroids),
            "n_clusters": int(self.n_clusters),
            "n_iter": int(self.n_iter),
            "converged": bool(self.converged),
            "parameters": _to_serializable(self.parameters),
            "empty_cluster_events": self.empty_cluster_events,
            "seed": int(self.seed) if self.seed is not None else None,
        }

        json_str = json.dumps(data, indent=2)

        if path is not None:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json_str)
            logger.info(f"Saved clustering result to {path}")

        return json_str

    @classmethod
    def from_json(cls, json_str: Union[str, Path]) -> ClusteringResult:
        """Load result from JSON.

        Centroids come back as plain JSON values (lists or dicts).

        Args:
            json_str: JSON string or path to JSON file

        Returns:
            ClusteringResult instance
        """
        if isinstance(json_str, Path):
            json_str = json_str.read_text()
        elif not json_str.lstrip().startswith("{"):
            json_str = Path(json_str).read_text()

        data = json.loads(json_str)

        return cls(
            labels=np.array(data["labels"], dtype=np.int32),
            centroids=data["centroids"],
            n_clusters=data["n_clusters"],
            n_iter=data["n_iter"],
            converged=data["converged"],
            parameters=data["parameters"],
            empty_cluster_events=data.get("empty_cluster_events", []),
            seed=data.get("seed"),
        )


class Clusterer(ABC):
    """Abstract base class for clustering algorithms.

    Concrete strategies implement a single fit over a fixed dataset
    and the assignment of new inputs to fitted centroids.
    """

    def __init__(
        self,
        n_clusters: int = 3,
        seed: Optional[int] = 42,
        max_iter: int = 300,
        empty_cluster_policy: Union[str, EmptyClusterPolicy] = EmptyClusterPolicy.RESEED,
    ):
        """Initialize clusterer.

        Args:
            n_clusters: Number of clusters to form
            seed: Random seed for reproducibility (None draws a fresh one per fit)
            max_iter: Maximum update rounds before giving up
            empty_cluster_policy: How to treat clusters that lose all members
        """
        self.n_clusters = n_clusters
        self.seed = seed
        self.max_iter = max_iter
        self.empty_cluster_policy = EmptyClusterPolicy.coerce(empty_cluster_policy)
        self.fitted_ = False
        self.result_: Optional[ClusteringResult] = None

        logger.info(
            f"Initialized {self.__class__.__name__} with "
            f"k={n_clusters}, seed={seed}, max_iter={max_iter}, "
            f"empty_cluster_policy={self.empty_cluster_policy.value}"
        )

    @abstractmethod
    def _fit_dataset(self, dataset: List[Any]) -> ClusteringResult:
        """Run the algorithm on a dataset snapshot."""

    @abstractmethod
    def _assign(self, centroids: Sequence[Any], dataset: Sequence[Any]) -> List[int]:
        """Assign each input to one of the given centroids."""

    def fit(self, dataset: Sequence[Any]) -> ClusteringResult:
        """Fit the clusterer on a dataset.

        Args:
            dataset: Ordered, non-empty sequence of inputs

        Returns:
            ClusteringResult with full provenance

        Raises:
            InvalidArgumentError: If the dataset or parameters are invalid
            DidNotConvergeError: If assignments do not stabilize within max_iter
        """
        dataset = list(dataset)

        logger.info(f"Fitting {self.__class__.__name__} on {len(dataset)} inputs")

        self.result_ = self._fit_dataset(dataset)
        self.fitted_ = True

        logger.info(
            f"Clustering complete: {self.result_.n_clusters} clusters in "
            f"{self.result_.n_iter} iterations, sizes={self.result_.cluster_sizes()}"
        )

        return self.result_

    def predict(self, dataset: Sequence[Any]) -> NDArray[np.int32]:
        """Assign new inputs to the fitted centroids.

        Args:
            dataset: Sequence of inputs

        Returns:
            Cluster labels
        """
        if not self.fitted_:
            raise RuntimeError("Clusterer must be fitted before prediction")

        labels = self._assign(self.result_.centroids, list(dataset))
        return np.array(labels, dtype=np.int32)

    def fit_predict(self, dataset: Sequence[Any]) -> NDArray[np.int32]:
        """Fit on a dataset and return its labels."""
        return self.fit(dataset).labels
