"""Generic K-Means clustering.

Implements K-Means over arbitrary inputs with:
- caller-supplied distance and aggregate functions
- centroids seeded by sampling inputs with replacement
- lowest-index tie-break when assigning inputs
- explicit empty-cluster policy and iteration cap
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from kcluster.clustering.errors import (
    DidNotConvergeError,
    EmptyClusterError,
    InvalidArgumentError,
)
from kcluster.clustering.functions import (
    AggregateFn,
    DistanceFn,
    get_aggregate,
    get_distance,
)
from kcluster.clustering.interface import (
    Clusterer,
    ClusteringResult,
    EmptyClusterPolicy,
)
from kcluster.utils.seed import RandomSource, draw_index, resolve_rng

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 300


def _check_arguments(cluster_count: Any, dataset: Sequence[Any], max_iter: Any) -> None:
    if (
        isinstance(cluster_count, bool)
        or not isinstance(cluster_count, (int, np.integer))
        or cluster_count <= 0
    ):
        raise InvalidArgumentError(
            f"cluster_count must be a positive integer, got {cluster_count!r}"
        )
    if len(dataset) == 0:
        raise InvalidArgumentError("dataset must contain at least one input")
    if isinstance(max_iter, bool) or not isinstance(max_iter, (int, np.integer)) or max_iter < 1:
        raise InvalidArgumentError(f"max_iter must be a positive integer, got {max_iter!r}")


def _name_of(fn: Any) -> str:
    return getattr(fn, "__name__", repr(fn))


def initialize_centroids(
    dataset: Sequence[Any],
    cluster_count: int,
    rng: RandomSource,
) -> List[Any]:
    """Pick ``cluster_count`` inputs uniformly at random, with replacement.

    Two clusters may start at the same input.
    """
    n = len(dataset)
    return [dataset[draw_index(rng, n)] for _ in range(cluster_count)]


def closest(distance: DistanceFn, centroids: Sequence[Any], item: Any) -> int:
    """Index of the centroid nearest to ``item``.

    Ties go to the lowest index.
    """
    return min(range(len(centroids)), key=lambda i: distance(centroids[i], item))


def assign(
    distance: DistanceFn,
    centroids: Sequence[Any],
    dataset: Sequence[Any],
) -> List[int]:
    """Nearest-centroid index for every input."""
    return [closest(distance, centroids, item) for item in dataset]


def members(assignment: Sequence[int], dataset: Sequence[Any], cluster: int) -> List[Any]:
    """Inputs assigned to ``cluster``, in dataset order."""
    return [item for c, item in zip(assignment, dataset) if c == cluster]


def update_centroids(
    aggregate: AggregateFn,
    assignment: Sequence[int],
    dataset: Sequence[Any],
    previous: Sequence[Any],
    rng: RandomSource,
    policy: EmptyClusterPolicy = EmptyClusterPolicy.RESEED,
    iteration: int = 0,
) -> Tuple[List[Any], List[Dict[str, Any]]]:
    """Recompute every centroid from the current assignment.

    Args:
        aggregate: Function computing a centroid from a non-empty collection
        assignment: Current cluster index of each input
        dataset: Inputs
        previous: Centroids the assignment was computed against
        rng: Random source used to re-seed empty clusters
        policy: Empty-cluster policy
        iteration: Update round, recorded in events

    Returns:
        Tuple of (new centroids, empty-cluster events)

    Raises:
        EmptyClusterError: If a cluster is empty and policy is ``raise``
    """
    centroids = []
    events = []

    for cluster in range(len(previous)):
        items = members(assignment, dataset, cluster)
        if items:
            centroids.append(aggregate(items))
            continue

        if policy is EmptyClusterPolicy.RAISE:
            raise EmptyClusterError(cluster, iteration)

        if policy is EmptyClusterPolicy.RESEED:
            index = draw_index(rng, len(dataset))
            centroids.append(dataset[index])
            event = {"iteration": iteration, "cluster": cluster, "action": "reseed", "index": index}
        else:
            centroids.append(previous[cluster])
            event = {"iteration": iteration, "cluster": cluster, "action": "keep"}

        events.append(event)
        logger.warning(
            f"Cluster {cluster} emptied in iteration {iteration}, applied policy '{policy.value}'"
        )

    return centroids, events


def run_kmeans(
    distance: DistanceFn,
    aggregate: AggregateFn,
    cluster_count: int,
    dataset: Sequence[Any],
    *,
    rng: Union[None, int, RandomSource] = None,
    max_iter: int = DEFAULT_MAX_ITER,
    empty_cluster_policy: Union[str, EmptyClusterPolicy] = EmptyClusterPolicy.RESEED,
    initial_centroids: Optional[Sequence[Any]] = None,
) -> ClusteringResult:
    """Run K-Means until two consecutive assignments are identical.

    Args:
        distance: Dissimilarity between a centroid and an input
        aggregate: Centroid of a non-empty collection of inputs
        cluster_count: Number of clusters
        dataset: Ordered, non-empty sequence of inputs (not modified)
        rng: Seed or random source for centroid seeding
        max_iter: Maximum number of update rounds
        empty_cluster_policy: ``reseed``, ``keep`` or ``raise``
        initial_centroids: Optional starting centroids instead of sampling

    Returns:
        ClusteringResult of the converged run

    Raises:
        InvalidArgumentError: On an empty dataset or invalid parameters
        EmptyClusterError: If a cluster empties under the ``raise`` policy
        DidNotConvergeError: If max_iter rounds pass without convergence
    """
    dataset = list(dataset)
    _check_arguments(cluster_count, dataset, max_iter)
    policy = EmptyClusterPolicy.coerce(empty_cluster_policy)
    rng, seed = resolve_rng(rng)

    if initial_centroids is None:
        centroids = initialize_centroids(dataset, cluster_count, rng)
    else:
        centroids = list(initial_centroids)
        if len(centroids) != cluster_count:
            raise InvalidArgumentError(
                f"Expected {cluster_count} initial centroids, got {len(centroids)}"
            )

    parameters = {
        "algorithm": "kmeans",
        "n_clusters": int(cluster_count),
        "max_iter": int(max_iter),
        "empty_cluster_policy": policy.value,
        "distance": _name_of(distance),
        "aggregate": _name_of(aggregate),
        "init": "sampled" if initial_centroids is None else "provided",
    }

    assignment = assign(distance, centroids, dataset)
    events: List[Dict[str, Any]] = []

    logger.debug(f"Initial assignment over {len(dataset)} inputs, k={cluster_count}")

    for iteration in range(1, max_iter + 1):
        centroids, emptied = update_centroids(
            aggregate, assignment, dataset, centroids, rng, policy, iteration
        )
        events.extend(emptied)
        next_assignment = assign(distance, centroids, dataset)

        changed = sum(a != b for a, b in zip(assignment, next_assignment))
        logger.debug(f"  iteration {iteration}: {changed} assignments changed")

        if next_assignment == assignment:
            logger.info(f"K-means converged after {iteration} iterations")
            return _make_result(next_assignment, centroids, cluster_count, iteration,
                                True, parameters, events, seed)

        assignment = next_assignment

    result = _make_result(assignment, centroids, cluster_count, max_iter,
                          False, parameters, events, seed)
    logger.warning(f"K-means did not converge within {max_iter} iterations")
    raise DidNotConvergeError(max_iter, result)


def _make_result(
    assignment: List[int],
    centroids: List[Any],
    cluster_count: int,
    n_iter: int,
    converged: bool,
    parameters: Dict[str, Any],
    events: List[Dict[str, Any]],
    seed: Optional[int],
) -> ClusteringResult:
    return ClusteringResult(
        labels=np.array(assignment, dtype=np.int32),
        centroids=centroids,
        n_clusters=int(cluster_count),
        n_iter=n_iter,
        converged=converged,
        parameters=dict(parameters),
        empty_cluster_events=list(events),
        seed=seed,
    )


def kmeans(
    distance: DistanceFn,
    aggregate: AggregateFn,
    cluster_count: int,
    dataset: Sequence[Any],
    *,
    rng: Union[None, int, RandomSource] = None,
    max_iter: int = DEFAULT_MAX_ITER,
    empty_cluster_policy: Union[str, EmptyClusterPolicy] = EmptyClusterPolicy.RESEED,
) -> List[int]:
    """Cluster ``dataset`` and return the cluster index of each input."""
    return run_kmeans(
        distance,
        aggregate,
        cluster_count,
        dataset,
        rng=rng,
        max_iter=max_iter,
        empty_cluster_policy=empty_cluster_policy,
    ).assignment


class KMeansClusterer(Clusterer):
    """K-Means strategy over caller-supplied distance and aggregate.

    Functions may be given as callables or by registered name
    (see ``kcluster.clustering.functions``).
    """

    def __init__(
        self,
        distance: Union[str, DistanceFn] = "euclidean",
        aggregate: Union[str, AggregateFn] = "mean",
        n_clusters: int = 3,
        seed: Union[None, int, RandomSource] = 42,
        max_iter: int = DEFAULT_MAX_ITER,
        empty_cluster_policy: Union[str, EmptyClusterPolicy] = EmptyClusterPolicy.RESEED,
    ):
        """Initialize K-Means clusterer.

        Args:
            distance: Distance function or its registered name
            aggregate: Aggregate function or its registered name
            n_clusters: Number of clusters
            seed: Seed or random source for centroid seeding
            max_iter: Maximum update rounds
            empty_cluster_policy: ``reseed``, ``keep`` or ``raise``
        """
        super().__init__(n_clusters, seed, max_iter, empty_cluster_policy)
        self.distance = get_distance(distance) if isinstance(distance, str) else distance
        self.aggregate = get_aggregate(aggregate) if isinstance(aggregate, str) else aggregate

        self.initial_centroids_: Optional[List[Any]] = None

    @classmethod
    def from_config(
        cls,
        config: Any,
        distance: Optional[DistanceFn] = None,
        aggregate: Optional[AggregateFn] = None,
    ) -> KMeansClusterer:
        """Build from a ``ClusteringConfig``; explicit functions override named ones."""
        return cls(
            distance=distance or config.distance,
            aggregate=aggregate or config.aggregate,
            n_clusters=config.n_clusters,
            seed=config.seed,
            max_iter=config.max_iter,
            empty_cluster_policy=config.empty_cluster_policy,
        )

    def _fit_dataset(self, dataset: List[Any]) -> ClusteringResult:
        return run_kmeans(
            self.distance,
            self.aggregate,
            self.n_clusters,
            dataset,
            rng=self.seed,
            max_iter=self.max_iter,
            empty_cluster_policy=self.empty_cluster_policy,
            initial_centroids=self.initial_centroids_,
        )

    def _assign(self, centroids: Sequence[Any], dataset: Sequence[Any]) -> List[int]:
        return assign(self.distance, centroids, dataset)

    def set_initial_centroids(self, centroids: Optional[Sequence[Any]]) -> None:
        """Set starting centroids used instead of random sampling.

        Args:
            centroids: Initial centroids (length n_clusters) or None
        """
        if centroids is not None:
            self.initial_centroids_ = list(centroids)
            logger.info(f"Set {len(self.initial_centroids_)} initial centroids")
        else:
            self.initial_centroids_ = None
            logger.info("Cleared initial centroids")
