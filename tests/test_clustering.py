#!/usr/bin/env python3
"""Tests for the clusterer strategy and result serialization.

Tests verify:
1. KMeansClusterer fit / predict / fit_predict
2. Initial centroids and config-driven construction
3. JSON export of results
"""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import json

import numpy as np
import pandas as pd
import pytest

from kcluster.clustering import (
    ClusteringResult,
    DidNotConvergeError,
    EmptyClusterPolicy,
    InvalidArgumentError,
    KMeansClusterer,
    assign,
)
from kcluster.clustering.functions import euclidean, manhattan, mean_point
from kcluster.config import ClusteringConfig


class TestKMeansClusterer:
    """Test the object API over the engine."""

    def test_fit_with_initial_centroids(self, points):
        clusterer = KMeansClusterer(n_clusters=3)
        clusterer.set_initial_centroids([(0.0, 1.0), (10.0, 1.0), (4.0, 10.0)])
        result = clusterer.fit(points)

        assert result.assignment == [0, 0, 1, 1, 2, 2]
        assert result.parameters["init"] == "provided"
        assert result.parameters["distance"] == "euclidean"
        assert result.parameters["aggregate"] == "mean_point"
        assert clusterer.fitted_

    def test_clear_initial_centroids(self, points):
        clusterer = KMeansClusterer(n_clusters=2, seed=1)
        clusterer.set_initial_centroids([(0.0, 1.0), (10.0, 1.0)])
        clusterer.set_initial_centroids(None)

        result = clusterer.fit(points)
        assert result.parameters["init"] == "sampled"
        assert result.seed == 1

    def test_predict_uses_fitted_centroids(self, points):
        clusterer = KMeansClusterer(n_clusters=3)
        clusterer.set_initial_centroids([(0.0, 1.0), (10.0, 1.0), (4.0, 10.0)])
        clusterer.fit(points)

        labels = clusterer.predict([(0.2, 0.8), (12.0, 2.0), (4.0, 9.0)])

        assert labels.dtype == np.int32
        assert labels.tolist() == [0, 1, 2]

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError):
            KMeansClusterer().predict([(0.0, 0.0)])

    def test_fit_predict_is_fixed_point(self, points):
        """Re-assigning against the final centroids reproduces the labels."""
        clusterer = KMeansClusterer(n_clusters=2, seed=7)
        labels = clusterer.fit_predict(points)

        assert assign(euclidean, clusterer.result_.centroids, points) == labels.tolist()

    def test_callable_functions(self, points):
        clusterer = KMeansClusterer(distance=manhattan, aggregate=mean_point, n_clusters=2, seed=0)
        result = clusterer.fit(points)

        assert result.parameters["distance"] == "manhattan"
        assert len(result.labels) == len(points)

    def test_unknown_function_name(self):
        with pytest.raises(InvalidArgumentError):
            KMeansClusterer(distance="cosine")
        with pytest.raises(InvalidArgumentError):
            KMeansClusterer(aggregate="mode")

    def test_policy_coerced(self):
        clusterer = KMeansClusterer(empty_cluster_policy="keep")
        assert clusterer.empty_cluster_policy is EmptyClusterPolicy.KEEP

    def test_from_config(self, points):
        config = ClusteringConfig(n_clusters=2, seed=5, max_iter=50, empty_cluster_policy="raise")
        clusterer = KMeansClusterer.from_config(config)

        assert clusterer.n_clusters == 2
        assert clusterer.max_iter == 50
        assert clusterer.empty_cluster_policy is EmptyClusterPolicy.RAISE
        assert clusterer.distance is euclidean

    def test_non_convergence_propagates(self):
        clusterer = KMeansClusterer(
            distance=lambda a, b: abs(a - b),
            aggregate=lambda items: 10.0 - sum(items) / len(items),
            n_clusters=2,
            max_iter=3,
        )
        clusterer.set_initial_centroids([0.0, 10.0])

        with pytest.raises(DidNotConvergeError):
            clusterer.fit([0.0, 10.0])
        assert not clusterer.fitted_


class TestSerialization:
    """Test JSON export of results."""

    def _fit(self, points) -> ClusteringResult:
        clusterer = KMeansClusterer(n_clusters=3, seed=11)
        clusterer.set_initial_centroids([(0.0, 1.0), (10.0, 1.0), (4.0, 10.0)])
        return clusterer.fit(points)

    def test_json_roundtrip(self, points, tmp_path):
        result1 = self._fit(points)

        path = tmp_path / "out" / "result.json"
        result1.to_json(path)
        result2 = ClusteringResult.from_json(path)

        assert np.array_equal(result1.labels, result2.labels)
        assert result2.centroids == [[0.5, 1.0], [11.5, 2.0], [4.5, 9.0]]
        assert result2.n_iter == result1.n_iter
        assert result2.converged
        assert result2.seed == 11

    def test_from_json_string(self, points):
        result = ClusteringResult.from_json(self._fit(points).to_json())
        assert result.assignment == [0, 0, 1, 1, 2, 2]

    def test_json_content(self, points):
        data = json.loads(self._fit(points).to_json())

        for key in ["labels", "centroids", "n_clusters", "n_iter", "converged",
                    "parameters", "empty_cluster_events", "seed"]:
            assert key in data
        assert data["parameters"]["algorithm"] == "kmeans"
        assert data["parameters"]["empty_cluster_policy"] == "reseed"

    def test_series_centroids(self):
        result = ClusteringResult(
            labels=np.array([0, 0], dtype=np.int32),
            centroids=[pd.Series({"gdp": np.float64(1.5), "life": 70.0})],
            n_clusters=1,
            n_iter=1,
            converged=True,
            parameters={"n_clusters": np.int64(1)},
        )

        data = json.loads(result.to_json())

        assert data["centroids"] == [{"gdp": 1.5, "life": 70.0}]
        assert data["parameters"]["n_clusters"] == 1
        assert data["seed"] is None
