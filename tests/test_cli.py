#!/usr/bin/env python3
"""Tests for the command-line interface."""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import importlib
import json

import pandas as pd
import pytest
import yaml

kmeans_module = importlib.import_module("kcluster.clustering.kmeans")
from kcluster.cli import EXIT_ERROR, EXIT_NOT_CONVERGED, EXIT_OK, KClusterCLI


@pytest.fixture
def points_csv(tmp_path: Path) -> Path:
    frame = pd.DataFrame({
        "name": ["p0", "p1", "p2", "p3", "p4", "p5"],
        "x": [0.0, 1.0, 10.0, 13.0, 4.0, 5.0],
        "y": [1.0, 1.0, 1.0, 3.0, 10.0, 8.0],
    })
    path = tmp_path / "points.csv"
    frame.to_csv(path, index=False)
    return path


class TestRunCommand:
    """kcluster run."""

    def test_run_writes_result(self, points_csv, tmp_path, capsys):
        output = tmp_path / "result.json"
        code = KClusterCLI().run([
            "run", "--input", str(points_csv), "--index-col", "name",
            "-k", "3", "--seed", "0", "--output", str(output),
        ])

        assert code == EXIT_OK
        data = json.loads(output.read_text())
        assert len(data["labels"]) == 6
        assert all(0 <= c < 3 for c in data["labels"])
        assert data["seed"] == 0
        assert "p5" in capsys.readouterr().out

    def test_run_with_config_file(self, points_csv, tmp_path):
        config_path = tmp_path / "run.yaml"
        config_path.write_text(yaml.safe_dump({
            "clustering": {"n_clusters": 2, "seed": 3, "distance": "manhattan"},
            "data": {"path": str(points_csv), "columns": ["x", "y"]},
        }))
        output = tmp_path / "result.json"

        code = KClusterCLI().run(["run", "--config", str(config_path), "--output", str(output)])

        assert code == EXIT_OK
        data = json.loads(output.read_text())
        assert data["n_clusters"] == 2
        assert data["parameters"]["distance"] == "manhattan"

    def test_run_as_series(self, points_csv, tmp_path):
        output = tmp_path / "result.json"
        code = KClusterCLI().run([
            "run", "--input", str(points_csv), "--index-col", "name", "--as-series",
            "--distance", "series", "--aggregate", "series_mean",
            "-k", "2", "--seed", "1", "--output", str(output),
        ])

        assert code == EXIT_OK
        centroid = json.loads(output.read_text())["centroids"][0]
        assert set(centroid) == {"x", "y"}

    def test_run_without_input(self):
        assert KClusterCLI().run(["run"]) == EXIT_ERROR

    def test_run_missing_file(self, tmp_path):
        assert KClusterCLI().run(["run", "--input", str(tmp_path / "none.csv")]) == EXIT_ERROR

    def test_run_invalid_cluster_count(self, points_csv):
        assert KClusterCLI().run(["run", "--input", str(points_csv), "-k", "0"]) == EXIT_ERROR

    def test_run_series_distance_needs_series_rows(self, points_csv, tmp_path):
        output = tmp_path / "result.json"
        code = KClusterCLI().run([
            "run", "--input", str(points_csv), "--index-col", "name",
            "--distance", "series", "--aggregate", "series_mean",
            "-k", "2", "--seed", "0", "--output", str(output),
        ])

        assert code == EXIT_ERROR
        assert not output.exists()

    def test_run_unreadable_input(self, tmp_path):
        # A directory passes the existence check but read_csv raises IsADirectoryError
        assert KClusterCLI().run(["run", "--input", str(tmp_path)]) == EXIT_ERROR

    def test_run_not_converged_writes_last_result(self, points_csv, tmp_path, monkeypatch, capsys):
        # Starting at p0 and p1 moves p1 into cluster 0 in the first round
        monkeypatch.setattr(
            kmeans_module, "initialize_centroids",
            lambda dataset, cluster_count, rng: [dataset[0], dataset[1]],
        )
        output = tmp_path / "result.json"

        code = KClusterCLI().run([
            "run", "--input", str(points_csv), "--index-col", "name",
            "-k", "2", "--seed", "0", "--max-iter", "1", "--json-logs",
            "--output", str(output),
        ])

        assert code == EXIT_NOT_CONVERGED
        data = json.loads(output.read_text())
        assert data["converged"] is False
        assert data["n_iter"] == 1
        assert data["parameters"]["max_iter"] == 1
        assert data["labels"] == [0, 0, 1, 1, 1, 1]

        records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]
        assert any(r["level"] == "ERROR" and "did not converge" in r["message"] for r in records)


class TestSampleCommand:
    """kcluster sample."""

    def test_sample(self, capsys):
        code = KClusterCLI().run(["sample", "-k", "3", "--seed", "1"])

        assert code == EXIT_OK
        out = capsys.readouterr().out
        assert "Cluster 0:" in out
        assert "Converged after" in out

    def test_sample_not_converged(self, monkeypatch):
        monkeypatch.setattr(
            kmeans_module, "initialize_centroids",
            lambda dataset, cluster_count, rng: [dataset[0], dataset[1]],
        )
        assert KClusterCLI().run(["sample", "-k", "2", "--max-iter", "1"]) == EXIT_NOT_CONVERGED

    def test_no_command_prints_help(self, capsys):
        assert KClusterCLI().run([]) == EXIT_ERROR
        assert "usage" in capsys.readouterr().out
