#!/usr/bin/env python3
"""Command-line interface for kcluster.

Provides commands to cluster tabular data from a CSV file and to
run the built-in 2D sample, with configuration-based runs.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from kcluster.clustering import (
    DidNotConvergeError,
    EmptyClusterPolicy,
    InvalidArgumentError,
    KMeansClusterer,
)
from kcluster.clustering.functions import AGGREGATES, DISTANCES
from kcluster.config import Config, default_config, load_config
from kcluster.data import group_members, label_clusters, load_dataset, sample_points
from kcluster.utils import setup_logger

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_CONVERGED = 2


class KClusterCLI:
    """Main CLI for kcluster."""

    def __init__(self):
        """Initialize CLI."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with subcommands."""
        parser = argparse.ArgumentParser(
            prog="kcluster",
            description="Generic K-Means clustering",
        )

        subparsers = parser.add_subparsers(
            dest="command",
            help="Available commands",
        )

        run_parser = subparsers.add_parser(
            "run",
            help="Cluster the rows of a CSV file",
        )
        run_parser.add_argument(
            "--config",
            type=str,
            help="Path to run config (e.g., conf/base.yaml)",
        )
        run_parser.add_argument(
            "--input",
            type=str,
            help="CSV file to cluster (overrides data.path)",
        )
        run_parser.add_argument(
            "--index-col",
            type=str,
            help="Column holding row keys",
        )
        run_parser.add_argument(
            "--output",
            type=str,
            help="Write the clustering result as JSON to this path",
        )
        self._add_clustering_arguments(run_parser)
        run_parser.add_argument(
            "--distance",
            type=str,
            choices=sorted(DISTANCES),
            help="Distance function",
        )
        run_parser.add_argument(
            "--aggregate",
            type=str,
            choices=sorted(AGGREGATES),
            help="Aggregate function",
        )
        run_parser.add_argument(
            "--as-series",
            action="store_true",
            help="Pass rows as labeled Series (use with --distance series)",
        )
        run_parser.add_argument(
            "--json-logs",
            action="store_true",
            help="Emit logs as JSON lines",
        )

        sample_parser = subparsers.add_parser(
            "sample",
            help="Cluster the built-in 2D sample points",
        )
        self._add_clustering_arguments(sample_parser)

        return parser

    @staticmethod
    def _add_clustering_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "-k", "--clusters",
            type=int,
            help="Number of clusters",
        )
        parser.add_argument(
            "--seed",
            type=int,
            help="Random seed for centroid initialization",
        )
        parser.add_argument(
            "--max-iter",
            type=int,
            help="Maximum number of update rounds",
        )
        parser.add_argument(
            "--empty-cluster-policy",
            type=str,
            choices=[p.value for p in EmptyClusterPolicy],
            help="How to treat clusters that lose all members",
        )

    def run(self, args: Optional[list] = None) -> int:
        """Run CLI with given arguments.

        Args:
            args: Command-line arguments (None for sys.argv)

        Returns:
            Exit code (0 for success, 2 if the run did not converge)
        """
        parsed_args = self.parser.parse_args(args)

        if parsed_args.command == "run":
            return self._run_clustering(parsed_args)
        elif parsed_args.command == "sample":
            return self._run_sample(parsed_args)
        else:
            self.parser.print_help()
            return EXIT_ERROR

    def _collect_overrides(self, args: argparse.Namespace) -> List[str]:
        """Translate command-line flags into dotted config overrides."""
        mapping = {
            "clusters": "clustering.n_clusters",
            "seed": "clustering.seed",
            "max_iter": "clustering.max_iter",
            "empty_cluster_policy": "clustering.empty_cluster_policy",
            "distance": "clustering.distance",
            "aggregate": "clustering.aggregate",
            "input": "data.path",
            "index_col": "data.index_col",
        }
        overrides = []
        for attr, key in mapping.items():
            value = getattr(args, attr, None)
            if value is not None:
                overrides.append(f"{key}={value}")
        if getattr(args, "as_series", False):
            overrides.append("data.as_series=true")
        if getattr(args, "json_logs", False):
            overrides.append("logging.json_format=true")
        return overrides

    def _load_config(self, args: argparse.Namespace) -> Config:
        overrides = self._collect_overrides(args)
        config_path = getattr(args, "config", None)
        if config_path:
            return load_config(config_path, overrides=overrides)
        return default_config(overrides)

    def _run_clustering(self, args: argparse.Namespace) -> int:
        """Cluster a CSV file.

        Args:
            args: Parsed arguments

        Returns:
            Exit code
        """
        try:
            config = self._load_config(args)
            setup_logger(
                "kcluster",
                level=config.logging.level,
                log_file=config.logging.file,
                json_format=config.logging.json_format,
            )

            if config.data.path is None:
                raise InvalidArgumentError("No input file given (use --input or data.path)")

            keys, dataset = load_dataset(
                config.data.path,
                columns=config.data.columns,
                index_col=config.data.index_col,
                as_series=config.data.as_series,
            )

            clusterer = KMeansClusterer.from_config(config.clustering)
            result = clusterer.fit(dataset)

        except DidNotConvergeError as e:
            logger.error(str(e))
            if e.result is not None and args.output:
                e.result.to_json(args.output)
            return EXIT_NOT_CONVERGED
        except Exception as e:
            logger.error(f"Clustering failed: {e}", exc_info=True)
            return EXIT_ERROR

        print(label_clusters(keys, result.labels).to_string())

        if args.output:
            result.to_json(Path(args.output))

        return EXIT_OK

    def _run_sample(self, args: argparse.Namespace) -> int:
        """Cluster the built-in sample points."""
        try:
            config = default_config(self._collect_overrides(args))
            setup_logger("kcluster", level=config.logging.level)

            points = sample_points()
            result = KMeansClusterer.from_config(config.clustering).fit(points)

        except DidNotConvergeError as e:
            logger.error(str(e))
            return EXIT_NOT_CONVERGED
        except Exception as e:
            logger.error(f"Clustering failed: {e}", exc_info=True)
            return EXIT_ERROR

        groups = group_members(points, result.labels, result.n_clusters)
        print("\n" + "=" * 40)
        print(f"Converged after {result.n_iter} iterations")
        print("=" * 40)
        for cluster, items in enumerate(groups):
            print(f"Cluster {cluster}: {items}")

        return EXIT_OK


def main():
    """Main entry point for CLI."""
    cli = KClusterCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
