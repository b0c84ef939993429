"""Utility functions for kcluster."""

from __future__ import annotations

from kcluster.utils.logging import setup_logger
from kcluster.utils.seed import resolve_rng

__all__ = [
    "setup_logger",
    "resolve_rng",
]
