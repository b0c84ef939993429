"""Shared fixtures for kcluster tests."""

from __future__ import annotations

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import logging
from typing import Iterable, List

import pytest


class ScriptedRandom:
    """Random source that returns a fixed sequence of indices."""

    def __init__(self, indices: Iterable[int]):
        self._indices = iter(indices)
        self.draws: List[int] = []

    def integers(self, high: int) -> int:
        index = next(self._indices)
        assert 0 <= index < high, f"scripted index {index} outside [0, {high})"
        self.draws.append(index)
        return index


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def points():
    """Six 2D points in three well-separated pairs."""
    return [(0.0, 1.0), (1.0, 1.0), (10.0, 1.0), (13.0, 3.0), (4.0, 10.0), (5.0, 8.0)]


@pytest.fixture(autouse=True)
def reset_kcluster_logger():
    """Drop handlers the CLI attaches so they do not outlive captured streams."""
    yield
    logger = logging.getLogger("kcluster")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
