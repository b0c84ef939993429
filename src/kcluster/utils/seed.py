"""Seed utilities for reproducibility."""

from __future__ import annotations

import random
from typing import Any, Optional, Protocol, Tuple, Union

import numpy as np

from kcluster.clustering.errors import InvalidArgumentError


class RandomSource(Protocol):
    """Uniform integer draws in ``[0, high)``.

    ``numpy.random.Generator`` satisfies this protocol.
    """

    def integers(self, high: int) -> int:
        ...


def resolve_rng(
    rng: Union[None, int, RandomSource] = None,
) -> Tuple[RandomSource, Optional[int]]:
    """Turn a seed or random source into a random source.

    Args:
        rng: None for a fresh seed, an int seed, or an object
            exposing ``integers(high)``

    Returns:
        Tuple of (random source, seed). The seed is None when a
        random source was injected directly.
    """
    if rng is None:
        seed = random.randint(0, 2**32 - 1)
        return np.random.default_rng(seed), seed

    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        if rng < 0:
            raise InvalidArgumentError(f"seed must be non-negative, got {rng}")
        return np.random.default_rng(int(rng)), int(rng)

    if callable(getattr(rng, "integers", None)):
        return rng, None

    raise TypeError(
        f"Expected None, an int seed or a random source with integers(), got {type(rng).__name__}"
    )


def draw_index(rng: Any, high: int) -> int:
    """Draw a single uniform index in ``[0, high)``."""
    return int(rng.integers(high))
