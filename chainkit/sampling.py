#!/usr/bin/env python3
"""
Random Sources
==============
The single source of randomness used by chain generation.

Generation never touches the process-wide ``random`` state. Callers pass
a RandomSource (or something coercible to one) so that a fixed seed
reproduces the same output.

Usage:
    from chainkit.sampling import RandomSource

    rng = RandomSource(seed=42)
    index = rng.draw_index([3, 1, 1])   # 0 with probability 3/5
"""

import random
from typing import Optional, Sequence, Union


class RandomSource:
    """Draws indices from integer weight vectors."""

    def __init__(self, seed: Optional[int] = None, rng: random.Random = None):
        """
        Args:
            seed: Seed for a private ``random.Random`` instance
            rng: Existing ``random.Random`` to draw from (seed is ignored)
        """
        self._rng = rng if rng is not None else random.Random(seed)

    def draw_index(self, weights: Sequence[int]) -> int:
        """
        Pick an index with probability weights[i] / sum(weights).

        Raises:
            ValueError: If weights is empty or sums to zero
        """
        if not weights:
            raise ValueError("cannot draw from an empty weight vector")
        total = sum(weights)
        if total <= 0:
            raise ValueError(f"weights must sum to a positive value, got {total}")
        if len(weights) == 1:
            return 0
        return self._rng.choices(range(len(weights)), weights=weights)[0]


RandomLike = Union[RandomSource, random.Random, int, None]


def as_random_source(rng: RandomLike = None) -> RandomSource:
    """Coerce a seed, ``random.Random`` or None into a RandomSource."""
    if isinstance(rng, RandomSource):
        return rng
    if isinstance(rng, random.Random):
        return RandomSource(rng=rng)
    if rng is None or (isinstance(rng, int) and not isinstance(rng, bool)):
        return RandomSource(seed=rng)
    if hasattr(rng, 'draw_index'):
        return rng
    raise TypeError(f"expected a RandomSource, random.Random, int seed or None, got {type(rng).__name__}")


__all__ = ["RandomSource", "RandomLike", "as_random_source"]
