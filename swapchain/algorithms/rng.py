from __future__ import annotations

import random
from typing import Union

from swapchain.config import SEED_BITS, SEED_FROM_ENTROPY

SeedLike = Union[int, float, None]


def resolve_seed(seed: SeedLike = None) -> int:
    """Return the concrete seed a chain will use.

    ``None`` and the ``-1`` sentinel draw a fresh seed from system entropy;
    any other value is used as given, fractional seeds truncated to int.
    """
    if seed is None or seed == SEED_FROM_ENTROPY:
        return random.SystemRandom().getrandbits(SEED_BITS)
    seed = int(seed)
    if seed < 0:
        raise ValueError(f"seed must be non-negative or {SEED_FROM_ENTROPY}, got {seed}")
    return seed


class SwapRandom:
    """Random stream owned by one chain: edge-index draws and unit draws."""

    def __init__(self, seed: SeedLike = None):
        self.seed = resolve_seed(seed)
        self._rng = random.Random(self.seed)

    def next_edge_index(self, m: int) -> int:
        return self._rng.randrange(m)

    def next_unit(self) -> float:
        return self._rng.random()

    def __repr__(self) -> str:
        return f"SwapRandom(seed={self.seed})"
