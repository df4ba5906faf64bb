from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

# Seed value that asks the random engine to draw a fresh seed from system entropy.
SEED_FROM_ENTROPY = -1
# Entropy-drawn seeds are 32-bit so they can be stored and replayed anywhere.
SEED_BITS = 32

DEFAULT_SWAP_P = 0.5


@dataclass(frozen=True)
class ChainConfig:
    n: int  # number of attempted swaps
    swap_p: float = DEFAULT_SWAP_P  # uniform chain only; keep < 1 for aperiodicity
    seeds: tuple[int, ...] = ()  # one independent chain per seed; empty = one entropy-seeded chain
    samples: int = 1  # chains to run when no seeds are given
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.n < 0:
            raise ValueError(f"n must be >= 0, got {self.n}")
        if not 0 <= self.swap_p:
            raise ValueError(f"swap_p must be non-negative, got {self.swap_p}")
        if self.samples <= 0:
            raise ValueError(f"samples must be > 0, got {self.samples}")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    def chain_seeds(self) -> list[Optional[int]]:
        """Seeds for each chain to run; ``None`` entries are drawn from entropy."""
        if self.seeds:
            return list(self.seeds)
        return [None] * self.samples


def read_chain_config(path: Path) -> Dict[str, Any]:
    """Read chain settings from a JSON object whose keys are :class:`ChainConfig` fields.

    Keys may be left out; callers merge the result with their own values
    before building the :class:`ChainConfig`.
    """
    with open(path) as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Chain config {path} must hold a JSON object")
    known = {f.name for f in fields(ChainConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise KeyError(f"Unknown chain config keys {unknown}. Available: {sorted(known)}")
    if "seeds" in raw:
        if not isinstance(raw["seeds"], list) or not all(isinstance(s, int) for s in raw["seeds"]):
            raise ValueError(f"'seeds' must be a list of integers, got {raw['seeds']!r}")
        raw["seeds"] = tuple(raw["seeds"])
    for key in ("n", "samples"):
        if key in raw and not isinstance(raw[key], int):
            raise ValueError(f"'{key}' must be an integer, got {raw[key]!r}")
    if raw.get("max_workers") is not None and not isinstance(raw["max_workers"], int):
        raise ValueError(f"'max_workers' must be an integer or null, got {raw['max_workers']!r}")
    if "swap_p" in raw and not isinstance(raw["swap_p"], (int, float)):
        raise ValueError(f"'swap_p' must be a number, got {raw['swap_p']!r}")
    return raw


def load_chain_config(path: Path) -> ChainConfig:
    """Read a complete :class:`ChainConfig` from JSON; 'n' is required."""
    raw = read_chain_config(path)
    if "n" not in raw:
        raise ValueError(f"Chain config {path} must set 'n'")
    return ChainConfig(**raw)
