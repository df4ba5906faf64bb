from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from swapchain.algorithms.edge_index import ForbiddenPairIndex
from swapchain.algorithms.rng import SeedLike, SwapRandom
from swapchain.algorithms.swap_step import (
    AcceptancePolicy,
    StepOutcome,
    StepRecord,
    SwapState,
    UniformAcceptance,
    WeightedAcceptance,
    attempt_swap,
)


@dataclass
class SwapResult:
    tails: List[int]
    heads: List[int]
    seed: int

    def as_dict(self) -> Dict[str, list]:
        return {"from": list(self.tails), "to": list(self.heads)}


@dataclass
class WeightedSwapResult(SwapResult):
    records: List[StepRecord] = field(default_factory=list)

    @property
    def same_edge(self) -> List[bool]:
        return [r.same_edge for r in self.records]

    @property
    def is_checkerboard(self) -> List[bool]:
        return [r.is_checkerboard for r in self.records]

    @property
    def is_not_struct_zeros(self) -> List[bool]:
        return [r.is_not_struct_zeros for r in self.records]

    @property
    def can_swap(self) -> List[bool]:
        return [r.can_swap for r in self.records]

    @property
    def did_swap(self) -> List[bool]:
        return [r.did_swap for r in self.records]

    @property
    def swap_p(self) -> List[float]:
        return [r.accept_p for r in self.records]

    def as_dict(self) -> Dict[str, list]:
        out = super().as_dict()
        out.update(
            same_edge=self.same_edge,
            is_checkerboard=self.is_checkerboard,
            is_not_struct_zeros=self.is_not_struct_zeros,
            can_swap=self.can_swap,
            did_swap=self.did_swap,
            swap_p=self.swap_p,
        )
        return out

    def to_frame(self) -> pd.DataFrame:
        """Per-step diagnostics, one row per attempted swap."""
        return pd.DataFrame(
            {
                "step": range(len(self.records)),
                "outcome": [r.outcome.value for r in self.records],
                "same_edge": self.same_edge,
                "is_checkerboard": self.is_checkerboard,
                "is_not_struct_zeros": self.is_not_struct_zeros,
                "can_swap": self.can_swap,
                "did_swap": self.did_swap,
                "swap_p": self.swap_p,
            }
        )


def run_chain(state: SwapState, n: int, policy: AcceptancePolicy, rng) -> List[StepRecord]:
    """Attempt ``n`` swaps on ``state`` in place and return one record per attempt.

    Every iteration draws two edge positions, including those that end up
    rejected. An empty edge list has nothing to draw from, so each step is
    recorded as a same-edge no-op.
    """
    m = state.m
    records: List[StepRecord] = []
    for _ in range(n):
        if m == 0:
            records.append(StepRecord(StepOutcome.SAME_EDGE))
            continue
        i = rng.next_edge_index(m)
        j = rng.next_edge_index(m)
        records.append(attempt_swap(state, i, j, policy, rng))
    return records


def _check_n(n: int) -> int:
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    return int(n)


def prepare_weights(weight_matrix, tails: Sequence[int], heads: Sequence[int]) -> np.ndarray:
    """Convert ``weight_matrix`` to a read-only float array and check it covers every edge corner.

    Any checkerboard corner pairs a tail with a head already in the edge list,
    so the rows must reach ``max(tails)`` and the columns ``max(heads)``.
    """
    if isinstance(weight_matrix, pd.DataFrame):
        weight_matrix = weight_matrix.to_numpy()
    w = np.array(weight_matrix, dtype=float)
    if w.ndim != 2:
        raise ValueError(f"Weight matrix must be 2-D, got shape {w.shape}")
    if not np.isfinite(w).all():
        raise ValueError("Weight matrix must hold finite values")
    if (w < 0).any():
        raise ValueError("Weight matrix must be non-negative")
    if len(tails):
        rows_needed = max(tails) + 1
        cols_needed = max(heads) + 1
        if w.shape[0] < rows_needed or w.shape[1] < cols_needed:
            raise ValueError(
                f"Weight matrix of shape {w.shape} does not cover vertex ids; "
                f"need at least ({rows_needed}, {cols_needed})"
            )
    w.setflags(write=False)
    return w


def simple_swap_n(
    edge_tails: Sequence[int],
    edge_heads: Sequence[int],
    n: int,
    swap_p: float,
    seed: SeedLike = None,
    rng: Optional[SwapRandom] = None,
    zero_tails: Sequence[int] = (),
    zero_heads: Sequence[int] = (),
) -> SwapResult:
    """Run ``n`` uniform checkerboard swaps on a simple directed graph.

    Samples from the uniform distribution over directed graphs with the same
    out- and in-degree sequences as the input.

    Args:
        edge_tails: originating vertex of each edge
        edge_heads: terminating vertex of each edge
        n: number of swaps to attempt
        swap_p: probability of applying a valid swap. Must be < 1 for the
            chain to be aperiodic; larger values only trigger a warning.
        seed: ``None`` or -1 draws a seed from system entropy
        rng: pre-built engine, overriding ``seed``
        zero_tails: originating vertex of each structural zero (none by default)
        zero_heads: terminating vertex of each structural zero

    Returns:
        SwapResult with new tail and head lists and the seed that was used.
    """
    n = _check_n(n)
    state = SwapState.from_lists(edge_tails, edge_heads)
    forbidden = ForbiddenPairIndex.from_lists(zero_tails, zero_heads)
    if swap_p >= 1:
        print(
            f"[WARNING] swap_p={swap_p} >= 1: the chain is not aperiodic and may not mix. "
            "Use swap_p < 1."
        )
    rng = rng if rng is not None else SwapRandom(seed)
    run_chain(state, n, UniformAcceptance(swap_p, forbidden), rng)
    return SwapResult(state.tails, state.heads, rng.seed)


def swap_n(
    edge_tails: Sequence[int],
    edge_heads: Sequence[int],
    n: int,
    weight_matrix,
    zero_tails: Sequence[int] = (),
    zero_heads: Sequence[int] = (),
    seed: SeedLike = None,
    rng: Optional[SwapRandom] = None,
) -> WeightedSwapResult:
    """Run ``n`` weighted checkerboard swaps respecting structural zeros.

    The stationary distribution is proportional to the product of the weights
    of the realised edges, restricted to graphs with the input degree
    sequences and none of the forbidden pairs.

    Args:
        edge_tails: originating vertex of each edge
        edge_heads: terminating vertex of each edge
        n: number of swaps to attempt
        weight_matrix: non-negative weights indexed ``[tail, head]`` by raw vertex id
        zero_tails: originating vertex of each structural zero
        zero_heads: terminating vertex of each structural zero
        seed: ``None`` or -1 draws a seed from system entropy
        rng: pre-built engine, overriding ``seed``

    Returns:
        WeightedSwapResult with the new edge lists and per-step diagnostics.
    """
    n = _check_n(n)
    state = SwapState.from_lists(edge_tails, edge_heads)
    forbidden = ForbiddenPairIndex.from_lists(zero_tails, zero_heads)
    weights = prepare_weights(weight_matrix, state.tails, state.heads)
    rng = rng if rng is not None else SwapRandom(seed)
    records = run_chain(state, n, WeightedAcceptance(weights, forbidden), rng)
    return WeightedSwapResult(state.tails, state.heads, rng.seed, records)
