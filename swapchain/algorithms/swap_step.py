from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence

import numpy as np

from swapchain.algorithms.edge_index import Edge, EdgeIndex, ForbiddenPairIndex, vertex_id


class UnitSource(Protocol):
    def next_unit(self) -> float: ...


class AcceptancePolicy(Protocol):
    """How a chain vetoes and accepts checkerboard swaps."""

    forbidden: Optional[ForbiddenPairIndex]

    def probability(self, old_i: Edge, old_j: Edge, new_i: Edge, new_j: Edge) -> float: ...


class StepOutcome(str, Enum):
    SAME_EDGE = "same_edge"
    NOT_CHECKERBOARD = "not_checkerboard"
    STRUCT_ZERO = "struct_zero"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


_PASSED_CHECKERBOARD = (StepOutcome.STRUCT_ZERO, StepOutcome.ACCEPTED, StepOutcome.REJECTED)
_ELIGIBLE = (StepOutcome.ACCEPTED, StepOutcome.REJECTED)


@dataclass(frozen=True)
class StepRecord:
    """What happened to one attempted swap.

    ``accept_p`` is only defined once the step reached the acceptance stage;
    otherwise it is ``nan``. The boolean views report tests that were run and
    passed, so a step stopped early reads ``False`` for every later test.
    """

    outcome: StepOutcome
    accept_p: float = math.nan

    @property
    def same_edge(self) -> bool:
        return self.outcome is StepOutcome.SAME_EDGE

    @property
    def is_checkerboard(self) -> bool:
        return self.outcome in _PASSED_CHECKERBOARD

    @property
    def is_not_struct_zeros(self) -> bool:
        return self.outcome in _ELIGIBLE

    @property
    def can_swap(self) -> bool:
        return self.outcome in _ELIGIBLE

    @property
    def did_swap(self) -> bool:
        return self.outcome is StepOutcome.ACCEPTED


@dataclass
class SwapState:
    """Engine-owned edge list plus the index that mirrors it."""

    tails: List[int]
    heads: List[int]
    index: EdgeIndex

    @classmethod
    def from_lists(cls, tails: Sequence[int], heads: Sequence[int]) -> "SwapState":
        own_tails = [vertex_id(t) for t in tails]
        own_heads = [vertex_id(h) for h in heads]
        index = EdgeIndex.from_lists(own_tails, own_heads)
        if len(index) != len(own_tails):
            raise ValueError(
                f"Edge list holds duplicate (tail, head) pairs: {len(own_tails)} edges, "
                f"{len(index)} distinct"
            )
        return cls(own_tails, own_heads, index)

    @property
    def m(self) -> int:
        return len(self.tails)

    def edge(self, pos: int) -> Edge:
        return self.tails[pos], self.heads[pos]


class UniformAcceptance:
    """Accept every structurally valid swap with the same probability ``swap_p``.

    ``swap_p`` must stay strictly below 1 for the chain to be aperiodic. This
    is not enforced here: a value >= 1 still runs, it just loses the mixing
    guarantee.
    """

    def __init__(self, swap_p: float, forbidden: Optional[ForbiddenPairIndex] = None):
        self.swap_p = float(swap_p)
        self.forbidden = forbidden

    def probability(self, old_i: Edge, old_j: Edge, new_i: Edge, new_j: Edge) -> float:
        return self.swap_p


def acceptance_ratio(w_post: float, w_pre: float) -> float:
    """Metropolis ratio of weight products after/before a swap.

    A zero denominator with a non-zero numerator gives 0. Both zero means the
    current edges carry zero weight, which cannot happen in a valid state.
    """
    if w_pre == 0:
        if w_post == 0:
            raise ValueError("Acceptance ratio is 0/0: current edges have zero weight")
        return 0.0
    return w_post / w_pre


class WeightedAcceptance:
    """Accept with probability w(a,d) w(c,b) / (w(a,b) w(c,d)), vetoing structural zeros."""

    def __init__(self, weights: np.ndarray, forbidden: Optional[ForbiddenPairIndex] = None):
        self.weights = weights
        self.forbidden = forbidden if forbidden is not None else ForbiddenPairIndex()

    def probability(self, old_i: Edge, old_j: Edge, new_i: Edge, new_j: Edge) -> float:
        w = self.weights
        w_pre = float(w[old_i]) * float(w[old_j])
        w_post = float(w[new_i]) * float(w[new_j])
        return acceptance_ratio(w_post, w_pre)


def attempt_swap(
    state: SwapState, i: int, j: int, policy: AcceptancePolicy, rng: UnitSource
) -> StepRecord:
    """Try to exchange the tails of edges ``i`` and ``j``.

    With ``(a, b) = edge[i]`` and ``(c, d) = edge[j]`` the swap yields
    ``(c, b)`` at ``i`` and ``(a, d)`` at ``j``. It is attempted only when
    neither new edge exists yet (the 2x2 checkerboard condition) and, for
    policies carrying structural zeros, neither is forbidden. A uniform draw
    is consumed only once the step reaches the acceptance stage.
    """
    if i == j:
        return StepRecord(StepOutcome.SAME_EDGE)

    a, b = old_i = state.edge(i)
    c, d = old_j = state.edge(j)
    new_i = (c, b)
    new_j = (a, d)

    if state.index.contains(*new_j) or state.index.contains(*new_i):
        return StepRecord(StepOutcome.NOT_CHECKERBOARD)

    forbidden = policy.forbidden
    if forbidden is not None and (forbidden.contains(*new_j) or forbidden.contains(*new_i)):
        return StepRecord(StepOutcome.STRUCT_ZERO)

    accept_p = policy.probability(old_i, old_j, new_i, new_j)
    u = rng.next_unit()
    if not u < accept_p:
        return StepRecord(StepOutcome.REJECTED, accept_p)

    state.index.swap(old_i, old_j, new_i, new_j)
    state.tails[i] = c
    state.tails[j] = a
    return StepRecord(StepOutcome.ACCEPTED, accept_p)
