from __future__ import annotations

from typing import Iterable, Iterator, Sequence, Set, Tuple

Edge = Tuple[int, int]


def vertex_id(value) -> int:
    """Return ``value`` as an int vertex id, refusing fractional or negative values."""
    vid = int(value)
    if vid != value:
        raise ValueError(f"Vertex ids must be integers, got {value!r}")
    if vid < 0:
        raise ValueError(f"Vertex ids must be non-negative integers, got {value!r}")
    return vid


def _check_parallel(tails: Sequence[int], heads: Sequence[int], what: str) -> None:
    if len(tails) != len(heads):
        raise ValueError(
            f"{what} tails and heads must have equal length; got {len(tails)} and {len(heads)}"
        )


class EdgeIndex:
    """Set of (tail, head) pairs mirroring the live edge list.

    Only the swap step mutates an index that backs a running chain, through
    :meth:`swap`, so that the index and the edge list never disagree.
    """

    __slots__ = ("_edges",)

    def __init__(self, edges: Iterable[Edge] = ()):
        self._edges: Set[Edge] = set()
        for tail, head in edges:
            self.insert(tail, head)

    @classmethod
    def from_lists(cls, tails: Sequence[int], heads: Sequence[int]) -> "EdgeIndex":
        _check_parallel(tails, heads, "edge")
        return cls(zip(tails, heads))

    def contains(self, tail: int, head: int) -> bool:
        return (tail, head) in self._edges

    def insert(self, tail: int, head: int) -> None:
        self._edges.add((int(tail), int(head)))

    def erase(self, tail: int, head: int) -> None:
        self._edges.discard((tail, head))

    def swap(self, old_i: Edge, old_j: Edge, new_i: Edge, new_j: Edge) -> None:
        # both new corners go in before the old ones come out
        self.insert(*new_i)
        self.insert(*new_j)
        self.erase(*old_i)
        self.erase(*old_j)

    def __contains__(self, edge: object) -> bool:
        return edge in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __repr__(self) -> str:
        return f"EdgeIndex(size={len(self._edges)})"


class ForbiddenPairIndex:
    """Immutable set of structural zeros: pairs that may never become edges."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[Edge] = ()):
        self._pairs: frozenset[Edge] = frozenset((vertex_id(t), vertex_id(h)) for t, h in pairs)

    @classmethod
    def from_lists(cls, tails: Sequence[int], heads: Sequence[int]) -> "ForbiddenPairIndex":
        _check_parallel(tails, heads, "structural zero")
        return cls(zip(tails, heads))

    def contains(self, tail: int, head: int) -> bool:
        return (tail, head) in self._pairs

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._pairs)

    def __repr__(self) -> str:
        return f"ForbiddenPairIndex(size={len(self._pairs)})"
