from __future__ import annotations

from typing import List, Optional, Tuple

import networkx as nx

from swapchain.algorithms.chain import simple_swap_n, swap_n


def digraph_to_edge_lists(G: nx.DiGraph) -> Tuple[List[int], List[int]]:
    """Split a DiGraph with integer nodes into tail and head lists."""
    if not G.is_directed():
        raise ValueError("Checkerboard swaps need a directed graph")
    tails: List[int] = []
    heads: List[int] = []
    for u, v in G.edges():
        if not (isinstance(u, int) and isinstance(v, int)):
            raise ValueError(
                f"Node labels must be integers to index the weight matrix; got edge {(u, v)!r}. "
                "Relabel with nx.convert_node_labels_to_integers first."
            )
        tails.append(u)
        heads.append(v)
    return tails, heads


def edge_lists_to_digraph(
    tails: List[int], heads: List[int], nodes: Optional[List[int]] = None
) -> nx.DiGraph:
    H = nx.DiGraph()
    if nodes is not None:
        H.add_nodes_from(nodes)
    H.add_edges_from(zip(tails, heads))
    return H


def self_loop_zeros(n_vertices: int) -> Tuple[List[int], List[int]]:
    """Structural zeros on the diagonal, so swaps never create self-loops."""
    ids = list(range(n_vertices))
    return ids, list(ids)


def _loop_zeros_for(G: nx.DiGraph, forbid_self_loops: Optional[bool]) -> Tuple[List[int], List[int]]:
    # None: keep a loop-free graph loop-free, leave graphs that already have loops alone
    if forbid_self_loops is None:
        forbid_self_loops = nx.number_of_selfloops(G) == 0
    if not forbid_self_loops or G.number_of_nodes() == 0:
        return [], []
    return self_loop_zeros(max(G.nodes()) + 1)


def randomize_digraph(
    G: nx.DiGraph,
    n: int,
    swap_p: float = 0.5,
    forbid_self_loops: Optional[bool] = None,
    seed: Optional[int] = None,
) -> nx.DiGraph:
    """Return a copy of G with the same in/out degrees after ``n`` uniform swap attempts.

    Tails and heads share one vertex set here, so a swap can close a
    self-loop. By default that is forbidden whenever G has no self-loops.

    Args:
        G: directed graph with integer node labels
        n: number of swaps to attempt (caller picks it for mixing)
        swap_p: acceptance probability for valid swaps, keep < 1
        forbid_self_loops: forbid every (v, v) pair; ``None`` decides from G
        seed: random seed
    """
    tails, heads = digraph_to_edge_lists(G)
    zero_tails, zero_heads = _loop_zeros_for(G, forbid_self_loops)
    res = simple_swap_n(
        tails, heads, n, swap_p, seed=seed, zero_tails=zero_tails, zero_heads=zero_heads
    )
    return edge_lists_to_digraph(res.tails, res.heads, nodes=list(G.nodes()))


def randomize_digraph_weighted(
    G: nx.DiGraph,
    n: int,
    weight_matrix,
    forbid_self_loops: Optional[bool] = None,
    seed: Optional[int] = None,
) -> nx.DiGraph:
    """Weighted counterpart of :func:`randomize_digraph`, same self-loop rule."""
    tails, heads = digraph_to_edge_lists(G)
    zero_tails, zero_heads = _loop_zeros_for(G, forbid_self_loops)
    res = swap_n(tails, heads, n, weight_matrix, zero_tails, zero_heads, seed=seed)
    return edge_lists_to_digraph(res.tails, res.heads, nodes=list(G.nodes()))
