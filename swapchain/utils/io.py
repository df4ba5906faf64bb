from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from swapchain.algorithms.chain import SwapResult, WeightedSwapResult


def _iter_pairs_from_file(path: Path) -> Iterable[Tuple[int, int]]:
    """Yield integer pairs (tail, head) from a whitespace-separated edge list.

    Lines starting with '#' are comments; columns past the second are ignored.
    """
    opener = gzip.open if str(path).endswith(".gz") else open
    with opener(path, "rt", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip() or line.startswith("#"):
                continue
            parts = line.split()
            if len(parts) < 2:
                raise ValueError(f"{path}:{lineno}: expected 'tail head', got {line.strip()!r}")
            try:
                yield int(parts[0]), int(parts[1])
            except ValueError:
                raise ValueError(
                    f"{path}:{lineno}: vertex ids must be integers, got {line.strip()!r}"
                ) from None


def load_edge_list(path: Path) -> Tuple[List[int], List[int]]:
    """Load an edge list file into parallel tail and head lists (file order kept).

    Works for plain files and ``.gz``. Vertex ids are used as-is, so they
    index the weight matrix directly.
    """
    tails: List[int] = []
    heads: List[int] = []
    for u, v in _iter_pairs_from_file(Path(path)):
        tails.append(u)
        heads.append(v)
    return tails, heads


def load_weight_matrix(path: Path) -> np.ndarray:
    """Read a headerless CSV of weights; row = tail id, column = head id."""
    df = pd.read_csv(path, header=None)
    return df.to_numpy(dtype=float)


def save_edge_list(path: Path, tails: Sequence[int], heads: Sequence[int]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame({"from": list(tails), "to": list(heads)}).to_csv(path, index=False)


def save_diagnostics(path: Path, result: WeightedSwapResult) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    result.to_frame().to_csv(path, index=False)


def save_run_meta(path: Path, result: SwapResult, **extra) -> None:
    """Persist the seed and step counts so a sample can be replayed."""
    meta = {"seed": result.seed, "edges": len(result.tails)}
    if isinstance(result, WeightedSwapResult):
        meta["steps"] = len(result.records)
        meta["accepted"] = int(sum(result.did_swap))
    meta.update(extra)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(meta, f, indent=2)
