from __future__ import annotations

import argparse
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from multiprocessing import cpu_count
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from swapchain.algorithms.chain import SwapResult, WeightedSwapResult, simple_swap_n, swap_n
from swapchain.config import DEFAULT_SWAP_P, ChainConfig, read_chain_config
from swapchain.utils.io import (
    load_edge_list,
    load_weight_matrix,
    save_diagnostics,
    save_edge_list,
    save_run_meta,
)


def _worker_chain(
    tails: Sequence[int],
    heads: Sequence[int],
    n: int,
    swap_p: float,
    weights: Optional[np.ndarray],
    zero_tails: Sequence[int],
    zero_heads: Sequence[int],
    seed: Optional[int],
) -> SwapResult:
    """Run one independent chain; every worker owns its own random engine."""
    if weights is None:
        return simple_swap_n(tails, heads, n, swap_p, seed=seed)
    return swap_n(tails, heads, n, weights, zero_tails, zero_heads, seed=seed)


def run_swap_ensemble(
    tails: Sequence[int],
    heads: Sequence[int],
    n: int,
    seeds: Sequence[Optional[int]],
    swap_p: float = DEFAULT_SWAP_P,
    weights: Optional[np.ndarray] = None,
    zero_tails: Sequence[int] = (),
    zero_heads: Sequence[int] = (),
    max_workers: Optional[int] = None,
) -> List[SwapResult]:
    """Draw one sample per seed from independent chains started at the same graph.

    Uses the weighted chain when ``weights`` is given, the uniform chain
    otherwise. Results come back in seed order. ``max_workers=1`` runs
    in-process.
    """
    seed_list = list(seeds)
    if not seed_list:
        return []
    if max_workers is None:
        max_workers = min(cpu_count(), len(seed_list))
    args = (list(tails), list(heads), n, swap_p, weights, list(zero_tails), list(zero_heads))

    if max_workers == 1 or len(seed_list) == 1:
        return [_worker_chain(*args, seed) for seed in seed_list]

    results: List[Optional[SwapResult]] = [None] * len(seed_list)
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_worker_chain, *args, seed): pos for pos, seed in enumerate(seed_list)
        }
        for fut in as_completed(futures):
            pos = futures[fut]
            results[pos] = fut.result()
            print(f"  ✓ chain {pos + 1}/{len(seed_list)} done (seed={results[pos].seed})", flush=True)
    return results


def write_sample(output_dir: Path, idx: int, result: SwapResult, n: int) -> None:
    stem = f"sample{idx:03d}_seed{result.seed}"
    save_edge_list(output_dir / f"{stem}_edges.csv", result.tails, result.heads)
    if isinstance(result, WeightedSwapResult):
        save_diagnostics(output_dir / f"{stem}_steps.csv", result)
    save_run_meta(output_dir / f"{stem}_meta.json", result, n=n)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sample directed graphs with fixed degree sequences by checkerboard swaps"
    )
    parser.add_argument("--edges", type=Path, required=True, help="Edge list file: 'tail head' per line")
    parser.add_argument("--config", type=Path, default=None, help="JSON chain config (flags override it)")
    parser.add_argument("--n", type=int, default=None, help="Number of swaps to attempt per chain")
    parser.add_argument(
        "--swap-p",
        type=float,
        default=None,
        help=f"Uniform chain acceptance probability, keep < 1 (default {DEFAULT_SWAP_P})",
    )
    parser.add_argument(
        "--weights",
        type=Path,
        default=None,
        help="Headerless CSV weight matrix; switches to the weighted chain",
    )
    parser.add_argument(
        "--zeros",
        type=Path,
        default=None,
        help="Structural zeros file ('tail head' per line), weighted chain only",
    )
    parser.add_argument("--seed", type=int, nargs="*", default=None, help="One chain per seed (-1 = entropy)")
    parser.add_argument("--samples", type=int, default=None, help="Entropy-seeded chains when no --seed given")
    parser.add_argument("--max-workers", type=int, default=None)
    parser.add_argument("--output-dir", type=Path, default=Path("results/swaps"))
    return parser


def config_from_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> ChainConfig:
    base = {}
    if args.config is not None:
        try:
            base = read_chain_config(args.config)
        except (OSError, ValueError, KeyError) as e:
            parser.error(f"Cannot read config {args.config}: {e}")
    overrides = {
        "n": args.n,
        "swap_p": args.swap_p,
        "seeds": tuple(args.seed) if args.seed else None,
        "samples": args.samples,
        "max_workers": args.max_workers,
    }
    base.update({k: v for k, v in overrides.items() if v is not None})
    if "n" not in base:
        parser.error("--n is required (or set 'n' in --config)")
    try:
        return ChainConfig(**base)
    except (TypeError, ValueError) as e:
        parser.error(f"Invalid chain config: {e}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = config_from_args(parser, args)
    if args.zeros is not None and args.weights is None:
        parser.error("--zeros needs --weights")

    tails, heads = load_edge_list(args.edges)
    weights = load_weight_matrix(args.weights) if args.weights is not None else None
    zero_tails: List[int] = []
    zero_heads: List[int] = []
    if args.zeros is not None:
        zero_tails, zero_heads = load_edge_list(args.zeros)

    seeds = cfg.chain_seeds()
    mode = "weighted" if weights is not None else "uniform"
    print(f"Loaded {len(tails)} edges from {args.edges}; {len(seeds)} {mode} chain(s) of n={cfg.n}")

    t0 = time.time()
    results = run_swap_ensemble(
        tails,
        heads,
        cfg.n,
        seeds,
        swap_p=cfg.swap_p,
        weights=weights,
        zero_tails=zero_tails,
        zero_heads=zero_heads,
        max_workers=cfg.max_workers,
    )
    elapsed = time.time() - t0

    args.output_dir.mkdir(parents=True, exist_ok=True)
    for idx, res in enumerate(results):
        write_sample(args.output_dir, idx, res, cfg.n)
    print(f"Saved {len(results)} sample(s) to {args.output_dir} in {elapsed:.2f}s")


if __name__ == "__main__":
    main()
