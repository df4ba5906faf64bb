import json

import numpy as np
import pytest

from swapchain.algorithms.chain import WeightedSwapResult, simple_swap_n
from swapchain.experiments.run_swaps import main, run_swap_ensemble


EDGES = ([0, 1, 2, 3, 0, 2], [1, 2, 3, 0, 2, 1])


def test_ensemble_matches_single_chains():
    """Each seed gives the sample its own chain would."""
    tails, heads = EDGES
    results = run_swap_ensemble(tails, heads, 200, seeds=[1, 2, 3], swap_p=0.5, max_workers=1)
    assert [r.seed for r in results] == [1, 2, 3]
    for res in results:
        assert res.tails == simple_swap_n(tails, heads, 200, 0.5, seed=res.seed).tails


def test_ensemble_weighted_mode():
    tails, heads = EDGES
    results = run_swap_ensemble(
        tails, heads, 50, seeds=[7], weights=np.ones((4, 4)), zero_tails=[0], zero_heads=[0]
    )
    assert isinstance(results[0], WeightedSwapResult)
    assert len(results[0].records) == 50


def test_ensemble_without_seeds():
    assert run_swap_ensemble(*EDGES, 10, seeds=[]) == []


def _write_edges(tmp_path):
    path = tmp_path / "edges.txt"
    path.write_text("\n".join(f"{t} {h}" for t, h in zip(*EDGES)) + "\n")
    return path


def test_cli_uniform_run(tmp_path, capsys):
    edges = _write_edges(tmp_path)
    out = tmp_path / "out"
    main(["--edges", str(edges), "--n", "100", "--seed", "4", "5", "--max-workers", "1", "--output-dir", str(out)])
    assert len(list(out.glob("*_edges.csv"))) == 2
    assert not list(out.glob("*_steps.csv"))
    meta = json.loads((out / "sample000_seed4_meta.json").read_text())
    assert meta["seed"] == 4
    assert meta["n"] == 100
    assert "Saved 2 sample(s)" in capsys.readouterr().out


def test_cli_weighted_run_with_config(tmp_path):
    edges = _write_edges(tmp_path)
    weights = tmp_path / "w.csv"
    weights.write_text("\n".join(",".join(["1"] * 4) for _ in range(4)) + "\n")
    zeros = tmp_path / "zeros.txt"
    zeros.write_text("0 0\n1 1\n2 2\n3 3\n")
    config = tmp_path / "chain.json"
    config.write_text(json.dumps({"n": 40, "seeds": [9]}))
    out = tmp_path / "out"
    main(
        [
            "--edges", str(edges),
            "--config", str(config),
            "--weights", str(weights),
            "--zeros", str(zeros),
            "--output-dir", str(out),
        ]
    )
    assert (out / "sample000_seed9_steps.csv").exists()
    meta = json.loads((out / "sample000_seed9_meta.json").read_text())
    assert meta["steps"] == 40


def test_cli_requires_n(tmp_path):
    edges = _write_edges(tmp_path)
    with pytest.raises(SystemExit):
        main(["--edges", str(edges)])


def test_cli_zeros_need_weights(tmp_path):
    edges = _write_edges(tmp_path)
    with pytest.raises(SystemExit):
        main(["--edges", str(edges), "--n", "5", "--zeros", str(edges)])


def test_cli_n_flag_completes_partial_config(tmp_path):
    """A config without 'n' works when --n is given on the command line."""
    edges = _write_edges(tmp_path)
    config = tmp_path / "chain.json"
    config.write_text(json.dumps({"seeds": [1]}))
    out = tmp_path / "out"
    main(["--edges", str(edges), "--config", str(config), "--n", "10", "--output-dir", str(out)])
    meta = json.loads((out / "sample000_seed1_meta.json").read_text())
    assert meta["n"] == 10


def test_cli_flags_override_config(tmp_path):
    edges = _write_edges(tmp_path)
    config = tmp_path / "chain.json"
    config.write_text(json.dumps({"n": 5, "seeds": [1]}))
    out = tmp_path / "out"
    main(["--edges", str(edges), "--config", str(config), "--seed", "3", "--output-dir", str(out)])
    meta = json.loads((out / "sample000_seed3_meta.json").read_text())
    assert meta["n"] == 5


@pytest.mark.parametrize("raw", [{"seeds": None}, {"n": "5"}, {"n": None}])
def test_cli_bad_config_reports_error(tmp_path, capsys, raw):
    edges = _write_edges(tmp_path)
    config = tmp_path / "chain.json"
    config.write_text(json.dumps(raw))
    with pytest.raises(SystemExit):
        main(["--edges", str(edges), "--config", str(config), "--n", "5"])
    assert "error" in capsys.readouterr().err
