import csv
import json

import numpy as np
from optimizer.pso import Swarm
from benchmarks.griewank import sphere
from utils.recorder import (
    RunConfig,
    create_run_dir,
    save_convergence_csv,
    save_run_metadata,
    save_swarm_csv,
)

def _run(tmp_path):
    s = Swarm(-5.0, 5.0, 3, seed=0, options={"pop": 4, "trace_every": 1}, objective=sphere)
    s.initialize()
    history = []
    for _ in range(5):
        s.step()
        history.append(s.state())
    return s, history, create_run_dir("sphere", root=tmp_path)

def test_run_dirs_are_unique(tmp_path):
    a = create_run_dir("sphere", root=tmp_path)
    b = create_run_dir("sphere", root=tmp_path)
    assert a != b
    assert a.parent == tmp_path / "sphere"

def test_convergence_csv(tmp_path):
    s, history, run_dir = _run(tmp_path)
    path = save_convergence_csv(run_dir, history)
    with path.open() as fh:
        rows = list(csv.DictReader(fh))
    assert list(rows[0].keys()) == ["iter", "evals", "f_best", "f_mean", "gbest_f"]
    assert int(rows[-1]["evals"]) == 4 * 6
    assert [int(r["iter"]) for r in rows] == [1, 2, 3, 4, 5]
    assert float(rows[-1]["gbest_f"]) == s.global_best_score

def test_swarm_csv(tmp_path):
    s, _, run_dir = _run(tmp_path)
    path = save_swarm_csv(run_dir, s.positions_trace())
    with path.open() as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == ["iter", "particle", "x1", "x2", "x3"]
    assert len(rows) == 1 + 5 * 4

def test_metadata(tmp_path):
    s, _, run_dir = _run(tmp_path)
    cfg = RunConfig(problem="sphere", mode="sequential", n_particles=4, n_iters=5, dim=3,
                    lower=-5.0, upper=5.0, w=0.4, c1=1.0, c2=1.0, seed=0)
    best = s.best()
    path = save_run_metadata(run_dir, cfg, extra={"x_best": best["x"], "f_best": best["f"]})
    meta = json.loads(path.read_text())
    assert meta["n_particles"] == 4
    assert np.allclose(meta["x_best"], best["x"])
