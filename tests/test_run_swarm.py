import pytest

from experiments.run_swarm import main, optimize
from experiments.plotting import sample_landscape
from optimizer.pso import Swarm
from benchmarks.simple_optim import simple_optim_function

def test_optimize_collects_history():
    swarm = Swarm(0.0, 1.0, 2, seed=1, options={"pop": 10})
    best, history = optimize(simple_optim_function, swarm, 15, verbose=False)
    assert len(history) == 15
    assert history[-1]["gbest_f"] == best["f"]
    assert all(a["gbest_f"] >= b["gbest_f"] for a, b in zip(history, history[1:]))

def test_main_writes_results(tmp_path):
    best = main(["--problem", "simple_optim", "--pop", "10", "--iters", "20",
                 "--trace_every", "5", "--out", str(tmp_path), "--quiet"])
    run_dirs = list((tmp_path / "simple_optim").iterdir())
    assert len(run_dirs) == 1
    names = {p.name for p in run_dirs[0].iterdir()}
    assert {"metadata.json", "convergence.csv", "swarm.csv", "gbest_f_conv.png", "swarm2d.png"} <= names
    assert best["f"] <= 0.0

def test_main_rejects_wrong_dimension(tmp_path):
    with pytest.raises(SystemExit):
        main(["--problem", "simple_optim", "--D", "3", "--out", str(tmp_path)])

def test_sample_landscape_shape():
    X, Y, Z = sample_landscape(simple_optim_function, 0.0, 1.0, resolution=11)
    assert Z.shape == (11, 11)
    assert Z[5, 5] == simple_optim_function([0.5, 0.5])
