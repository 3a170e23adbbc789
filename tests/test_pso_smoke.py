import numpy as np
from optimizer.pso import Swarm
from benchmarks.griewank import griewank, sphere

def test_swarm_runs_and_improves():
    D = 2
    opt = Swarm(-600.0, 600.0, D, seed=0, options={"pop": 20, "w": 0.72, "c1": 1.49, "c2": 1.49})
    opt.set_objective_function(griewank)
    opt.initialize()
    start = opt.state()["gbest_f"]
    for _ in range(50):
        opt.step()
        best = opt.state()["gbest_f"]
        assert np.isfinite(best)
    assert best <= start
    assert opt.state()["evals_total"] == 20 * 51

def test_swarm_converges_on_sphere():
    opt = Swarm(-5.0, 5.0, 2, seed=123, objective=sphere,
                options={"pop": 20, "w": 0.72, "c1": 1.49, "c2": 1.49})
    result = opt.run(150)
    assert result["f"] < 1e-2, f"Sphere minimum not reached, f_best={result['f']}"
