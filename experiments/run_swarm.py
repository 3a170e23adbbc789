# experiments/run_swarm.py
import argparse
import multiprocessing
import os
import sys
import time

import numpy as np

# Allow `python experiments/run_swarm.py` from the project root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from benchmarks.griewank import griewank, sphere
from benchmarks.simple_optim import simple_optim_function
from optimizer.pso import Swarm
from utils.recorder import (
    RunConfig,
    create_run_dir,
    save_convergence_csv,
    save_run_metadata,
    save_swarm_csv,
)
from experiments.plotting import plot_convergence, plot_swarm_2d

# name -> (objective, default lower, default upper, default D)
PROBLEMS = {
    "simple_optim": (simple_optim_function, 0.0, 1.0, 2),
    "griewank": (griewank, -600.0, 600.0, 5),
    "sphere": (sphere, -5.0, 5.0, 2),
}


def format_time(seconds):
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


def optimize(f, swarm: Swarm, n_iters: int, verbose: bool = True):
    """
    Batch driver: initialize once, then n_iters steps, collecting state() after each.
    Ctrl-C stops early and returns what was gathered so far.
    Returns (best, history).
    """
    swarm.set_objective_function(f)
    swarm.initialize()
    history = []
    start_time = time.time()

    try:
        for _ in range(n_iters):
            swarm.step()
            st = swarm.state()
            history.append(st)
            if verbose:
                elapsed = format_time(time.time() - start_time)
                print(f"[Iter {st['iter']}] Evals: {st['evals_total']} | Best: {st['gbest_f']:.6e} "
                      f"| Mean: {st['f_mean']:.6e} | Elapsed: {elapsed}")
    except KeyboardInterrupt:
        print("\n!!! Interrupted by user. Stopping early and saving current results... !!!")

    return swarm.best(), history


def main(argv=None):
    parser = argparse.ArgumentParser(description="Particle swarm optimisation on a benchmark problem")
    parser.add_argument("--problem", choices=sorted(PROBLEMS), default="simple_optim")
    parser.add_argument("--D", type=int, default=None, help="Dimension (simple_optim is 2D only)")
    parser.add_argument("--lower", type=float, default=None)
    parser.add_argument("--upper", type=float, default=None)
    parser.add_argument("--pop", type=int, default=50)
    parser.add_argument("--iters", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--w", type=float, default=0.4)
    parser.add_argument("--c1", type=float, default=1.0)
    parser.add_argument("--c2", type=float, default=1.0)
    parser.add_argument("--mode", choices=["sequential", "generational"], default="sequential")
    parser.add_argument("--jobs", type=int, default=1, help="Worker processes (generational mode only)")
    parser.add_argument("--trace_every", type=int, default=0, help="Record swarm positions every N iters")
    parser.add_argument("--out", type=str, default=None, help="Results root (default data/results)")
    parser.add_argument("--no-plots", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args(argv)

    f, lower, upper, dim = PROBLEMS[args.problem]
    lower = args.lower if args.lower is not None else lower
    upper = args.upper if args.upper is not None else upper
    dim = args.D if args.D is not None else dim
    if args.problem == "simple_optim" and dim != 2:
        parser.error("simple_optim is defined for D=2 only")
    if args.jobs > 1 and args.mode != "generational":
        parser.error("--jobs requires --mode generational")

    options = dict(pop=args.pop, w=args.w, c1=args.c1, c2=args.c2,
                   mode=args.mode, trace_every=args.trace_every)

    pool = None
    if args.jobs > 1:
        print(f"--- Parallel Mode Enabled: Using {args.jobs} workers ---")
        pool = multiprocessing.Pool(processes=args.jobs)
    try:
        swarm = Swarm(lower, upper, dim, seed=args.seed, options=options, pool=pool)
        best, history = optimize(f, swarm, args.iters, verbose=not args.quiet)
    finally:
        if pool:
            pool.close()
            pool.join()

    print("Best:", {"x": np.round(best["x"], 6).tolist(), "f": best["f"]})

    run_dir = create_run_dir(args.problem, root=args.out)
    cfg = RunConfig(problem=args.problem, mode=args.mode, n_particles=args.pop,
                    n_iters=len(history), dim=dim, lower=lower, upper=upper,
                    w=args.w, c1=args.c1, c2=args.c2, seed=args.seed)
    save_run_metadata(run_dir, cfg, extra={"x_best": best["x"], "f_best": best["f"]})
    log_path = save_convergence_csv(run_dir, history)
    trace = swarm.positions_trace()
    if trace:
        save_swarm_csv(run_dir, trace)
    print("Saved results to:", run_dir)

    if not args.no_plots and history:
        print("Saved convergence plot:", plot_convergence(str(log_path)))
        if dim == 2 and trace:
            out_png = plot_swarm_2d(trace, str(run_dir / "swarm2d.png"), objective=f,
                                    lower=lower, upper=upper, best=best["x"])
            print("Saved 2D swarm trajectory:", out_png)

    return best


if __name__ == "__main__":
    main()
