from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np


PROJECT_ROOT = Path(__file__).resolve().parents[1]

RESULTS_ROOT = PROJECT_ROOT / "data" / "results"


@dataclass
class RunConfig:
    """Run configuration metadata stored next to each run."""
    problem: str         # e.g. "simple_optim", "griewank"
    mode: str            # "sequential" or "generational"
    n_particles: int
    n_iters: int
    dim: int
    lower: float
    upper: float
    w: float
    c1: float
    c2: float
    seed: int


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def create_run_dir(problem: str, root: Optional[Path] = None) -> Path:
    """
    Create and return a unique directory for one run:
        {root}/{problem}/run_YYYYmmdd_HHMMSS_XXXX/
    root defaults to data/results under the project root.
    """
    base = Path(root) if root is not None else RESULTS_ROOT
    base = base / problem
    _ensure_dir(base)

    now = datetime.now()
    run_dir = base / f"run_{now.strftime('%Y%m%d_%H%M%S')}_{now.strftime('%f')[-4:]}"
    n = 1
    while run_dir.exists():
        run_dir = base / f"run_{now.strftime('%Y%m%d_%H%M%S')}_{now.strftime('%f')[-4:]}_{n}"
        n += 1
    _ensure_dir(run_dir)
    return run_dir


def save_convergence_csv(run_dir: Path, history: Sequence[Dict[str, Any]]) -> Path:
    """
    Save per-iteration solver state to CSV:
        iter, evals, f_best, f_mean, gbest_f
    `history` is a list of Swarm.state() dicts.
    """
    path = Path(run_dir) / "convergence.csv"
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["iter", "evals", "f_best", "f_mean", "gbest_f"])
        for st in history:
            writer.writerow([st["iter"], st["evals_total"], st["f_best"], st["f_mean"], st["gbest_f"]])
    return path


def save_swarm_csv(run_dir: Path, swarm_history: Sequence[np.ndarray]) -> Path:
    """
    Save swarm positions over time. Each entry is a (n_particles, D) array.

    CSV columns:
        iter, particle, x1, ..., xD
    """
    path = Path(run_dir) / "swarm.csv"
    dim = swarm_history[0].shape[1] if len(swarm_history) else 0
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["iter", "particle"] + [f"x{j + 1}" for j in range(dim)])
        for it, swarm in enumerate(swarm_history):
            for pid, pos in enumerate(swarm):
                writer.writerow([it, pid] + [float(c) for c in pos])
    return path


def save_run_metadata(run_dir: Path, config: RunConfig, extra: Dict[str, Any] | None = None) -> Path:
    """Save run configuration and optional extra info to metadata.json."""
    meta: Dict[str, Any] = asdict(config)
    if extra:
        meta.update(extra)

    path = Path(run_dir) / "metadata.json"
    with path.open("w") as f:
        json.dump(meta, f, indent=2, default=_jsonable)
    return path


def _jsonable(obj):
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.generic):
        return obj.item()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
