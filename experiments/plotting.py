import os
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def _ensure_dir(path: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def read_log(csv_path: str) -> pd.DataFrame:
    """Read a convergence.csv written by utils/recorder.py and coerce columns."""
    df = pd.read_csv(csv_path)
    for c in ["f_best", "f_mean", "gbest_f"]:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def sample_landscape(f: Callable[[np.ndarray], float], lower: float, upper: float,
                     resolution: int = 100) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Sample a 2D objective on a resolution x resolution grid over [lower, upper]^2.
    Returns (X, Y, Z) ready for contourf.
    """
    if resolution < 2:
        raise ValueError("resolution must be >= 2")
    ticks = np.linspace(lower, upper, resolution)
    X, Y = np.meshgrid(ticks, ticks)
    Z = np.empty_like(X)
    for i in range(resolution):
        for j in range(resolution):
            Z[i, j] = f(np.array([X[i, j], Y[i, j]]))
    return X, Y, Z


def plot_convergence(csv_path: str, outpath: Optional[str] = None, ykey: str = "gbest_f") -> str:
    """
    Convergence curve for a single run. Semilogy when every value is positive,
    linear otherwise (e.g. the negative-valued demo landscape).
    """
    df = read_log(csv_path)
    fig = plt.figure()
    ax = plt.gca()
    vals = df[ykey]
    if (vals <= 0).any():
        ax.plot(df["iter"], vals)
    else:
        ax.semilogy(df["iter"], vals)
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Best objective value")
    ax.grid(True, which="both", linestyle=":")
    ax.set_title("Convergence")

    if outpath is None:
        outpath = os.path.join(os.path.dirname(csv_path), f"{ykey}_conv.png")
    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath


def plot_swarm_2d(positions_snapshots: List[np.ndarray], outpath: str,
                  objective: Optional[Callable[[np.ndarray], float]] = None,
                  lower: float = 0.0, upper: float = 1.0,
                  best: Optional[np.ndarray] = None) -> Optional[str]:
    """
    Scatter of swarm snapshots (D == 2 only), optionally over a contour of the objective.
    """
    if not positions_snapshots or positions_snapshots[0].shape[1] != 2:
        return None

    fig = plt.figure()
    ax = plt.gca()
    if objective is not None:
        X, Y, Z = sample_landscape(objective, lower, upper)
        cs = ax.contourf(X, Y, Z, levels=30, cmap="viridis")
        fig.colorbar(cs, ax=ax)
    for pts in positions_snapshots:
        ax.scatter(pts[:, 0], pts[:, 1], s=8, alpha=0.4, color="red")
    if best is not None:
        ax.scatter([best[0]], [best[1]], marker="*", s=120, color="white", edgecolors="black")
    ax.set_xlim(lower, upper)
    ax.set_ylim(lower, upper)
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    ax.set_title("Swarm trajectory (D=2)")

    _ensure_dir(outpath)
    fig.savefig(outpath, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return outpath
