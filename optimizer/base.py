from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple
import math
import numpy as np

Objective = Callable[[np.ndarray], float]

MODES = ("sequential", "generational")


class SwarmError(Exception):
    """Base class for solver errors."""


class InvalidConfiguration(SwarmError, ValueError):
    """Bad swarm size, dimension, bounds or update mode."""


class MissingObjectiveFunction(SwarmError, RuntimeError):
    """initialize()/step() called before an objective was set."""


def project(x: np.ndarray, bounds: Tuple[float, float]) -> np.ndarray:
    """Hard clamp of x into the shared [lo, hi] range."""
    lo, hi = bounds
    return np.minimum(np.maximum(x, float(lo)), float(hi))


@dataclass(frozen=True)
class SwarmConfig:
    """Immutable solver configuration. Weights are not range-checked."""
    pop: int
    dim: int
    lower: float
    upper: float
    w: float = 0.4
    c1: float = 1.0
    c2: float = 1.0
    mode: str = "sequential"
    trace_every: int = 0

    def __post_init__(self):
        if self.pop < 1:
            raise InvalidConfiguration(f"swarm size must be >= 1, got {self.pop}")
        if self.dim < 1:
            raise InvalidConfiguration(f"dimension must be >= 1, got {self.dim}")
        if not (math.isfinite(self.lower) and math.isfinite(self.upper)):
            raise InvalidConfiguration(f"bounds must be finite, got [{self.lower}, {self.upper}]")
        if self.lower > self.upper:
            raise InvalidConfiguration(f"lower bound {self.lower} > upper bound {self.upper}")
        if self.mode not in MODES:
            raise InvalidConfiguration(f"unknown update mode {self.mode!r}, expected one of {MODES}")
        if self.trace_every < 0:
            raise InvalidConfiguration(f"trace_every must be >= 0, got {self.trace_every}")

    @classmethod
    def from_options(cls, lower: float, upper: float, dim: int,
                     options: Optional[Dict] = None) -> "SwarmConfig":
        opt = options or {}
        return cls(
            pop=int(opt.get("pop", 50)),
            dim=int(dim),
            lower=float(lower),
            upper=float(upper),
            w=float(opt.get("w", 0.4)),
            c1=float(opt.get("c1", 1.0)),
            c2=float(opt.get("c2", 1.0)),
            mode=str(opt.get("mode", "sequential")),
            trace_every=int(opt.get("trace_every", 0)),
        )

    @property
    def span(self) -> float:
        return abs(self.upper - self.lower)


def as_score(value) -> float:
    # NaN never wins a strict comparison; map it to +inf so stats stay sane
    f = float(value)
    return math.inf if math.isnan(f) else f

