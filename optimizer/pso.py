from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging
import math
import numpy as np
from .base import (
    InvalidConfiguration,
    MissingObjectiveFunction,
    Objective,
    SwarmConfig,
    as_score,
    project,
)

logger = logging.getLogger(__name__)


@dataclass
class Particle:
    x: np.ndarray
    v: np.ndarray
    pbest_x: np.ndarray
    pbest_f: float


@dataclass(frozen=True, eq=False)
class ParticleView:
    """Read-only snapshot of one particle. Arrays are copies with the write flag off."""
    index: int
    position: np.ndarray
    velocity: np.ndarray
    personal_best: np.ndarray
    personal_best_f: float


def _frozen(a: np.ndarray) -> np.ndarray:
    out = a.copy()
    out.setflags(write=False)
    return out


class Swarm:
    """
    Particle Swarm Optimisation (continuous, minimisation)
    - inertia w, cognitive c1, social c2, one shared [lower, upper] box
    - r1, r2 drawn once per particle per step, shared by all dimensions
    - hard position clamp, velocity left untouched by the clamp
    - "sequential" mode: particles see global-best updates made earlier in the same step
    - "generational" mode: global best snapshotted per step, scoring can go through a pool
    """
    def __init__(self, lower: float, upper: float, dim: int, seed: int = 0,
                 options: Optional[Dict] = None, rng: Optional[np.random.Generator] = None,
                 objective: Optional[Objective] = None, pool=None):
        self.config: SwarmConfig = SwarmConfig.from_options(lower, upper, dim, options)
        self.rng = rng if rng is not None else np.random.default_rng(int(seed))
        if pool is not None and self.config.mode != "generational":
            raise InvalidConfiguration("a pool is only used by mode='generational'")
        self.pool = pool

        self._objective: Optional[Objective] = None
        if objective is not None:
            self.set_objective_function(objective)

        self._swarm: List[Particle] = []
        self.gbest_x: Optional[np.ndarray] = None
        self.gbest_f: float = math.inf
        self._reset_counters()

    def _reset_counters(self):
        self._iters = 0
        self._evals_total = 0
        self._iter_best = math.inf
        self._iter_mean = math.inf
        self._iter_std = math.inf
        self._positions_trace: List[np.ndarray] = []

    # ------------------------------------------------------------------ setup
    def set_objective_function(self, f: Objective):
        if not callable(f):
            raise InvalidConfiguration(f"objective must be callable, got {type(f).__name__}")
        self._objective = f

    @property
    def objective(self) -> Optional[Objective]:
        return self._objective

    def _require_objective(self) -> Objective:
        if self._objective is None:
            raise MissingObjectiveFunction("set_objective_function() must be called first")
        return self._objective

    def _evaluate(self, x: np.ndarray) -> float:
        # objective gets a copy so it cannot reach into particle buffers
        self._evals_total += 1
        return as_score(self._objective(x.copy()))

    def initialize(self):
        """Fresh random population; discards any previous one."""
        self._require_objective()
        cfg = self.config
        span = cfg.span

        self._swarm = []
        self.gbest_x = None
        self.gbest_f = math.inf
        self._reset_counters()

        for i in range(cfg.pop):
            x = self.rng.uniform(cfg.lower, cfg.upper, size=cfg.dim)
            v = self.rng.uniform(-span, span, size=cfg.dim)
            fx = self._evaluate(x)
            self._swarm.append(Particle(x=x, v=v, pbest_x=x.copy(), pbest_f=fx))
            # first particle seeds the global best; afterwards strictly better only
            if i == 0 or fx < self.gbest_f:
                self.gbest_x = x.copy()
                self.gbest_f = fx

        logger.debug("initialized %d particles in D=%d, gbest_f=%.6e",
                     cfg.pop, cfg.dim, self.gbest_f)

    # ------------------------------------------------------------------ update
    def _move(self, p: Particle, g: np.ndarray):
        cfg = self.config
        r1 = self.rng.random()
        r2 = self.rng.random()
        p.v = cfg.w * p.v + cfg.c1 * r1 * (p.pbest_x - p.x) + cfg.c2 * r2 * (g - p.x)
        p.x = project(p.x + p.v, (cfg.lower, cfg.upper))

    def _accept(self, p: Particle, fx: float):
        if fx < p.pbest_f:
            p.pbest_f = fx
            p.pbest_x = p.x.copy()
        if p.pbest_f < self.gbest_f:
            self.gbest_f = p.pbest_f
            self.gbest_x = p.pbest_x.copy()
            logger.debug("iter %d: new gbest_f=%.6e", self._iters + 1, self.gbest_f)

    def _step_sequential(self) -> List[float]:
        scores = []
        for p in self._swarm:
            self._move(p, self.gbest_x)
            fx = self._evaluate(p.x)
            self._accept(p, fx)
            scores.append(fx)
        return scores

    def _step_generational(self) -> List[float]:
        g = self.gbest_x.copy()
        for p in self._swarm:
            self._move(p, g)
        X = [p.x.copy() for p in self._swarm]
        if self.pool is not None:
            raw = list(self.pool.map(self._objective, X))
        else:
            raw = [self._objective(x) for x in X]
        self._evals_total += len(X)
        scores = [as_score(f) for f in raw]
        # serial reduction in particle order keeps first-seen-wins tie breaking
        for p, fx in zip(self._swarm, scores):
            self._accept(p, fx)
        return scores

    def step(self):
        """One sweep over every particle."""
        self._require_objective()
        if not self._swarm:
            raise RuntimeError("initialize() must be called before step()")

        if self.config.mode == "generational":
            scores = self._step_generational()
        else:
            scores = self._step_sequential()

        f_arr = np.asarray(scores, dtype=float)
        valid = f_arr[np.isfinite(f_arr)]
        if valid.size:
            self._iter_best = float(np.min(valid))
            self._iter_mean = float(np.mean(valid))
            self._iter_std = float(np.std(valid))
        else:
            self._iter_best = math.inf
            self._iter_mean = math.inf
            self._iter_std = 0.0
        self._iters += 1

        every = self.config.trace_every
        if every and self._iters % every == 0:
            self._positions_trace.append(self.positions())

    def run(self, n_iterations: int) -> Dict:
        """initialize() once, then exactly n_iterations steps."""
        n = int(n_iterations)
        if n < 0:
            raise InvalidConfiguration(f"n_iterations must be >= 0, got {n_iterations}")
        self.initialize()
        for _ in range(n):
            self.step()
        logger.info("run finished after %d iterations: gbest_f=%.6e x=%s", n, self.gbest_f, self.gbest_x)
        return self.best()

    # ------------------------------------------------------------------ read access
    @property
    def initialized(self) -> bool:
        return bool(self._swarm)

    @property
    def particles(self) -> Tuple[ParticleView, ...]:
        return tuple(
            ParticleView(
                index=i,
                position=_frozen(p.x),
                velocity=_frozen(p.v),
                personal_best=_frozen(p.pbest_x),
                personal_best_f=float(p.pbest_f),
            )
            for i, p in enumerate(self._swarm)
        )

    @property
    def global_best_position(self) -> Optional[np.ndarray]:
        return None if self.gbest_x is None else _frozen(self.gbest_x)

    @property
    def global_best_score(self) -> float:
        return float(self.gbest_f)

    def positions(self) -> np.ndarray:
        """Current positions as a (pop, D) array copy."""
        if not self._swarm:
            return np.empty((0, self.config.dim))
        return np.stack([p.x.copy() for p in self._swarm], axis=0)

    def best(self) -> Dict:
        x = None if self.gbest_x is None else self.gbest_x.copy()
        return {"x": x, "f": float(self.gbest_f)}

    def state(self) -> Dict:
        return {
            "iter": self._iters,
            "evals_total": self._evals_total,
            "f_best": self._iter_best,
            "f_mean": self._iter_mean,
            "f_std": self._iter_std,
            "gbest_f": float(self.gbest_f),
            "gbest_x": None if self.gbest_x is None else self.gbest_x.copy(),
            "trace_len": len(self._positions_trace),
        }

    def positions_trace(self) -> List[np.ndarray]:
        """Recorded (pop, D) snapshots. Empty if tracing is disabled."""
        return list(self._positions_trace)
