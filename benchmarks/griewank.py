import numpy as np


def griewank(x) -> float:
    """
    Griewank benchmark function.
    Global minimum at x = 0, f = 0. Bounds typically [-600, 600]^D.
    """
    x = np.asarray(x, dtype=float)
    s = np.sum(x * x) / 4000.0
    p = np.prod(np.cos(x / np.sqrt(np.arange(1, len(x) + 1, dtype=float))))
    return float(1.0 + s - p)


def sphere(x) -> float:
    """Convex bowl, minimum 0 at the origin."""
    x = np.asarray(x, dtype=float)
    return float(np.sum(x * x))

