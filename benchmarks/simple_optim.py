import math
from typing import List, Tuple

import numpy as np

N_WAVES = 9


def simple_optim_function(x) -> float:
    """
    2D demo landscape on the unit square:
        f(x, y) = -[15 x y (1-x) (1-y) sin(9 pi x) sin(9 pi y)]^2
    and 0 outside [0, 1] x [0, 1].
    Many local minima; the deepest sits at (0.5, 0.5) with f ~ -0.879.
    """
    x = np.asarray(x, dtype=float)
    a, b = float(x[0]), float(x[1])
    if a > 1 or a < 0 or b > 1 or b < 0:
        return 0.0
    g = 15 * a * b * (1 - a) * (1 - b) * math.sin(N_WAVES * math.pi * a) * math.sin(N_WAVES * math.pi * b)
    return -g * g


def simple_optim_basins() -> List[Tuple[float, float]]:
    """Centres of the wells: both coordinates at an odd multiple of 1/18."""
    centres = [(2 * k + 1) / (2 * N_WAVES) for k in range(N_WAVES)]
    return [(cx, cy) for cx in centres for cy in centres]
