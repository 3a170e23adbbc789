import math

import numpy as np
from benchmarks.griewank import griewank, sphere
from benchmarks.simple_optim import simple_optim_function, simple_optim_basins

def test_griewank_zero():
    assert griewank(np.zeros(5)) == 0.0

def test_sphere():
    assert sphere([3.0, 4.0]) == 25.0

def test_simple_optim_centre():
    expected = -(15 * 0.0625) ** 2
    assert math.isclose(simple_optim_function([0.5, 0.5]), expected, rel_tol=1e-12)

def test_simple_optim_neutral_outside_unit_square():
    for x in ([-0.1, 0.5], [0.5, 1.1], [2.0, 2.0]):
        assert simple_optim_function(x) == 0.0

def test_simple_optim_never_positive():
    rng = np.random.default_rng(0)
    for x in rng.uniform(0.0, 1.0, size=(200, 2)):
        assert simple_optim_function(x) <= 0.0

def test_basins_grid():
    basins = simple_optim_basins()
    assert len(basins) == 81
    assert (0.5, 0.5) in basins
    best = min(basins, key=simple_optim_function)
    assert best == (0.5, 0.5)
