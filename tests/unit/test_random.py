import threading

import numpy as np

from icrnet.core import random as rnd
from icrnet.core.random import RandomSource


def test_uniform_int_degenerate_interval():
    source = RandomSource()
    assert all(source.uniform_int(5, 5) == 5 for _ in range(100))
    assert rnd.uniform_int(5, 5) == 5


def test_uniform_int_hits_both_endpoints():
    source = RandomSource(0)
    draws = {source.uniform_int(0, 3) for _ in range(500)}
    assert draws == {0, 1, 2, 3}


def test_uniform_real_range_and_mean():
    source = RandomSource(1)
    draws = np.array([source.uniform_real(-2.0, 4.0) for _ in range(10_000)])
    assert draws.min() >= -2.0
    assert draws.max() < 4.0
    assert abs(draws.mean() - 1.0) < 0.1


def test_normal_real_moments():
    source = RandomSource(2)
    draws = np.array([source.normal_real(3.0, 2.0) for _ in range(10_000)])
    assert abs(draws.mean() - 3.0) < 0.1
    assert abs(draws.var() - 4.0) < 0.3


def test_grids_have_requested_shape():
    source = RandomSource(3)
    uniform = source.uniform_grid(5, 3, 0.0, 1.0)
    normal = source.normal_grid(4, 2, mu=10.0, sigma=0.1)
    assert uniform.shape == (3, 5)
    assert ((uniform >= 0.0) & (uniform < 1.0)).all()
    assert normal.shape == (2, 4)
    assert abs(normal.mean() - 10.0) < 0.5


def test_seeded_sources_replay():
    first = RandomSource(42)
    second = RandomSource(42)
    a = [first.uniform_real() for _ in range(5)]
    b = [second.uniform_real() for _ in range(5)]
    assert a == b
    assert RandomSource(43).uniform_real() != a[0]


def test_module_seed_replaces_default_source():
    rnd.seed(9)
    a = rnd.uniform_grid(3, 3)
    rnd.seed(9)
    b = rnd.uniform_grid(3, 3)
    rnd.seed(None)
    assert np.array_equal(a, b)
    assert rnd.default_source().seed is None


def test_each_thread_gets_its_own_generator():
    source = RandomSource(5)
    generators = {}
    draws = {}

    def worker(name):
        generators[name] = source.generator()
        draws[name] = [source.uniform_real() for _ in range(8)]

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len({id(g) for g in generators.values()}) == 3
    sequences = {tuple(d) for d in draws.values()}
    assert len(sequences) == 3
