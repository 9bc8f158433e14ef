# Author      : Tyson Limato
# Date        : 2025-7-10
# File Name   : test_dot_timing.py
import numpy as np
import pytest

from dot_timing import parallel_dot_product, timed_dot_product
from vectors import scalar_multiply

N = 240


@pytest.fixture(scope="module")
def global_vectors():
    rng = np.random.default_rng(7)
    return rng.random(N), rng.random(N)


@pytest.mark.parametrize("size", [1, 2, 3, 4, 6])
def test_parallel_dot_matches_sequential_for_any_size(group_runner, global_vectors, size):
    x, y = global_vectors
    local_n = N // size

    def target(group):
        lx = group.scatter(x if group.is_root else None, local_n)
        ly = group.scatter(y if group.is_root else None, local_n)
        return parallel_dot_product(group, lx, ly)

    results = group_runner(size, target)
    sequential = float(np.sum(x * y))
    assert results[0] == pytest.approx(sequential, rel=1e-9)
    assert all(r is None for r in results[1:])


def test_scaling_is_quadratic(group_runner, global_vectors):
    x, y = global_vectors
    s = -3.5

    def target(group):
        lx = group.scatter(x if group.is_root else None, N // 4)
        ly = group.scatter(y if group.is_root else None, N // 4)
        before = parallel_dot_product(group, lx, ly)
        scalar_multiply(lx, s)
        scalar_multiply(ly, s)
        return before, parallel_dot_product(group, lx, ly)

    before, after = group_runner(4, target)[0]
    assert after == pytest.approx(s ** 2 * before, rel=1e-9)


def test_timed_dot_product_reports_elapsed_on_every_rank(group_runner):
    def target(group):
        return timed_dot_product(group, np.ones(5), np.full(5, 2.0))

    results = group_runner(3, target)
    assert results[0][0] == pytest.approx(30.0)
    for rank, (value, elapsed) in enumerate(results):
        assert elapsed >= 0.0
        if rank:
            assert value is None
