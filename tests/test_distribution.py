# Author      : Tyson Limato
# Date        : 2025-7-09
# File Name   : test_distribution.py
import pytest

from distribution import compute_local_n, segment_bounds
from vector_errors import ConfigurationError


@pytest.mark.parametrize("n,size", [(8, 4), (25, 5), (12, 1), (300, 6), (7, 7)])
def test_local_sizes_cover_the_vector(n, size):
    local_n = compute_local_n(n, size)
    assert local_n == n // size
    assert local_n * size == n
    assert local_n > 0


def test_segments_are_contiguous_and_ordered():
    local_n = compute_local_n(12, 4)
    bounds = [segment_bounds(r, local_n) for r in range(4)]
    assert bounds == [(0, 3), (3, 6), (6, 9), (9, 12)]


@pytest.mark.parametrize("n", [0, -4])
def test_non_positive_order_is_rejected(n):
    with pytest.raises(ConfigurationError) as info:
        compute_local_n(n, 2)
    assert info.value.parameter == "n"
    assert "positive" in str(info.value)


def test_indivisible_order_is_rejected():
    with pytest.raises(ConfigurationError) as info:
        compute_local_n(7, 3)
    assert "divisible" in str(info.value)
    assert info.value.exit_status != 0
