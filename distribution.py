# Author      : Tyson Limato
# Date        : 2025-7-02
# File Name   : distribution.py
from vector_errors import ConfigurationError


def compute_local_n(n: int, size: int) -> int:
    """
    Number of elements each rank owns in a block distribution of order `n`.

    The check only uses values every rank already has, so all ranks reach the
    same verdict without communicating.

    Raises:
    -------
    ConfigurationError
        If `n` is not positive or not evenly divisible by `size`.
    """
    if n <= 0:
        raise ConfigurationError(
            "n", f"Order of the vectors should be a positive integer, got n={n}")
    if n % size != 0:
        raise ConfigurationError(
            "n", f"Order of the vectors (n={n}) should be evenly divisible "
                 f"by the number of processes ({size})")
    return n // size


def segment_bounds(rank: int, local_n: int):
    """Global index range [start, stop) held by `rank`."""
    start = rank * local_n
    return start, start + local_n
