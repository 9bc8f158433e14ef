# Author      : Tyson Limato
# Date        : 2025-7-03
# File Name   : vectors.py
import time

import numpy as np


# ------------------ Allocation ------------------
def allocate_vectors(group, local_n: int):
    """
    Allocate this rank's segments of x and y.

    Every rank takes part in the error check, so a rank that could not
    allocate never leaves its peers waiting in a later collective.

    Parameters:
    -----------
    group : ProcessGroup
        The process group of the run.
    local_n : int
        Segment length per rank.

    Returns:
    --------
    tuple (np.ndarray, np.ndarray)
        The uninitialized local segments of x and y.
    """
    local_x = local_y = None
    local_ok = True
    try:
        local_x = np.empty(local_n, dtype=np.float64)
        local_y = np.empty(local_n, dtype=np.float64)
    except (MemoryError, ValueError):
        # NumPy raises ValueError for sizes it cannot even describe
        local_ok = False
    group.check_for_error(local_ok, "allocate_vectors",
                          "Can't allocate local vector(s)")
    return local_x, local_y


# ------------------ Random Sources ------------------
class RandomSource:
    """
    Abstract source of vector values.

    Methods:
    --------
    fill(segment: np.ndarray)
        Overwrite every element of `segment` in place.
    """

    def fill(self, segment: np.ndarray):
        raise NotImplementedError


class WallClockSource(RandomSource):
    """
    Uniform values in [0, 1) seeded from the wall clock.

    The seed is `int(time.time()) + rank + instance`, so different ranks and
    the different vectors of one rank draw from different streams. Runs are
    not reproducible.

    Parameters:
    -----------
    rank : int
        Rank of the owning process.
    instance : int
        Identifies the vector within the rank (1 for x, 2 for y).
    """

    def __init__(self, rank: int, instance: int, clock=time.time):
        self.seed = int(clock()) + rank + instance
        self.rng = np.random.default_rng(self.seed)

    def fill(self, segment: np.ndarray):
        self.rng.random(out=segment)


def generate_vector(local_a: np.ndarray, source: RandomSource):
    """Fill the local segment from `source` and return it."""
    source.fill(local_a)
    return local_a


# ------------------ Local Compute Kernels ------------------
# Both kernels accept NumPy or CuPy arrays.
def scalar_multiply(local_a, scalar: float):
    """Multiply each element of the local segment by `scalar`, in place."""
    local_a *= scalar
    return local_a


def local_dot(local_x, local_y) -> float:
    """
    Partial dot product of two local segments of equal length.

    Returns:
    --------
    float
        sum(local_x[i] * local_y[i]) accumulated in double precision.
    """
    if local_x.shape != local_y.shape:
        raise ValueError(
            f"local_dot: segment shapes differ {local_x.shape} vs {local_y.shape}")
    return float(local_x.dot(local_y))
