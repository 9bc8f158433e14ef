# Author      : Tyson Limato
# Date        : 2025-7-04
# File Name   : dot_timing.py
from mpi4py import MPI

from vectors import local_dot


def parallel_dot_product(group, local_x, local_y):
    """
    Global dot product of two block-distributed vectors, summed on root.

    Returns:
    --------
    float or None
        The global dot product on root, None on the other ranks.
    """
    return group.reduce(local_dot(local_x, local_y), op=MPI.SUM)


def timed_dot_product(group, local_x, local_y):
    """
    Time the local partial products together with the sum-reduction.

    A barrier right before the timer starts keeps skew from earlier phases out
    of the measurement. Every rank measures its own interval; only the root's
    value is reported by the caller.

    Returns:
    --------
    tuple (float or None, float)
        (global dot product on root / None elsewhere, elapsed seconds)
    """
    # Synchronize before starting the timer
    group.barrier()
    start = group.wtime()
    global_dot = parallel_dot_product(group, local_x, local_y)
    end = group.wtime()
    return global_dot, end - start
