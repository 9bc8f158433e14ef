# Author      : Tyson Limato
# Date        : 2025-7-09
# File Name   : conftest.py
import threading
from functools import reduce

import numpy as np
import pytest
from mpi4py import MPI

from distribution import segment_bounds
from mpiMGR import ProcessGroup
from vector_errors import VectorOpsError


class _SharedState:
    def __init__(self, size):
        self.size = size
        self.barrier = threading.Barrier(size, timeout=20)
        self.slots = [None] * size
        self.aborted = []


class ThreadComm:
    """
    In-process stand-in for an mpi4py communicator; one instance per thread.

    Only implements the calls ProcessGroup makes. Every collective is an
    exchange through shared slots bracketed by two barrier waits.
    """

    def __init__(self, shared, rank):
        self.shared = shared
        self.rank = rank

    def Get_rank(self):
        return self.rank

    def Get_size(self):
        return self.shared.size

    def _exchange(self, value):
        self.shared.slots[self.rank] = value
        self.shared.barrier.wait()
        values = list(self.shared.slots)
        self.shared.barrier.wait()
        return values

    @staticmethod
    def _combine(values, op):
        if op == MPI.SUM:
            return reduce(lambda a, b: a + b, values)
        if op == MPI.MIN:
            return min(values)
        if op == MPI.MAX:
            return max(values)
        raise NotImplementedError(op)

    def Barrier(self):
        self.shared.barrier.wait()

    def Scatter(self, sendbuf, recvbuf, root=0):
        values = self._exchange(sendbuf if self.rank == root else None)
        start, stop = segment_bounds(self.rank, len(recvbuf))
        recvbuf[:] = values[root][start:stop]

    def Gather(self, sendbuf, recvbuf, root=0):
        values = self._exchange(np.array(sendbuf, copy=True))
        if self.rank == root:
            recvbuf[:] = np.concatenate(values)

    def reduce(self, sendobj, op=MPI.SUM, root=0):
        values = self._exchange(sendobj)
        return self._combine(values, op) if self.rank == root else None

    def allreduce(self, sendobj, op=MPI.SUM):
        return self._combine(self._exchange(sendobj), op)

    def Abort(self, errorcode=0):
        self.shared.aborted.append((self.rank, errorcode))
        self.shared.barrier.abort()


def run_group(size, target):
    """
    Run `target(group)` on `size` threads, one ProcessGroup per simulated rank.

    Returns:
    --------
    list
        Per-rank results; an exception raised on a rank is returned in its slot.
    """
    shared = _SharedState(size)
    results = [None] * size

    def worker(rank):
        group = ProcessGroup(ThreadComm(shared, rank))
        try:
            results[rank] = target(group)
        except VectorOpsError as err:
            # raised on every rank at the same point, nobody is left waiting
            results[rank] = err
        except Exception as err:  # reported back to the test
            results[rank] = err
            shared.barrier.abort()

    threads = [threading.Thread(target=worker, args=(r,)) for r in range(size)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


class ConstantSource:
    """Fills a segment with one value."""

    def __init__(self, value):
        self.value = value

    def fill(self, segment):
        segment[:] = self.value


class GlobalArraySource:
    """Fills a rank's segment from the matching block of a known global vector."""

    def __init__(self, values, rank):
        self.values = np.asarray(values, dtype=np.float64)
        self.rank = rank

    def fill(self, segment):
        start, stop = segment_bounds(self.rank, len(segment))
        segment[:] = self.values[start:stop]


@pytest.fixture
def group_runner():
    return run_group
