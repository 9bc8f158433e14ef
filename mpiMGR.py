# Author      : Tyson Limato
# Date        : 2025-7-02
# File Name   : mpiMGR.py
import sys
import traceback

import numpy as np
from mpi4py import MPI

from vector_errors import AllocationError, VectorOpsError


class ProcessGroup:
    """
    A thin wrapper around an `mpi4py` communicator for block-distributed vectors.

    Every rank of a run builds one ProcessGroup at startup and hands it to each
    function that communicates. All collectives are blocking and must be called
    by every rank in the same order.

    Parameters:
    -----------
    comm : MPI.Comm
        Communicator to wrap (default: MPI.COMM_WORLD).
    root : int
        Rank that receives reductions and gathers and does all printing.

    Methods:
    --------
    barrier()
        Block until every rank reaches the barrier.

    scatter(global_vector, local_n)
        Split a root-held vector into contiguous blocks, one per rank.

    gather(local_segment, recvbuf)
        Concatenate every rank's segment, in rank order, into `recvbuf` on root.

    reduce(value, op) / allreduce(value, op)
        Combine one value per rank on root / on every rank.

    check_for_error(local_ok, fname, message)
        Turn a local failure on any rank into an AllocationError on all ranks.
    """

    def __init__(self, comm=None, root: int = 0):
        # Initialize the MPI communicator
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        # Get the rank (ID) of the current process
        self.rank = self.comm.Get_rank()
        # Get the total number of processes
        self.size = self.comm.Get_size()
        self.root = root

    @property
    def is_root(self) -> bool:
        return self.rank == self.root

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        sys.stdout.flush()
        sys.stderr.flush()
        if exc_type is None or issubclass(
                exc_type, (VectorOpsError, SystemExit, KeyboardInterrupt)):
            return False
        # Anything else happened on this rank only; peers may already be
        # blocked in a collective, so take the whole group down.
        print(f"Proc {self.rank} > unexpected failure, aborting the group",
              file=sys.stderr)
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
        self.comm.Abort(1)
        return False

    def barrier(self):
        self.comm.Barrier()

    def wtime(self) -> float:
        return MPI.Wtime()

    def scatter(self, global_vector, local_n: int) -> np.ndarray:
        """
        Distribute `global_vector` (only read on root) in blocks of `local_n`.

        Returns:
        --------
        np.ndarray
            This rank's segment, i.e. global indices [rank*local_n, (rank+1)*local_n).
        """
        sendbuf = None
        if self.is_root:
            sendbuf = np.ascontiguousarray(global_vector, dtype=np.float64)
        local_segment = np.empty(local_n, dtype=np.float64)
        self.comm.Scatter(sendbuf, local_segment, root=self.root)
        return local_segment

    def gather(self, local_segment, recvbuf=None):
        """
        Gather every rank's segment into `recvbuf` on root.

        Parameters:
        -----------
        local_segment : np.ndarray
            This rank's block; all blocks must have the same length.
        recvbuf : np.ndarray or None
            Full-length float64 buffer on root, ignored on the other ranks.

        Returns:
        --------
        np.ndarray or None
            `recvbuf` on root, None elsewhere.
        """
        sendbuf = np.ascontiguousarray(local_segment, dtype=np.float64)
        self.comm.Gather(sendbuf, recvbuf if self.is_root else None, root=self.root)
        return recvbuf if self.is_root else None

    def reduce(self, value, op=MPI.SUM):
        """Reduce `value` onto root. Returns None on the other ranks."""
        return self.comm.reduce(value, op=op, root=self.root)

    def allreduce(self, value, op=MPI.SUM):
        return self.comm.allreduce(value, op=op)

    def check_for_error(self, local_ok, fname: str, message: str):
        """
        Check whether any rank has found an error.

        Every rank must call this, including ranks that did not fail. The
        per-rank flags are combined with a MIN all-reduce so that all ranks see
        the same verdict and leave together.

        Raises:
        -------
        AllocationError
            On every rank, when at least one rank passed a false `local_ok`.
        """
        ok = self.allreduce(1 if local_ok else 0, op=MPI.MIN)
        if ok == 0:
            raise AllocationError(fname, message, rank=self.root)
