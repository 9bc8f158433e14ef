# ------------------------------------------------------------
# Author      : Tyson Limato
# Date        : 2025-7-05
# File Name   : main.py
# Description : Parallel vector operations with MPI. Every rank owns one
#               contiguous block of two random vectors x and y, multiplies
#               both by the same scalar and takes part in a timed global
#               dot product that is summed on rank 0.
#
# Usage       : mpiexec -n <comm_sz> python main.py <order of the vectors> <scalar>
#               [--gpu] [--verify]
#
#               The order of the vectors must be a positive multiple of
#               comm_sz. Rank 0 prints the vectors before and after the
#               scalar multiplication (the first and last 10 elements
#               when there are 20 or more), the dot product and the time
#               it took.
#
# Dependencies:
#       - mpi4py
#       - numpy
#       - cupy (only with --gpu, I used the Cuda 12x variant)
# ------------------------------------------------------------
import argparse
import sys

import numpy as np
from mpi4py import MPI

from distribution import compute_local_n
from dot_timing import timed_dot_product
from gpu_device import HostDevice, move_to_device
from mpiMGR import ProcessGroup
from vector_errors import ConfigurationError, UsageError, VectorOpsError, report_error
from vector_printer import print_vector
from vectors import (WallClockSource, allocate_vectors, generate_vector,
                     scalar_multiply)


class VectorOpsArgumentParser(argparse.ArgumentParser):
    """
    argparse parser that raises UsageError instead of exiting, and only lets
    the root rank write help text.
    """

    def __init__(self, *args, is_root=True, **kwargs):
        self.is_root = is_root
        super().__init__(*args, **kwargs)

    def _print_message(self, message, file=None):
        if self.is_root:
            super()._print_message(message, file)

    def error(self, message):
        usage = " ".join(self.format_usage().split())
        raise UsageError(f"{usage} ({message})")


def build_parser(is_root=True):
    parser = VectorOpsArgumentParser(
        prog="main.py",
        description="Dot product and scalar multiplication of two "
                    "block-distributed vectors.",
        is_root=is_root,
    )
    parser.add_argument('n', type=int, help="order of the vectors")
    parser.add_argument('scalar', type=float, help="scalar both vectors are multiplied by")
    parser.add_argument('--gpu', action='store_true',
                        help="run the scalar multiplication and dot product with CuPy")
    parser.add_argument('--verify', action='store_true',
                        help="recompute the dot product sequentially on rank 0")
    return parser


def make_device(group, use_gpu: bool):
    """
    Device for the compute phase. With --gpu every rank must get a CUDA
    device; the ranks agree on the outcome before anyone goes on.
    """
    if not use_gpu:
        return HostDevice()
    device = None
    reason = "CUDA device unavailable on another rank"
    try:
        from gpu_device import GPUDevice
        device = GPUDevice(group.rank)
    except (ImportError, RuntimeError) as err:
        # cupy's CUDARuntimeError is a RuntimeError
        reason = str(err)
    if group.allreduce(1 if device is not None else 0, op=MPI.MIN) == 0:
        raise ConfigurationError("--gpu", f"--gpu needs CuPy and a CUDA device on every rank ({reason})")
    return device


def run(group, n: int, scalar: float, x_source=None, y_source=None,
        device=None, verify=False, out=None):
    """
    Run every phase of the program on this rank.

    Parameters:
    -----------
    group : ProcessGroup
        The process group of the run.
    n : int
        Order of the global vectors.
    scalar : float
        Value both vectors are multiplied by.
    x_source, y_source : RandomSource
        Value sources for the local segments (default: WallClockSource).
    device : HostDevice or GPUDevice
        Where the compute phase runs (default: host).
    verify : bool
        If True, rank 0 also prints a sequential dot product of the gathered vectors.
    out : file-like
        Report stream on root (default: sys.stdout).

    Returns:
    --------
    tuple (float or None, float)
        Global dot product (root only) and the elapsed time of the dot product.
    """
    out = out if out is not None else sys.stdout
    device = device if device is not None else HostDevice()

    local_n = compute_local_n(n, group.size)

    # Allocate memory for vectors
    local_x, local_y = allocate_vectors(group, local_n)

    # Generate random vectors
    generate_vector(local_x, x_source or WallClockSource(group.rank, 1))
    generate_vector(local_y, y_source or WallClockSource(group.rank, 2))

    print_vector(group, local_x, n, "=> The first vector is", out)
    print_vector(group, local_y, n, "=> The second vector is", out)

    # Perform parallel scalar multiplication
    dev_x, dev_y = move_to_device(group, device, local_x, local_y)
    scalar_multiply(dev_x, scalar)
    scalar_multiply(dev_y, scalar)

    # Measure the time taken for dot product computation
    global_dot, elapsed = timed_dot_product(group, dev_x, dev_y)

    # Print the vectors after scalar multiplication
    local_x, local_y = device.to_host(dev_x), device.to_host(dev_y)
    x_full = print_vector(group, local_x, n,
                          "=> The first vector after scalar multiplication is", out)
    y_full = print_vector(group, local_y, n,
                          "=> The second vector after scalar multiplication is", out)

    if group.is_root:
        print(f"The dot product is {global_dot:f}", file=out)
        print(f"Dot product computation took {elapsed:f} seconds", file=out)
        if verify:
            sequential = float(np.dot(x_full, y_full))
            scale = abs(sequential) if sequential != 0.0 else 1.0
            rel_err = abs(global_dot - sequential) / scale
            print(f"Sequential dot product is {sequential:f} "
                  f"(relative error {rel_err:.3e})", file=out)
        out.flush()

    return global_dot, elapsed


def main(argv=None, comm=None, out=None, err=None) -> int:
    """Entry point shared by every rank. Returns the process exit status."""
    with ProcessGroup(comm) as group:
        try:
            args = build_parser(is_root=group.is_root).parse_args(argv)
            device = make_device(group, args.gpu)
            run(group, args.n, args.scalar, device=device,
                verify=args.verify, out=out)
        except VectorOpsError as error:
            report_error(group, error, err)
            return error.exit_status
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
