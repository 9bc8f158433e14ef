# Author      : Tyson Limato
# Date        : 2025-7-04
# File Name   : vector_printer.py
import sys

import numpy as np

# Vectors shorter than this are printed in full
FULL_PRINT_LIMIT = 20
# Elements shown at each end of a truncated vector
EDGE_COUNT = 10


def format_vector(b) -> str:
    """
    Render a full vector the way the report shows it.

    Short vectors are printed whole on one tab-indented row. Longer ones show
    the first and last EDGE_COUNT values with a `...` row between them.
    """
    n = len(b)
    if n < FULL_PRINT_LIMIT:
        return "\t" + " ".join(f"{v:f}" for v in b)
    head = " ".join(f"{v:f}" for v in b[:EDGE_COUNT])
    tail = " ".join(f"{v:f}" for v in b[n - EDGE_COUNT:])
    return f"\t{head}\n\t...\n\t{tail}"


def gather_vector(group, local_b, n: int):
    """
    Rebuild the full block-distributed vector on root.

    The root buffer is a local allocation and goes through the group error
    check; the other ranks only take part in the gather.

    Returns:
    --------
    np.ndarray or None
        The full vector in global index order on root, None elsewhere.
    """
    b = None
    local_ok = True
    if group.is_root:
        try:
            b = np.empty(n, dtype=np.float64)
        except (MemoryError, ValueError):
            local_ok = False
    group.check_for_error(local_ok, "print_vector",
                          "Can't allocate temporary vector for printing")
    return group.gather(local_b, b)


def print_vector(group, local_b, n: int, title: str, out=None):
    """Print a vector that has a block distribution, on root only."""
    b = gather_vector(group, local_b, n)
    if group.is_root:
        out = out if out is not None else sys.stdout
        print(title, file=out)
        print(format_vector(b), file=out, flush=True)
    return b
