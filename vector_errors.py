# Author      : Tyson Limato
# Date        : 2025-7-02
# File Name   : vector_errors.py
import sys


class VectorOpsError(Exception):
    """
    Base class for every error that ends a run of the vector operations program.

    All subclasses are raised on every rank at the same point of the program,
    so catching one never leaves a peer waiting inside a collective call.

    Attributes:
    -----------
    exit_status : int
        Process exit status used when the error reaches the top level.
    """
    exit_status = 1


class UsageError(VectorOpsError):
    """Wrong command line (argument count or unparsable values)."""


class ConfigurationError(VectorOpsError):
    """
    Invalid run parameters, e.g. a vector order that is not a positive
    multiple of the number of processes.
    """

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(message)


class AllocationError(VectorOpsError):
    """
    A local allocation failed on at least one rank.

    Raised by every rank once the Error Propagation Protocol agreed on the failure.
    """

    def __init__(self, fname: str, message: str, rank: int = 0):
        self.fname = fname
        self.rank = rank
        super().__init__(message)

    def __str__(self):
        return f"Proc {self.rank} > In {self.fname}, {self.args[0]}"


def report_error(group, err: VectorOpsError, stream=None):
    """Print the single diagnostic line for `err` on the root rank only."""
    if group.is_root:
        stream = stream if stream is not None else sys.stderr
        print(err, file=stream, flush=True)
