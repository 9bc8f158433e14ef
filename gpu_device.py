# Author      : Tyson Limato
# Date        : 2025-7-03
# File Name   : gpu_device.py
import numpy as np


class HostDevice:
    """Keeps the compute phase on the CPU; transfers are no-ops."""
    name = "cpu"

    def to_device(self, local_a):
        return local_a

    def to_host(self, local_a) -> np.ndarray:
        return local_a


class GPUDevice:
    """
    Runs the compute phase on a CUDA device through CuPy.

    Each rank selects device `rank % device_count`. MPI traffic always goes
    through host (NumPy) buffers, so segments are copied back with `to_host`
    before any gather.

    Parameters:
    -----------
    rank : int
        Rank of the owning process.
    """
    name = "gpu"

    def __init__(self, rank: int):
        import cupy as cp
        self.cp = cp
        num_gpus = cp.cuda.runtime.getDeviceCount()
        if num_gpus == 0:
            raise RuntimeError("no CUDA device visible")
        self.device_id = rank % num_gpus
        # If using GPU, assign this rank a GPU device
        cp.cuda.Device(self.device_id).use()

    def to_device(self, local_a):
        return self.cp.asarray(local_a)

    def to_host(self, local_a) -> np.ndarray:
        return self.cp.asnumpy(local_a)


def move_to_device(group, device, *segments):
    """
    Copy segments onto `device`. Device out-of-memory on any rank is turned
    into an AllocationError on every rank.
    """
    moved = []
    local_ok = True
    try:
        moved = [device.to_device(seg) for seg in segments]
    except MemoryError:
        # cupy.cuda.memory.OutOfMemoryError is a MemoryError
        local_ok = False
    group.check_for_error(local_ok, "move_to_device",
                          f"Can't allocate local vector(s) on {device.name}")
    return moved
