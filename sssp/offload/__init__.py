"""Device offload: discovery, kernel build, buffers and the superstep engine."""

from sssp.offload.buffers import (
    DeviceBuffers,
    ResourceAllocationError,
    round_work_size_up,
)
from sssp.offload.discovery import (
    DeviceContext,
    DeviceInitError,
    DeviceInitStatus,
    DiscoveryResult,
    discover_devices,
)
from sssp.offload.engine import OffloadResult, device_offload, run_offload
from sssp.offload.kernels import (
    EdgeTensors,
    KernelBuildError,
    KernelProgram,
    SuperstepState,
    build_kernel_program,
    commit_kernel,
    initialize_kernels,
    initialize_state,
    relax_kernel,
)

__all__ = [
    "DeviceBuffers",
    "DeviceContext",
    "DeviceInitError",
    "DeviceInitStatus",
    "DiscoveryResult",
    "EdgeTensors",
    "KernelBuildError",
    "KernelProgram",
    "OffloadResult",
    "ResourceAllocationError",
    "SuperstepState",
    "build_kernel_program",
    "commit_kernel",
    "device_offload",
    "discover_devices",
    "initialize_kernels",
    "initialize_state",
    "relax_kernel",
    "round_work_size_up",
    "run_offload",
]
