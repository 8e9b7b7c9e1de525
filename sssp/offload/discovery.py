"""Device discovery for the offload engine.

Discovery never raises. It probes the torch runtime for a GPU device (CUDA,
falling back to Apple MPS) and for the host CPU device, and reports the
outcome as a ``DeviceInitStatus`` so callers can skip unavailable backends.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any

import torch

log = logging.getLogger(__name__)


class DeviceInitStatus(enum.Enum):
    """Outcome of device discovery."""

    SUCCESS = "success"  # both GPU and CPU contexts available
    GPU_ONLY = "gpu_only"
    CPU_ONLY = "cpu_only"
    NO_DEVICES = "no_devices"
    NO_PLATFORM = "no_platform"


class DeviceInitError(RuntimeError):
    """Raised when an engine is handed a context it cannot run on."""


@dataclass(frozen=True, slots=True)
class DeviceContext:
    """One offload target: a torch device plus its built kernel program.

    ``program`` stays None until ``initialize_kernels`` has run; the offload
    engine refuses contexts without one.
    """

    kind: str  # "gpu" or "cpu"
    device: torch.device
    name: str
    compute_units: int
    program: Any = None  # KernelProgram, typed loosely to avoid an import cycle


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """Typed result of ``discover_devices``."""

    status: DeviceInitStatus
    gpu: DeviceContext | None = None
    cpu: DeviceContext | None = None

    def contexts(self) -> list[DeviceContext]:
        """Available contexts, GPU first."""
        return [c for c in (self.gpu, self.cpu) if c is not None]


def _max_compute_cuda_device() -> DeviceContext:
    """CUDA device with the most streaming multiprocessors.

    Ties keep the lowest device index.
    """
    best_index = 0
    best_props = torch.cuda.get_device_properties(0)
    for i in range(1, torch.cuda.device_count()):
        props = torch.cuda.get_device_properties(i)
        if props.multi_processor_count > best_props.multi_processor_count:
            best_index, best_props = i, props
    return DeviceContext(
        kind="gpu",
        device=torch.device("cuda", best_index),
        name=best_props.name,
        compute_units=best_props.multi_processor_count,
    )


def _probe_gpu() -> DeviceContext | None:
    if torch.cuda.is_available() and torch.cuda.device_count() > 0:
        return _max_compute_cuda_device()
    mps = getattr(torch.backends, "mps", None)
    if mps is not None and mps.is_available():
        return DeviceContext(
            kind="gpu", device=torch.device("mps"), name="mps", compute_units=1
        )
    return None


def _probe_cpu() -> DeviceContext:
    return DeviceContext(
        kind="cpu",
        device=torch.device("cpu"),
        name="cpu",
        compute_units=torch.get_num_threads(),
    )


def _status(gpu: DeviceContext | None, cpu: DeviceContext | None) -> DeviceInitStatus:
    if gpu is not None and cpu is not None:
        return DeviceInitStatus.SUCCESS
    if gpu is not None:
        return DeviceInitStatus.GPU_ONLY
    if cpu is not None:
        return DeviceInitStatus.CPU_ONLY
    return DeviceInitStatus.NO_DEVICES


def discover_devices(
    enable_gpu: bool = True, enable_cpu: bool = True
) -> DiscoveryResult:
    """Probe the torch runtime for offload targets.

    Args:
        enable_gpu: Probe for a CUDA or MPS device.
        enable_cpu: Offer the host CPU as an offload device.

    Returns:
        DiscoveryResult; ``NO_PLATFORM`` if the runtime probe itself fails.
    """
    try:
        gpu = _probe_gpu() if enable_gpu else None
        cpu = _probe_cpu() if enable_cpu else None
    except (RuntimeError, AssertionError) as exc:
        log.warning("Device runtime probe failed: %s", exc)
        return DiscoveryResult(status=DeviceInitStatus.NO_PLATFORM)

    if gpu is None and enable_gpu:
        log.info("No GPU devices found")
    status = _status(gpu, cpu)
    for ctx in (gpu, cpu):
        if ctx is not None:
            log.info(
                "Offload device: %s (%s, compute units=%d)",
                ctx.name, ctx.device, ctx.compute_units,
            )
    log.info("Device discovery: %s", status.value)
    return DiscoveryResult(status=status, gpu=gpu, cpu=cpu)
