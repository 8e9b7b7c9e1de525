"""Bulk-synchronous offload engine.

Dijkstra's greedy selection is inherently sequential, so the device runs
Bellman-Ford style supersteps over all vertices instead. The host launches
bursts of ``supersteps_per_burst`` supersteps without synchronizing, then
reads the active mask back behind a completion event and stops once no vertex
is active. A burst may overshoot convergence by a few idle supersteps; that
trade buys fewer host/device round trips.

There is no superstep cap or timeout. With non-negative weights the mask
empties within ``n`` supersteps of any source.
"""

import logging
from dataclasses import dataclass

import numpy as np
import torch

from sssp.engines.types import validate_source
from sssp.graph.types import Graph
from sssp.offload.buffers import DeviceBuffers, ResourceAllocationError
from sssp.offload.discovery import DeviceContext, DeviceInitError

log = logging.getLogger(__name__)

DEFAULT_SUPERSTEPS_PER_BURST = 10


@dataclass(frozen=True)
class OffloadResult:
    """Distances plus superstep accounting from one offload run."""

    distances: np.ndarray  # float64 (n,), inf where unreachable
    source: int
    device: str
    supersteps: int  # supersteps launched, a multiple of the burst size
    bursts: int
    active_history: list[int]  # active-vertex count after each superstep

    @property
    def converged_superstep(self) -> int:
        """First superstep after which no vertex was active (1-based)."""
        for i, count in enumerate(self.active_history):
            if count == 0:
                return i + 1
        return self.supersteps


def _read_back(*tensors: torch.Tensor) -> list[torch.Tensor]:
    """Copy device tensors to host and block until the copies complete."""
    device = tensors[0].device
    if device.type != "cuda":
        return [t.cpu() for t in tensors]
    hosts = []
    for t in tensors:
        host = torch.empty(t.shape, dtype=t.dtype, pin_memory=True)
        host.copy_(t, non_blocking=True)
        hosts.append(host)
    done = torch.cuda.Event()
    done.record()
    done.synchronize()
    return hosts


def run_offload(
    graph: Graph,
    source: int,
    context: DeviceContext,
    supersteps_per_burst: int = DEFAULT_SUPERSTEPS_PER_BURST,
    work_group_size: int = 256,
) -> OffloadResult:
    """Single-source shortest paths by bulk-synchronous relaxation on a device.

    Args:
        graph: Graph to search.
        source: Source vertex.
        context: Device context with a built kernel program.
        supersteps_per_burst: Supersteps launched between mask readbacks.
        work_group_size: Per-vertex buffers are padded to a multiple of this.

    Returns:
        OffloadResult with float64 distances.

    Raises:
        DeviceInitError: If ``context`` has no kernel program.
        ResourceAllocationError: If device buffers or superstep state cannot
            be allocated.
    """
    validate_source(graph, source)
    if context.program is None:
        raise DeviceInitError(
            f"Device context {context.name} has no kernel program; "
            f"run initialize_kernels() first"
        )
    if supersteps_per_burst < 1:
        raise ValueError(
            f"supersteps_per_burst must be >= 1, got {supersteps_per_burst}"
        )
    program = context.program

    supersteps = 0
    bursts = 0
    history: list[int] = []
    with DeviceBuffers.allocate(graph, context, work_group_size) as buffers:
        edges = buffers.edges
        try:
            state = program.initialize(buffers.padded_size, source)
        except (RuntimeError, MemoryError) as exc:
            raise ResourceAllocationError(
                f"Failed to allocate superstep state on {context.name}: {exc}"
            ) from exc
        (mask_host,) = _read_back(state.mask)

        while bool(mask_host.any()):
            counts = []
            for _ in range(supersteps_per_burst):
                state = program.superstep(state, edges)
                counts.append(state.mask.sum())
            supersteps += supersteps_per_burst
            bursts += 1

            mask_host, counts_host = _read_back(state.mask, torch.stack(counts))
            history.extend(int(c) for c in counts_host.tolist())
            log.debug(
                "Burst %d on %s: %d supersteps, %d active",
                bursts, context.name, supersteps, history[-1],
            )

        (cost_host,) = _read_back(state.cost[: graph.n])

    distances = cost_host.numpy().astype(np.float64)
    log.debug(
        "Offload SSSP done on %s (n=%d, source=%d, supersteps=%d, bursts=%d)",
        context.name, graph.n, source, supersteps, bursts,
    )
    return OffloadResult(
        distances=distances,
        source=source,
        device=str(context.device),
        supersteps=supersteps,
        bursts=bursts,
        active_history=history,
    )


def device_offload(
    graph: Graph,
    source: int,
    context: DeviceContext,
    supersteps_per_burst: int = DEFAULT_SUPERSTEPS_PER_BURST,
) -> np.ndarray:
    """Distances from ``source`` computed on ``context``'s device."""
    return run_offload(graph, source, context, supersteps_per_burst).distances
