"""Bulk-synchronous relaxation kernels and their one-time build step.

One superstep is two pure functions over immutable state:

* relax: every active vertex pushes ``cost[i] + w`` along each out-edge into
  a copy of ``updating`` with an atomic minimum (``scatter_reduce`` with
  ``amin``), so concurrent writers to one destination always keep the least
  candidate;
* commit: vertices whose relaxed value beats their cost take it and become
  active; all others go inactive, and ``updating`` restarts from ``cost``.

``build_kernel_program`` binds the kernels to a device (optionally through
``torch.compile``) and smoke-tests them once. It runs before any offload
session starts, so no lock is needed around it at runtime.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, NamedTuple

import torch

from sssp.offload.discovery import DeviceContext, DiscoveryResult

log = logging.getLogger(__name__)

COST_DTYPE = torch.float32
INDEX_DTYPE = torch.int64


class KernelBuildError(RuntimeError):
    """Raised when a kernel program fails to build or fails its smoke test.

    Attributes:
        device_name: Name of the device the build targeted.
        diagnostics: Backend compiler or runtime output.
    """

    def __init__(self, device_name: str, diagnostics: str) -> None:
        super().__init__(
            f"Kernel program build failed on {device_name}:\n{diagnostics}"
        )
        self.device_name = device_name
        self.diagnostics = diagnostics


@dataclass(frozen=True)
class SuperstepState:
    """Double-buffered per-vertex state on the device.

    ``cost`` is authoritative, ``updating`` is the scratch buffer relax
    writes into, and ``mask`` flags vertices whose out-edges still need
    propagating.
    """

    cost: torch.Tensor  # float32 (padded_size,)
    updating: torch.Tensor  # float32 (padded_size,)
    mask: torch.Tensor  # bool (padded_size,)


class EdgeTensors(NamedTuple):
    """Device-resident edge layout consumed by the relax kernel."""

    edge_source: torch.Tensor  # int64 (E,), source vertex of each edge
    edge_array: torch.Tensor  # int64 (E,), destination vertex of each edge
    weight_array: torch.Tensor  # float32 (E,)


def initialize_state(
    padded_size: int, source: int, device: torch.device
) -> SuperstepState:
    """Costs at infinity except ``source`` at zero; only ``source`` active."""
    cost = torch.full((padded_size,), math.inf, dtype=COST_DTYPE, device=device)
    cost[source] = 0.0
    mask = torch.zeros(padded_size, dtype=torch.bool, device=device)
    mask[source] = True
    return SuperstepState(cost=cost, updating=cost.clone(), mask=mask)


def relax_kernel(
    cost: torch.Tensor,
    updating: torch.Tensor,
    mask: torch.Tensor,
    edge_source: torch.Tensor,
    edge_array: torch.Tensor,
    weight_array: torch.Tensor,
) -> torch.Tensor:
    """Return ``updating`` lowered by every active vertex's out-edges."""
    candidate = cost[edge_source] + weight_array
    candidate = torch.where(
        mask[edge_source], candidate, torch.full_like(candidate, math.inf)
    )
    return updating.scatter_reduce(
        0, edge_array, candidate, reduce="amin", include_self=True
    )


def commit_kernel(
    cost: torch.Tensor, updating: torch.Tensor
) -> tuple[torch.Tensor, torch.Tensor]:
    """Return ``(next_cost, next_mask)`` from a relaxed ``updating`` buffer."""
    improved = updating < cost
    return torch.where(improved, updating, cost), improved


@dataclass(frozen=True)
class KernelProgram:
    """Kernels bound to one device, ready for offload sessions."""

    device: torch.device
    relax_fn: Callable[..., torch.Tensor]
    commit_fn: Callable[..., tuple[torch.Tensor, torch.Tensor]]
    compiled: bool = False

    def initialize(self, padded_size: int, source: int) -> SuperstepState:
        return initialize_state(padded_size, source, self.device)

    def relax(self, state: SuperstepState, edges: EdgeTensors) -> torch.Tensor:
        return self.relax_fn(
            state.cost, state.updating, state.mask, *edges
        )

    def commit(
        self, state: SuperstepState, updating: torch.Tensor
    ) -> SuperstepState:
        cost, mask = self.commit_fn(state.cost, updating)
        return SuperstepState(cost=cost, updating=cost, mask=mask)

    def superstep(
        self, state: SuperstepState, edges: EdgeTensors
    ) -> SuperstepState:
        return self.commit(state, self.relax(state, edges))

    def smoke_test(self) -> None:
        """One superstep on the 2-vertex graph ``0 -> 1`` with weight 0.5."""
        edges = EdgeTensors(
            edge_source=torch.tensor([0], dtype=INDEX_DTYPE, device=self.device),
            edge_array=torch.tensor([1], dtype=INDEX_DTYPE, device=self.device),
            weight_array=torch.tensor([0.5], dtype=COST_DTYPE, device=self.device),
        )
        state = self.superstep(self.initialize(2, 0), edges)
        got = state.cost.cpu().tolist()
        active = state.mask.cpu().tolist()
        if got != [0.0, 0.5] or active != [False, True]:
            raise RuntimeError(
                f"smoke superstep produced cost={got} mask={active}, "
                f"expected cost=[0.0, 0.5] mask=[False, True]"
            )


def build_kernel_program(
    context: DeviceContext, compile_kernels: bool = False
) -> KernelProgram:
    """Bind and smoke-test the superstep kernels for ``context``.

    Args:
        context: Device to build for.
        compile_kernels: Wrap the kernels with ``torch.compile``; compilation
            happens during the smoke test.

    Returns:
        A KernelProgram for ``context.device``.

    Raises:
        KernelBuildError: If compilation or the smoke test fails.
    """
    relax_fn: Callable[..., torch.Tensor] = relax_kernel
    commit_fn: Callable[..., tuple[torch.Tensor, torch.Tensor]] = commit_kernel
    try:
        if compile_kernels:
            relax_fn = torch.compile(relax_kernel, dynamic=True)
            commit_fn = torch.compile(commit_kernel, dynamic=True)
        program = KernelProgram(
            device=context.device,
            relax_fn=relax_fn,
            commit_fn=commit_fn,
            compiled=compile_kernels,
        )
        program.smoke_test()
    except Exception as exc:
        raise KernelBuildError(context.name, f"{type(exc).__name__}: {exc}") from exc

    log.info(
        "Kernel program built for %s (%s, compiled=%s)",
        context.name, context.device, compile_kernels,
    )
    return program


def initialize_kernels(
    discovery: DiscoveryResult, compile_kernels: bool = False
) -> DiscoveryResult:
    """Build kernel programs for every discovered context, once.

    Must run before any offload session starts.

    Returns:
        A copy of ``discovery`` whose contexts carry their programs.

    Raises:
        KernelBuildError: On the first context whose build fails.
    """
    gpu, cpu = discovery.gpu, discovery.cpu
    if gpu is not None:
        gpu = replace(gpu, program=build_kernel_program(gpu, compile_kernels))
    if cpu is not None:
        cpu = replace(cpu, program=build_kernel_program(cpu, compile_kernels))
    return replace(discovery, gpu=gpu, cpu=cpu)
