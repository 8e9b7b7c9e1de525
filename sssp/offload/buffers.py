"""Device buffer lifecycle for offload sessions.

Host arrays are staged (pinned on CUDA) and copied to the device once per
session. Per-vertex buffers are padded up to a whole number of work groups;
padded lanes sit at infinite cost with no in-edges, so they never activate.
"""

import logging
from dataclasses import dataclass

import numpy as np
import torch

from sssp.graph.types import Graph
from sssp.offload.discovery import DeviceContext
from sssp.offload.kernels import COST_DTYPE, INDEX_DTYPE, EdgeTensors

log = logging.getLogger(__name__)


class ResourceAllocationError(RuntimeError):
    """Raised when device memory cannot be allocated or is used after release."""


def round_work_size_up(group_size: int, global_size: int) -> int:
    """Round ``global_size`` up to the next multiple of ``group_size``.

    Examples:
        >>> round_work_size_up(256, 1000)
        1024
        >>> round_work_size_up(256, 512)
        512
    """
    remainder = global_size % group_size
    if remainder == 0:
        return global_size
    return global_size + group_size - remainder


def _upload(array: np.ndarray, dtype: torch.dtype, device: torch.device) -> torch.Tensor:
    # torch.tensor copies, so read-only graph arrays are fine here
    host = torch.tensor(array, dtype=dtype)
    if device.type == "cuda":
        host = host.pin_memory()
        return host.to(device, non_blocking=True)
    return host.to(device)


@dataclass
class DeviceBuffers:
    """Read-only graph buffers resident on one device.

    Create with :meth:`allocate`; use as a context manager or call
    :meth:`release` when the session ends.
    """

    device: torch.device
    num_vertices: int
    padded_size: int
    edge_array: torch.Tensor | None
    weight_array: torch.Tensor | None
    edge_source: torch.Tensor | None

    @classmethod
    def allocate(
        cls, graph: Graph, context: DeviceContext, work_group_size: int = 256
    ) -> "DeviceBuffers":
        """Copy ``graph``'s edge layout to ``context.device``.

        Raises:
            ResourceAllocationError: If the device cannot hold the buffers.
        """
        device = context.device
        padded_size = round_work_size_up(work_group_size, graph.n)
        degrees = np.diff(np.append(graph.vertex_array, graph.num_edges))
        edge_source = np.repeat(np.arange(graph.n, dtype=np.int64), degrees)
        try:
            buffers = cls(
                device=device,
                num_vertices=graph.n,
                padded_size=padded_size,
                edge_array=_upload(graph.edge_array, INDEX_DTYPE, device),
                weight_array=_upload(graph.weight_array, COST_DTYPE, device),
                edge_source=_upload(edge_source, INDEX_DTYPE, device),
            )
        except (RuntimeError, MemoryError) as exc:
            raise ResourceAllocationError(
                f"Failed to allocate graph buffers on {context.name}: {exc}"
            ) from exc
        log.debug(
            "Allocated buffers on %s (n=%d, padded=%d, edges=%d)",
            device, graph.n, padded_size, graph.num_edges,
        )
        return buffers

    @property
    def released(self) -> bool:
        return self.edge_array is None

    @property
    def edges(self) -> EdgeTensors:
        if self.released:
            raise ResourceAllocationError("DeviceBuffers used after release")
        return EdgeTensors(
            edge_source=self.edge_source,
            edge_array=self.edge_array,
            weight_array=self.weight_array,
        )

    def release(self) -> None:
        """Drop device references; safe to call more than once."""
        if self.released:
            return
        self.edge_array = None
        self.weight_array = None
        self.edge_source = None
        log.debug("Released buffers on %s", self.device)

    def __enter__(self) -> "DeviceBuffers":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
