"""Host SSSP engines: sequential and shared-memory parallel Dijkstra."""

from sssp.engines.sequential import dijkstra_sequential, relax_row, sequential
from sssp.engines.shared_memory import (
    dijkstra_shared_memory,
    shared_memory_parallel,
)
from sssp.engines.types import SSSPResult, validate_source

__all__ = [
    "SSSPResult",
    "dijkstra_sequential",
    "dijkstra_shared_memory",
    "relax_row",
    "sequential",
    "shared_memory_parallel",
    "validate_source",
]
