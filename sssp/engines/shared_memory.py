"""Shared-memory parallel Dijkstra on a fork-join worker pool.

Keeps the sequential ``n - 1`` iteration skeleton and parallelizes both
halves of each iteration:

1. Frontier selection: parallel reduction of per-chunk minima into a
   ``SharedBest`` under its lock.
2. Relaxation: parallel-for over disjoint destination chunks of the current
   vertex's matrix row. Each worker writes only its own slice of the distance
   vector and trace, so workers never touch the same index.

The current vertex is committed once per iteration under the same lock and
every relaxation chunk reads it back from ``SharedBest``. A parallel call
returning is the barrier after which every worker observes the new
finalized flag.
"""

import logging
import operator

import numpy as np

from sssp.engines.sequential import relax_row
from sssp.engines.types import SSSPResult, initial_distances, validate_source
from sssp.graph.frontier import min_unfinalized_parallel
from sssp.graph.types import Graph
from sssp.parallel.pool import SharedBest, WorkerPool

log = logging.getLogger(__name__)


def _run(graph: Graph, source: int, pool: WorkerPool) -> SSSPResult:
    n = graph.n
    distances = initial_distances(n, source)
    finalized = np.zeros(n, dtype=bool)
    path_trace: list[list[int]] = [[] for _ in range(n)]
    best = SharedBest()
    relaxations = 0

    def relax_chunk(start: int, stop: int) -> int:
        current = best.current
        improved = relax_row(graph, current, distances, finalized, start, stop)
        for v in improved:
            path_trace[v].append(current)
        return int(improved.size)

    for _ in range(n - 1):
        candidate = min_unfinalized_parallel(
            pool, distances, finalized, source, best
        )
        current = best.commit(candidate)
        finalized[current] = True
        relaxations += pool.parallel_reduce(n, relax_chunk, operator.add, 0)

    return SSSPResult(
        distances=distances,
        source=source,
        iterations=n - 1,
        relaxations=relaxations,
        path_trace=path_trace,
    )


def dijkstra_shared_memory(
    graph: Graph,
    source: int,
    num_workers: int | None = None,
    pool: WorkerPool | None = None,
) -> SSSPResult:
    """Single-source shortest paths with per-iteration parallel regions.

    Args:
        graph: Graph to search.
        source: Source vertex.
        num_workers: Pool size when no ``pool`` is given.
        pool: Existing pool to run on; it is left running on return.

    Returns:
        SSSPResult with float64 distances (inf where unreachable).
    """
    validate_source(graph, source)
    if pool is not None:
        result = _run(graph, source, pool)
    else:
        with WorkerPool(num_workers) as owned:
            result = _run(graph, source, owned)
    log.debug(
        "Shared-memory SSSP done (n=%d, source=%d, relaxations=%d)",
        graph.n, source, result.relaxations,
    )
    return result


def shared_memory_parallel(
    graph: Graph, source: int, num_workers: int | None = None
) -> np.ndarray:
    """Distances from ``source`` computed by the shared-memory engine."""
    return dijkstra_shared_memory(graph, source, num_workers).distances
