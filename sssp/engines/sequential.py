"""Sequential greedy Dijkstra over the dense weight matrix.

Runs exactly ``n - 1`` iterations. Each iteration finalizes the cheapest
unfinalized vertex and relaxes its matrix row against every other
unfinalized vertex; the row update is vectorized with NumPy.
"""

import logging
from typing import Callable

import numpy as np

from sssp.engines.types import SSSPResult, initial_distances, validate_source
from sssp.graph.frontier import min_unfinalized
from sssp.graph.types import Graph

log = logging.getLogger(__name__)

IterationHook = Callable[[int, int, np.ndarray], None]


def relax_row(
    graph: Graph,
    current: int,
    distances: np.ndarray,
    finalized: np.ndarray,
    start: int = 0,
    stop: int | None = None,
) -> np.ndarray:
    """Relax edges ``current -> v`` for ``v`` in ``[start, stop)``.

    Updates ``distances`` in place for improved vertices and returns their
    indices. Cells holding NO_EDGE never relax; zero-weight edges do.
    """
    if stop is None:
        stop = graph.n
    row = graph.weight_matrix[current, start:stop]
    candidate = distances[current] + row
    improved = (
        ~finalized[start:stop]
        & np.isfinite(row)
        & (candidate < distances[start:stop])
    )
    idx = np.flatnonzero(improved)
    distances[start + idx] = candidate[idx]
    return start + idx


def dijkstra_sequential(
    graph: Graph, source: int, on_iteration: IterationHook | None = None
) -> SSSPResult:
    """Single-source shortest paths with the classic greedy loop.

    Args:
        graph: Graph to search.
        source: Source vertex.
        on_iteration: Optional hook called as ``(iteration, current,
            distances)`` after each iteration; ``distances`` is a read-only
            view of the live vector.

    Returns:
        SSSPResult with float64 distances (inf where unreachable).
    """
    validate_source(graph, source)
    n = graph.n
    distances = initial_distances(n, source)
    finalized = np.zeros(n, dtype=bool)
    path_trace: list[list[int]] = [[] for _ in range(n)]
    relaxations = 0

    view = distances.view()
    view.setflags(write=False)

    for iteration in range(n - 1):
        current = min_unfinalized(distances, finalized, source)
        finalized[current] = True

        improved = relax_row(graph, current, distances, finalized)
        for v in improved:
            path_trace[v].append(current)
        relaxations += improved.size

        if on_iteration is not None:
            on_iteration(iteration, current, view)

    log.debug(
        "Sequential SSSP done (n=%d, source=%d, relaxations=%d)",
        n, source, relaxations,
    )
    return SSSPResult(
        distances=distances,
        source=source,
        iterations=max(n - 1, 0),
        relaxations=relaxations,
        path_trace=path_trace,
    )


def sequential(graph: Graph, source: int) -> np.ndarray:
    """Distances from ``source`` computed by the sequential engine."""
    return dijkstra_sequential(graph, source).distances
