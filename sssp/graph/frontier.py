"""Frontier selection: the unfinalized vertex with the smallest distance.

Two variants share one contract. ``min_unfinalized`` scans the whole vertex
range; ``min_unfinalized_parallel`` splits the range across a worker pool and
merges per-chunk minima into a lock-guarded ``SharedBest``. Both return a
vertex of minimal distance; among tied vertices the sequential scan returns
the lowest index while the parallel merge order is not fixed.
"""

import numpy as np

from sssp.parallel.pool import SharedBest, WorkerPool


def _chunk_min(
    distances: np.ndarray, finalized: np.ndarray, start: int, stop: int
) -> tuple[float, int] | None:
    """Local minimum over ``[start, stop)`` as ``(distance, vertex)``."""
    candidates = np.flatnonzero(~finalized[start:stop])
    if candidates.size == 0:
        return None
    local = candidates[np.argmin(distances[start:stop][candidates])]
    return float(distances[start + local]), int(start + local)


def min_unfinalized(
    distances: np.ndarray, finalized: np.ndarray, fallback: int
) -> int:
    """Return the unfinalized vertex with the smallest distance.

    Vertices still at ``inf`` are eligible, so unreachable vertices are
    selected once every reachable one has been finalized.

    Args:
        distances: Current best distances, shape (n,).
        finalized: Boolean finalized flags, shape (n,).
        fallback: Returned when every vertex is finalized.

    Returns:
        Vertex index; ties resolve to the lowest index.
    """
    best = _chunk_min(distances, finalized, 0, distances.shape[0])
    return fallback if best is None else best[1]


def min_unfinalized_parallel(
    pool: WorkerPool,
    distances: np.ndarray,
    finalized: np.ndarray,
    fallback: int,
    best: SharedBest | None = None,
) -> int:
    """Parallel-reduction variant of :func:`min_unfinalized`.

    Each worker takes one contiguous chunk of the vertex range, computes its
    local minimum and offers it to ``best`` under the shared lock.

    Args:
        pool: Worker pool that runs the chunks.
        distances: Current best distances, shape (n,).
        finalized: Boolean finalized flags, shape (n,).
        fallback: Returned when every vertex is finalized.
        best: Merge target; reset before use. A fresh one is made if None.

    Returns:
        A vertex whose distance is the minimum over unfinalized vertices.
    """
    if best is None:
        best = SharedBest()
    best.reset()

    def body(start: int, stop: int) -> None:
        local = _chunk_min(distances, finalized, start, stop)
        if local is not None:
            best.offer(*local)

    pool.parallel_for(distances.shape[0], body)
    return fallback if best.index is None else best.index
