"""Random fixed-out-degree graph generator and explicit edge-list builder.

Every vertex receives exactly ``k`` distinct out-neighbors, none equal to
itself, chosen by rejection sampling. Weights are three-decimal values in
``[0, 1)``, so zero-weight edges occur and the dense matrix marks missing
edges with the ``NO_EDGE`` sentinel rather than with zero.
"""

import logging
import math
from typing import Iterable

import numpy as np

from sssp.graph.types import NO_EDGE, Graph

log = logging.getLogger(__name__)

# Weights are integers(0, WEIGHT_RESOLUTION) / WEIGHT_RESOLUTION.
WEIGHT_RESOLUTION = 1000


class ConstructionError(ValueError):
    """Raised when a graph cannot be built from the requested parameters."""


def _check_degree(num_vertices: int, neighbors_per_vertex: int) -> None:
    if num_vertices <= 0:
        raise ConstructionError(
            f"num_vertices must be positive, got {num_vertices}"
        )
    if neighbors_per_vertex <= 0:
        raise ConstructionError(
            f"neighbors_per_vertex must be positive, got {neighbors_per_vertex}"
        )
    if neighbors_per_vertex >= num_vertices:
        # Sampling k distinct non-self neighbors needs k <= n - 1.
        raise ConstructionError(
            f"neighbors_per_vertex ({neighbors_per_vertex}) must be < "
            f"num_vertices ({num_vertices})"
        )


def sample_neighbors(
    vertex: int, num_vertices: int, k: int, rng: np.random.Generator
) -> np.ndarray:
    """Draw ``k`` distinct neighbors of ``vertex`` by rejection sampling.

    Candidates are drawn uniformly from ``[0, num_vertices)`` and rejected
    when they equal ``vertex`` or were already chosen.

    Args:
        vertex: The vertex whose out-neighbors are being drawn.
        num_vertices: Total number of vertices.
        k: Number of neighbors, ``0 < k < num_vertices``.
        rng: numpy random Generator for reproducibility.

    Returns:
        int64 array of shape (k,) in draw order.
    """
    chosen: list[int] = []
    seen = {vertex}
    while len(chosen) < k:
        candidate = int(rng.integers(0, num_vertices))
        if candidate in seen:
            continue
        seen.add(candidate)
        chosen.append(candidate)
    return np.array(chosen, dtype=np.int64)


def build_weight_matrix(
    n: int,
    vertex_array: np.ndarray,
    edge_array: np.ndarray,
    weight_array: np.ndarray,
) -> np.ndarray:
    """Build the dense ``(n, n)`` view of a CSR edge layout.

    Cells without an edge hold ``NO_EDGE``, the diagonal holds ``0.0``.
    Duplicate ``(u, v)`` pairs keep their smallest weight.
    """
    matrix = np.full((n, n), NO_EDGE, dtype=np.float64)
    degrees = np.diff(np.append(vertex_array, edge_array.shape[0]))
    sources = np.repeat(np.arange(n, dtype=np.int64), degrees)
    np.minimum.at(matrix, (sources, edge_array), weight_array.astype(np.float64))
    np.fill_diagonal(matrix, 0.0)
    return matrix


def _freeze(*arrays: np.ndarray) -> None:
    for arr in arrays:
        arr.setflags(write=False)


def build_graph(
    num_vertices: int, neighbors_per_vertex: int, seed: int | None = None
) -> Graph:
    """Generate a random directed graph with uniform out-degree.

    Args:
        num_vertices: Number of vertices ``n > 0``.
        neighbors_per_vertex: Out-degree ``k`` with ``0 < k < n``.
        seed: Seed for ``np.random.default_rng``; ``None`` draws fresh entropy.

    Returns:
        Immutable Graph with ``vertex_array[i] == i * k``.

    Raises:
        ConstructionError: If the degree request cannot be satisfied.
    """
    _check_degree(num_vertices, neighbors_per_vertex)
    n, k = num_vertices, neighbors_per_vertex
    rng = np.random.default_rng(seed)

    vertex_array = np.arange(n, dtype=np.int64) * k
    edge_array = np.empty(n * k, dtype=np.int64)
    weight_array = np.empty(n * k, dtype=np.float32)

    for v in range(n):
        start = v * k
        edge_array[start : start + k] = sample_neighbors(v, n, k, rng)
        weight_array[start : start + k] = (
            rng.integers(0, WEIGHT_RESOLUTION, size=k) / WEIGHT_RESOLUTION
        )

    weight_matrix = build_weight_matrix(n, vertex_array, edge_array, weight_array)
    _freeze(vertex_array, edge_array, weight_array, weight_matrix)

    log.info("Graph built (n=%d, k=%d, edges=%d, seed=%s)", n, k, n * k, seed)
    return Graph(
        vertex_array=vertex_array,
        edge_array=edge_array,
        weight_array=weight_array,
        weight_matrix=weight_matrix,
        n=n,
        neighbors_per_vertex=k,
        seed=seed,
    )


def graph_from_edges(
    num_vertices: int, edges: Iterable[tuple[int, int, float]]
) -> Graph:
    """Build a graph from explicit ``(u, v, w)`` edges.

    Edges are grouped by source vertex, keeping input order within a vertex.
    Out-degree may vary; ``neighbors_per_vertex`` is set only when it is
    uniform across all vertices.

    Raises:
        ConstructionError: On a non-positive vertex count, an out-of-range
            endpoint, a self-loop, or a negative or non-finite weight.
    """
    if num_vertices <= 0:
        raise ConstructionError(
            f"num_vertices must be positive, got {num_vertices}"
        )
    n = num_vertices
    per_vertex: list[list[tuple[int, float]]] = [[] for _ in range(n)]
    for u, v, w in edges:
        u, v, w = int(u), int(v), float(w)
        if not (0 <= u < n and 0 <= v < n):
            raise ConstructionError(f"edge ({u}, {v}) has endpoint outside [0, {n})")
        if u == v:
            raise ConstructionError(f"self-loop on vertex {u}")
        if not math.isfinite(w) or w < 0:
            raise ConstructionError(f"invalid weight {w} on edge ({u}, {v})")
        per_vertex[u].append((v, w))

    degrees = np.array([len(out) for out in per_vertex], dtype=np.int64)
    vertex_array = np.concatenate(([0], np.cumsum(degrees)[:-1])).astype(np.int64)
    edge_array = np.array(
        [v for out in per_vertex for v, _ in out], dtype=np.int64
    )
    weight_array = np.array(
        [w for out in per_vertex for _, w in out], dtype=np.float32
    )

    weight_matrix = build_weight_matrix(n, vertex_array, edge_array, weight_array)
    _freeze(vertex_array, edge_array, weight_array, weight_matrix)

    uniform = int(degrees[0]) if n > 0 and (degrees == degrees[0]).all() else None
    return Graph(
        vertex_array=vertex_array,
        edge_array=edge_array,
        weight_array=weight_array,
        weight_matrix=weight_matrix,
        n=n,
        neighbors_per_vertex=uniform,
    )
