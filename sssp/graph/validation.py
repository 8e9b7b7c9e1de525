"""Structural validation and reachability checks for generated graphs."""

import numpy as np
import scipy.sparse
from scipy.sparse.csgraph import breadth_first_order

from sssp.graph.types import NO_EDGE, Graph


def validate_graph(graph: Graph) -> list[str]:
    """Validate a graph against the fixed-out-degree invariants.

    Checks (cheapest first):
    1. CSR offsets are non-decreasing and uniform (``offset[i] == i * k``)
       when the graph declares a uniform degree
    2. Every neighbor id is in range and none is a self-loop
    3. Each vertex's neighbors are distinct
    4. Weights lie in ``[0, 1)``
    5. Dense matrix: zero diagonal, one finite cell per edge, NO_EDGE elsewhere

    Args:
        graph: Graph to validate.

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []
    n = graph.n
    k = graph.neighbors_per_vertex

    # 1. Offsets
    if np.any(np.diff(graph.vertex_array) < 0):
        errors.append("vertex_array offsets are not non-decreasing")
    if k is not None:
        expected = np.arange(n, dtype=np.int64) * k
        if not np.array_equal(graph.vertex_array, expected):
            errors.append(f"vertex_array offsets differ from i * {k}")
        if graph.num_edges != n * k:
            errors.append(f"edge count {graph.num_edges} != n * k = {n * k}")

    # 2. Range and self-loops
    if graph.num_edges and (
        graph.edge_array.min() < 0 or graph.edge_array.max() >= n
    ):
        errors.append("edge_array contains out-of-range vertex ids")
        return errors
    degrees = np.diff(np.append(graph.vertex_array, graph.num_edges))
    sources = np.repeat(np.arange(n, dtype=np.int64), degrees)
    self_loops = int((sources == graph.edge_array).sum())
    if self_loops:
        errors.append(f"Self-loops detected: {self_loops}")

    # 3. Distinct neighbors per vertex
    duplicates = [
        v for v in range(n)
        if np.unique(graph.neighbors(v)).size != graph.out_degree(v)
    ]
    if duplicates:
        errors.append(
            f"Duplicate neighbors on {len(duplicates)} vertices "
            f"(first: {duplicates[0]})"
        )

    # 4. Weight range
    if graph.num_edges and (
        graph.weight_array.min() < 0.0 or graph.weight_array.max() >= 1.0
    ):
        errors.append(
            f"Weights outside [0, 1): min={graph.weight_array.min():.4f}, "
            f"max={graph.weight_array.max():.4f}"
        )

    # 5. Dense matrix consistency
    matrix = graph.weight_matrix
    if matrix.shape != (n, n):
        errors.append(f"weight_matrix shape {matrix.shape} != ({n}, {n})")
        return errors
    if np.any(np.diag(matrix) != 0.0):
        errors.append("weight_matrix diagonal is not zero")
    off_diag = ~np.eye(n, dtype=bool)
    n_finite = int(np.isfinite(matrix[off_diag]).sum())
    if not duplicates and not self_loops and n_finite != graph.num_edges:
        errors.append(
            f"weight_matrix has {n_finite} edges, arrays have {graph.num_edges}"
        )
    cells = matrix[sources, graph.edge_array]
    if not self_loops and np.any(cells == NO_EDGE):
        errors.append("weight_matrix is missing cells for existing edges")

    return errors


def reachable_vertices(graph: Graph, source: int) -> np.ndarray:
    """Vertices reachable from ``source``, in breadth-first order.

    Uses a structural (all-ones) copy of the adjacency so zero-weight edges
    are not dropped as implicit zeros.
    """
    indptr = np.append(graph.vertex_array, graph.num_edges)
    structure = scipy.sparse.csr_matrix(
        (np.ones(graph.num_edges), graph.edge_array, indptr),
        shape=(graph.n, graph.n),
    )
    return breadth_first_order(
        structure, source, directed=True, return_predecessors=False
    )
