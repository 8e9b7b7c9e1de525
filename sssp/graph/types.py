"""Graph data structures for fixed-out-degree SSSP benchmarks."""

from dataclasses import dataclass

import numpy as np
import scipy.sparse

# Dense-matrix marker for "no edge". Distinct from 0.0, which is a valid weight.
NO_EDGE = np.inf


@dataclass(frozen=True)
class Graph:
    """Immutable directed graph in CSR form plus a dense weight-matrix view.

    The out-edges of vertex ``v`` occupy ``edge_array[vertex_array[v]:end]``
    where ``end`` is the next vertex's offset (or ``len(edge_array)`` for the
    last vertex). Graphs from the random generator have a uniform out-degree
    of ``neighbors_per_vertex``, so ``vertex_array[v] == v * k``; graphs
    built from an explicit edge list may be irregular and carry ``None``.

    Uses frozen=True but omits slots=True since numpy arrays don't interact
    well with __slots__. The arrays are marked read-only at construction.
    """

    vertex_array: np.ndarray  # int64 (n,), offset of each vertex's first edge
    edge_array: np.ndarray  # int64 (E,), flattened neighbor ids
    weight_array: np.ndarray  # float32 (E,), parallel to edge_array
    weight_matrix: np.ndarray  # float64 (n, n), NO_EDGE where unconnected
    n: int  # number of vertices
    neighbors_per_vertex: int | None  # uniform out-degree, None if irregular
    seed: int | None = None  # generation seed, None for explicit graphs

    @property
    def num_edges(self) -> int:
        return int(self.edge_array.shape[0])

    def _edge_range(self, v: int) -> tuple[int, int]:
        if not 0 <= v < self.n:
            raise IndexError(f"vertex {v} out of range [0, {self.n})")
        start = int(self.vertex_array[v])
        end = (
            int(self.vertex_array[v + 1]) if v + 1 < self.n else self.num_edges
        )
        return start, end

    def out_degree(self, v: int) -> int:
        """Number of outgoing edges of vertex ``v``."""
        start, end = self._edge_range(v)
        return end - start

    def _slot_index(self, v: int, slot: int) -> int:
        start, end = self._edge_range(v)
        if not 0 <= slot < end - start:
            raise IndexError(
                f"slot {slot} out of range for vertex {v} "
                f"with out-degree {end - start}"
            )
        return start + slot

    def edge_at(self, v: int, slot: int) -> int:
        """Return the neighbor id stored in ``slot`` of vertex ``v``.

        Raises:
            IndexError: If ``v`` or ``slot`` is out of range.
        """
        return int(self.edge_array[self._slot_index(v, slot)])

    def weight_at(self, v: int, slot: int) -> float:
        """Return the weight of the edge stored in ``slot`` of vertex ``v``.

        Raises:
            IndexError: If ``v`` or ``slot`` is out of range.
        """
        return float(self.weight_array[self._slot_index(v, slot)])

    def neighbors(self, v: int) -> np.ndarray:
        start, end = self._edge_range(v)
        return self.edge_array[start:end]

    def edge_weights(self, v: int) -> np.ndarray:
        start, end = self._edge_range(v)
        return self.weight_array[start:end]

    def has_edge(self, u: int, v: int) -> bool:
        """True if the dense matrix holds an edge ``u -> v`` (zero weight counts)."""
        return u != v and bool(np.isfinite(self.weight_matrix[u, v]))

    @property
    def adjacency(self) -> scipy.sparse.csr_matrix:
        """Weighted CSR view sharing the graph's edge layout."""
        indptr = np.append(self.vertex_array, self.num_edges)
        return scipy.sparse.csr_matrix(
            (self.weight_array.astype(np.float64), self.edge_array, indptr),
            shape=(self.n, self.n),
        )
