"""Result containers shared by the host SSSP engines."""

from dataclasses import dataclass

import numpy as np

from sssp.graph.types import Graph


@dataclass(frozen=True)
class SSSPResult:
    """Distances from one SSSP call plus best-effort bookkeeping.

    ``path_trace[v]`` lists every vertex whose relaxation improved ``v``, in
    the order the improvements happened. It is a trace, not a reconstructed
    shortest path; its last entry is the final predecessor.
    """

    distances: np.ndarray  # float64 (n,), inf where unreachable
    source: int
    iterations: int  # frontier selections performed
    relaxations: int  # successful distance decreases
    path_trace: list[list[int]]


def validate_source(graph: Graph, source: int) -> None:
    """Raise ValueError unless ``source`` is a vertex of ``graph``."""
    if not 0 <= source < graph.n:
        raise ValueError(f"source {source} out of range [0, {graph.n})")


def initial_distances(n: int, source: int) -> np.ndarray:
    distances = np.full(n, np.inf, dtype=np.float64)
    distances[source] = 0.0
    return distances
