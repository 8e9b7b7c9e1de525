"""Human-readable dumps of a graph's edge list and dense weight matrix."""

import numpy as np

from sssp.graph.types import Graph


def format_vertex_data(graph: Graph) -> str:
    """One line per edge: ``Vertex <v>; Edge <u>; Weight = <w>``."""
    lines = []
    for v in range(graph.n):
        for slot in range(graph.out_degree(v)):
            lines.append(
                f"Vertex {v}; Edge {graph.edge_at(v, slot)}; "
                f"Weight = {graph.weight_at(v, slot):.3f}"
            )
    return "\n".join(lines)


def format_weight_matrix(graph: Graph) -> str:
    """Tab-separated dense matrix; absent edges render as ``--``."""
    rows = ["Weight matrix"]
    for row in graph.weight_matrix:
        rows.append(
            "\t".join(f"{w:.3g}" if np.isfinite(w) else "--" for w in row)
        )
    return "\n".join(rows)
