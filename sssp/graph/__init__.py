"""Graph store: fixed-out-degree random graphs, frontier selection, validation."""

from sssp.graph.display import format_vertex_data, format_weight_matrix
from sssp.graph.frontier import min_unfinalized, min_unfinalized_parallel
from sssp.graph.generator import (
    ConstructionError,
    build_graph,
    build_weight_matrix,
    graph_from_edges,
    sample_neighbors,
)
from sssp.graph.types import NO_EDGE, Graph
from sssp.graph.validation import reachable_vertices, validate_graph

__all__ = [
    "ConstructionError",
    "Graph",
    "NO_EDGE",
    "build_graph",
    "build_weight_matrix",
    "format_vertex_data",
    "format_weight_matrix",
    "graph_from_edges",
    "min_unfinalized",
    "min_unfinalized_parallel",
    "reachable_vertices",
    "sample_neighbors",
    "validate_graph",
]
