"""Tests for fixed-out-degree graph generation, accessors and validation."""

import numpy as np
import pytest
import scipy.sparse

from sssp.graph import (
    NO_EDGE,
    ConstructionError,
    Graph,
    build_graph,
    format_vertex_data,
    format_weight_matrix,
    graph_from_edges,
    reachable_vertices,
    sample_neighbors,
    validate_graph,
)


def _make_scenario_graph() -> Graph:
    """The 4-vertex example: 0->1 (0.2), 1->2 (0.3), 0->2 (0.9), 2->3 (0.1)."""
    return graph_from_edges(
        4, [(0, 1, 0.2), (1, 2, 0.3), (0, 2, 0.9), (2, 3, 0.1)]
    )


class TestSampleNeighbors:
    """Tests for rejection sampling of distinct neighbors."""

    def test_neighbors_distinct_and_not_self(self) -> None:
        rng = np.random.default_rng(0)
        for v in range(20):
            nbrs = sample_neighbors(v, 20, 19, rng)
            assert len(set(nbrs.tolist())) == 19
            assert v not in nbrs

    def test_neighbors_in_range(self) -> None:
        rng = np.random.default_rng(1)
        nbrs = sample_neighbors(3, 50, 10, rng)
        assert nbrs.min() >= 0
        assert nbrs.max() < 50


class TestBuildGraph:
    """Tests for end-to-end random graph generation."""

    def test_uniform_out_degree(self) -> None:
        graph = build_graph(64, 5, seed=42)
        assert graph.num_edges == 64 * 5
        assert all(graph.out_degree(v) == 5 for v in range(64))

    def test_vertex_offsets(self) -> None:
        graph = build_graph(30, 4, seed=42)
        np.testing.assert_array_equal(graph.vertex_array, np.arange(30) * 4)

    def test_neighbors_distinct_no_self_loops(self) -> None:
        graph = build_graph(100, 7, seed=3)
        for v in range(graph.n):
            nbrs = graph.neighbors(v)
            assert np.unique(nbrs).size == 7
            assert v not in nbrs

    def test_weights_in_unit_interval(self) -> None:
        graph = build_graph(200, 6, seed=5)
        assert graph.weight_array.min() >= 0.0
        assert graph.weight_array.max() < 1.0

    def test_validate_graph_passes(self) -> None:
        assert validate_graph(build_graph(128, 6, seed=11)) == []

    def test_complete_degree(self) -> None:
        """k = n - 1 connects every vertex to all others."""
        graph = build_graph(6, 5, seed=0)
        for v in range(6):
            assert sorted(graph.neighbors(v).tolist()) == [
                u for u in range(6) if u != v
            ]

    def test_same_seed_same_graph(self) -> None:
        g1 = build_graph(50, 4, seed=123)
        g2 = build_graph(50, 4, seed=123)
        np.testing.assert_array_equal(g1.edge_array, g2.edge_array)
        np.testing.assert_array_equal(g1.weight_array, g2.weight_array)
        assert g1.seed == 123

    def test_different_seed_different_graph(self) -> None:
        g1 = build_graph(50, 4, seed=1)
        g2 = build_graph(50, 4, seed=2)
        assert not np.array_equal(g1.edge_array, g2.edge_array)

    def test_arrays_are_read_only(self) -> None:
        graph = build_graph(10, 2, seed=0)
        with pytest.raises(ValueError):
            graph.edge_array[0] = 0
        with pytest.raises(ValueError):
            graph.weight_matrix[0, 1] = 0.5


class TestConstructionErrors:
    """Degenerate degree requests fail fast instead of looping."""

    def test_degree_equal_to_n_rejected(self) -> None:
        with pytest.raises(ConstructionError, match="neighbors_per_vertex"):
            build_graph(5, 5)

    def test_degree_above_n_rejected(self) -> None:
        with pytest.raises(ConstructionError):
            build_graph(5, 9)

    def test_zero_degree_rejected(self) -> None:
        with pytest.raises(ConstructionError):
            build_graph(5, 0)

    def test_single_vertex_cannot_be_generated(self) -> None:
        with pytest.raises(ConstructionError):
            build_graph(1, 1)

    def test_nonpositive_vertices_rejected(self) -> None:
        with pytest.raises(ConstructionError, match="num_vertices"):
            build_graph(0, 1)

    def test_is_value_error(self) -> None:
        assert issubclass(ConstructionError, ValueError)

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ConstructionError, match="weight"):
            graph_from_edges(2, [(0, 1, -0.5)])

    def test_self_loop_rejected(self) -> None:
        with pytest.raises(ConstructionError, match="self-loop"):
            graph_from_edges(2, [(1, 1, 0.5)])

    def test_out_of_range_endpoint_rejected(self) -> None:
        with pytest.raises(ConstructionError):
            graph_from_edges(2, [(0, 2, 0.5)])


class TestWeightMatrix:
    """Dense view uses an explicit sentinel for missing edges."""

    def test_diagonal_zero(self) -> None:
        graph = build_graph(20, 3, seed=0)
        assert np.all(np.diag(graph.weight_matrix) == 0.0)

    def test_missing_edges_are_sentinel(self) -> None:
        graph = _make_scenario_graph()
        assert graph.weight_matrix[1, 0] == NO_EDGE
        assert graph.weight_matrix[3, 0] == NO_EDGE
        assert not graph.has_edge(3, 0)

    def test_zero_weight_edge_is_an_edge(self) -> None:
        graph = graph_from_edges(3, [(0, 1, 0.0), (1, 2, 0.4)])
        assert graph.weight_matrix[0, 1] == 0.0
        assert graph.has_edge(0, 1)
        assert not graph.has_edge(0, 2)

    def test_matrix_matches_arrays(self) -> None:
        graph = build_graph(40, 5, seed=9)
        for v in range(graph.n):
            for slot in range(5):
                u = graph.edge_at(v, slot)
                assert graph.weight_matrix[v, u] == pytest.approx(
                    graph.weight_at(v, slot)
                )
        off_diag = ~np.eye(40, dtype=bool)
        assert np.isfinite(graph.weight_matrix[off_diag]).sum() == 40 * 5

    def test_duplicate_edges_keep_min_weight(self) -> None:
        graph = graph_from_edges(2, [(0, 1, 0.7), (0, 1, 0.3)])
        assert graph.weight_matrix[0, 1] == pytest.approx(0.3)


class TestAccessors:
    """Bounds-checked edge and weight accessors."""

    def test_edge_and_weight_at(self) -> None:
        graph = _make_scenario_graph()
        assert graph.edge_at(0, 0) == 1
        assert graph.edge_at(0, 1) == 2
        assert graph.weight_at(0, 1) == pytest.approx(0.9)
        assert graph.edge_at(2, 0) == 3

    def test_slot_out_of_range(self) -> None:
        graph = _make_scenario_graph()
        with pytest.raises(IndexError):
            graph.edge_at(0, 2)
        with pytest.raises(IndexError):
            graph.weight_at(3, 0)  # vertex 3 has no out-edges

    def test_vertex_out_of_range(self) -> None:
        graph = build_graph(5, 2, seed=0)
        with pytest.raises(IndexError):
            graph.edge_at(5, 0)
        with pytest.raises(IndexError):
            graph.edge_at(-1, 0)

    def test_irregular_graph_has_no_uniform_degree(self) -> None:
        graph = _make_scenario_graph()
        assert graph.neighbors_per_vertex is None
        assert [graph.out_degree(v) for v in range(4)] == [2, 1, 1, 0]
        np.testing.assert_array_equal(graph.vertex_array, [0, 2, 3, 4])

    def test_adjacency_view(self) -> None:
        graph = build_graph(16, 3, seed=2)
        adj = graph.adjacency
        assert isinstance(adj, scipy.sparse.csr_matrix)
        assert adj.shape == (16, 16)
        np.testing.assert_array_equal(adj.indices, graph.edge_array)


class TestValidation:
    """validate_graph reports broken invariants."""

    def test_detects_duplicate_neighbors(self) -> None:
        graph = graph_from_edges(3, [
            (0, 1, 0.1), (0, 1, 0.2),
            (1, 2, 0.1), (1, 0, 0.2),
            (2, 0, 0.1), (2, 1, 0.2),
        ])
        errors = validate_graph(graph)
        assert any("Duplicate" in e for e in errors)

    def test_detects_weight_out_of_range(self) -> None:
        graph = graph_from_edges(2, [(0, 1, 1.5), (1, 0, 0.5)])
        errors = validate_graph(graph)
        assert any("Weights outside" in e for e in errors)

    def test_detects_non_uniform_offsets(self) -> None:
        graph = build_graph(6, 2, seed=0)
        broken = Graph(
            vertex_array=np.array([0, 1, 4, 6, 8, 10]),
            edge_array=graph.edge_array,
            weight_array=graph.weight_array,
            weight_matrix=graph.weight_matrix,
            n=6,
            neighbors_per_vertex=2,
        )
        assert any("offsets" in e for e in validate_graph(broken))


class TestReachability:
    """Breadth-first reachability keeps zero-weight edges."""

    def test_reachable_through_zero_weight_edge(self) -> None:
        graph = graph_from_edges(3, [(0, 1, 0.0), (1, 2, 0.5)])
        assert sorted(reachable_vertices(graph, 0).tolist()) == [0, 1, 2]

    def test_unreachable_vertices_excluded(self) -> None:
        graph = _make_scenario_graph()
        assert sorted(reachable_vertices(graph, 2).tolist()) == [2, 3]


class TestDisplay:
    """Text dumps of the graph."""

    def test_vertex_data_lines(self) -> None:
        text = format_vertex_data(_make_scenario_graph())
        lines = text.splitlines()
        assert len(lines) == 4
        assert lines[0] == "Vertex 0; Edge 1; Weight = 0.200"

    def test_weight_matrix_marks_missing_edges(self) -> None:
        text = format_weight_matrix(_make_scenario_graph())
        lines = text.splitlines()
        assert lines[0] == "Weight matrix"
        assert len(lines) == 5
        assert lines[4].split("\t") == ["--", "--", "--", "0"]
