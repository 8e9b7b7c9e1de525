"""Tests for the shared-memory parallel Dijkstra engine."""

import numpy as np
import pytest

from sssp.engines import (
    dijkstra_sequential,
    dijkstra_shared_memory,
    sequential,
    shared_memory_parallel,
)
from sssp.engines import shared_memory
from sssp.graph import build_graph, graph_from_edges
from sssp.parallel import SharedBest, WorkerPool


class TestSharedMemoryEngine:
    """Parallel engine agrees with the sequential baseline."""

    def test_scenario(self) -> None:
        graph = graph_from_edges(
            4, [(0, 1, 0.2), (1, 2, 0.3), (0, 2, 0.9), (2, 3, 0.1)]
        )
        np.testing.assert_allclose(
            shared_memory_parallel(graph, 0, num_workers=2),
            [0.0, 0.2, 0.5, 0.6],
            atol=1e-6,
        )

    @pytest.mark.parametrize("workers", [1, 2, 3, 8])
    def test_matches_sequential(self, workers: int) -> None:
        graph = build_graph(120, 5, seed=17)
        np.testing.assert_allclose(
            shared_memory_parallel(graph, 0, num_workers=workers),
            sequential(graph, 0),
            rtol=1e-12,
        )

    def test_single_vertex(self) -> None:
        graph = graph_from_edges(1, [])
        np.testing.assert_array_equal(shared_memory_parallel(graph, 0), [0.0])

    def test_unreachable_stay_infinite(self) -> None:
        graph = graph_from_edges(4, [(0, 1, 0.5), (2, 3, 0.5)])
        dist = shared_memory_parallel(graph, 0, num_workers=2)
        assert np.isinf(dist[2]) and np.isinf(dist[3])

    def test_source_distance_zero(self) -> None:
        graph = build_graph(64, 3, seed=5)
        assert shared_memory_parallel(graph, 31, num_workers=4)[31] == 0.0

    def test_idempotent(self) -> None:
        graph = build_graph(90, 4, seed=8)
        first = shared_memory_parallel(graph, 2, num_workers=4)
        second = shared_memory_parallel(graph, 2, num_workers=4)
        np.testing.assert_array_equal(first, second)

    def test_source_out_of_range(self) -> None:
        graph = build_graph(10, 2, seed=0)
        with pytest.raises(ValueError, match="source"):
            shared_memory_parallel(graph, -1)

    def test_external_pool_left_running(self) -> None:
        graph = build_graph(30, 3, seed=1)
        with WorkerPool(3) as pool:
            first = dijkstra_shared_memory(graph, 0, pool=pool)
            second = dijkstra_shared_memory(graph, 1, pool=pool)
        assert first.distances[0] == 0.0
        assert second.distances[1] == 0.0

    def test_relaxation_accounting_matches_trace(self) -> None:
        graph = build_graph(50, 4, seed=3)
        result = dijkstra_shared_memory(graph, 0, num_workers=3)
        assert result.relaxations == sum(len(t) for t in result.path_trace)
        assert result.iterations == graph.n - 1

    def test_final_predecessor_consistent(self) -> None:
        """The last traced predecessor realizes each finite distance."""
        graph = build_graph(80, 4, seed=12)
        result = dijkstra_shared_memory(graph, 0, num_workers=4)
        dist = result.distances
        for v in range(1, graph.n):
            if not np.isfinite(dist[v]):
                continue
            pred = result.path_trace[v][-1]
            assert dist[pred] + graph.weight_matrix[pred, v] == pytest.approx(dist[v])

    def test_result_distances_match_sequential(self) -> None:
        graph = build_graph(40, 3, seed=6)
        seq = dijkstra_sequential(graph, 0)
        par = dijkstra_shared_memory(graph, 0, num_workers=2)
        np.testing.assert_allclose(par.distances, seq.distances)


class _RecordingBest(SharedBest):
    """SharedBest that logs every read of the committed vertex."""

    def __init__(self) -> None:
        super().__init__()
        self.commits: list[int] = []
        self.reads: list[int | None] = []

    @property
    def current(self) -> int | None:
        value = SharedBest.current.fget(self)
        self.reads.append(value)
        return value

    def commit(self, vertex: int) -> int:
        self.commits.append(vertex)
        return super().commit(vertex)


class TestCommittedVertex:
    """Relaxation workers take the current vertex from the shared scalar."""

    def test_workers_read_committed_vertex(self, monkeypatch) -> None:
        created: list[_RecordingBest] = []

        def factory() -> _RecordingBest:
            best = _RecordingBest()
            created.append(best)
            return best

        monkeypatch.setattr(shared_memory, "SharedBest", factory)
        graph = build_graph(20, 3, seed=2)
        with WorkerPool(3) as pool:
            result = dijkstra_shared_memory(graph, 0, pool=pool)

        (best,) = created
        assert len(best.commits) == graph.n - 1
        # one read per relaxation chunk, three chunks per iteration
        assert len(best.reads) == 3 * (graph.n - 1)
        assert set(best.reads) == set(best.commits)
        np.testing.assert_allclose(result.distances, sequential(graph, 0))
