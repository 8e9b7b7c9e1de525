"""Tests for the worker pool primitives and the lock-guarded minimum."""

import operator
import threading

import numpy as np
import pytest

from sssp.parallel import SharedBest, WorkerPool, chunk_bounds


class TestChunkBounds:
    """Range partitioning."""

    def test_even_split(self) -> None:
        assert chunk_bounds(8, 4) == [(0, 2), (2, 4), (4, 6), (6, 8)]

    def test_remainder_goes_first(self) -> None:
        assert chunk_bounds(10, 3) == [(0, 4), (4, 7), (7, 10)]

    def test_more_parts_than_items(self) -> None:
        assert chunk_bounds(2, 5) == [(0, 1), (1, 2)]

    def test_empty_range(self) -> None:
        assert chunk_bounds(0, 4) == []

    def test_chunks_cover_range_exactly(self) -> None:
        for n in range(1, 40):
            for parts in range(1, 7):
                bounds = chunk_bounds(n, parts)
                covered = [i for start, stop in bounds for i in range(start, stop)]
                assert covered == list(range(n))


class TestWorkerPool:
    """parallel_for and parallel_reduce semantics."""

    def test_parallel_for_writes_disjoint_slices(self) -> None:
        out = np.zeros(100)

        def body(start: int, stop: int) -> None:
            out[start:stop] = np.arange(start, stop)

        with WorkerPool(4) as pool:
            pool.parallel_for(100, body)
        np.testing.assert_array_equal(out, np.arange(100))

    def test_parallel_reduce_sum(self) -> None:
        with WorkerPool(3) as pool:
            total = pool.parallel_reduce(
                1000, lambda start, stop: sum(range(start, stop)), operator.add, 0
            )
        assert total == sum(range(1000))

    def test_parallel_reduce_merges_in_chunk_order(self) -> None:
        with WorkerPool(4) as pool:
            parts = pool.parallel_reduce(
                8, lambda start, stop: [(start, stop)], operator.add, []
            )
        assert parts == chunk_bounds(8, 4)

    def test_worker_exception_propagates(self) -> None:
        def body(start: int, stop: int) -> None:
            raise KeyError("boom")

        with WorkerPool(2) as pool:
            with pytest.raises(KeyError):
                pool.parallel_for(10, body)

    def test_use_after_shutdown(self) -> None:
        pool = WorkerPool(2)
        pool.shutdown()
        pool.shutdown()
        with pytest.raises(RuntimeError, match="shut down"):
            pool.parallel_for(4, lambda start, stop: None)

    def test_invalid_worker_count(self) -> None:
        with pytest.raises(ValueError):
            WorkerPool(0)

    def test_default_worker_count(self) -> None:
        with WorkerPool() as pool:
            assert pool.num_workers >= 1


class TestSharedBest:
    """Concurrent offers keep the minimum."""

    def test_offer_keeps_strict_minimum(self) -> None:
        best = SharedBest()
        best.offer(0.5, 3)
        best.offer(0.2, 7)
        best.offer(0.2, 1)
        best.offer(0.9, 0)
        assert best.value == 0.2
        assert best.index == 7

    def test_first_offer_accepted_even_at_infinity(self) -> None:
        best = SharedBest()
        best.offer(float("inf"), 4)
        assert best.index == 4

    def test_reset(self) -> None:
        best = SharedBest()
        best.offer(0.1, 2)
        best.reset()
        assert best.index is None
        assert best.value == float("inf")

    def test_commit_records_current(self) -> None:
        best = SharedBest()
        assert best.commit(5) == 5
        assert best.current == 5

    def test_concurrent_offers(self) -> None:
        best = SharedBest()
        values = np.random.default_rng(0).random(400)

        def worker(offset: int) -> None:
            for i in range(offset, 400, 4):
                best.offer(float(values[i]), i)

        threads = [threading.Thread(target=worker, args=(k,)) for k in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert best.index == int(np.argmin(values))
