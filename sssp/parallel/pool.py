"""Fork-join worker pool with parallel-for and parallel-reduce primitives.

A ``WorkerPool`` wraps a ``ThreadPoolExecutor`` for the lifetime of one SSSP
call. Work over ``range(n)`` is cut into one contiguous chunk per worker;
each call blocks until every chunk has finished, which is the barrier the
shared-memory engine relies on between iterations. NumPy releases the GIL
inside its vectorized kernels, so chunks of array work overlap in practice.
"""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


def default_num_workers() -> int:
    return max(1, min(8, os.cpu_count() or 1))


def chunk_bounds(n: int, parts: int) -> list[tuple[int, int]]:
    """Split ``range(n)`` into at most ``parts`` contiguous non-empty chunks.

    Earlier chunks take the remainder, so sizes differ by at most one.

    Examples:
        >>> chunk_bounds(10, 3)
        [(0, 4), (4, 7), (7, 10)]
        >>> chunk_bounds(2, 4)
        [(0, 1), (1, 2)]
    """
    if n <= 0:
        return []
    parts = max(1, min(parts, n))
    base, extra = divmod(n, parts)
    bounds = []
    start = 0
    for i in range(parts):
        stop = start + base + (1 if i < extra else 0)
        bounds.append((start, stop))
        start = stop
    return bounds


class SharedBest:
    """Running ``(distance, vertex)`` minimum merged from concurrent workers.

    The lock is the single mutual-exclusion primitive of the shared-memory
    engine: it guards both the merge of per-chunk minima and the commit of
    the iteration's current vertex.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.value = float("inf")
        self.index: int | None = None
        self._current: int | None = None

    def reset(self) -> None:
        with self.lock:
            self.value = float("inf")
            self.index = None

    def offer(self, value: float, index: int) -> None:
        """Merge one local minimum; a strictly smaller value replaces the best."""
        with self.lock:
            if self.index is None or value < self.value:
                self.value = value
                self.index = index

    @property
    def current(self) -> int | None:
        """Vertex committed for the running iteration, read under the lock."""
        with self.lock:
            return self._current

    def commit(self, vertex: int) -> int:
        """Publish ``vertex`` as this iteration's current vertex."""
        with self.lock:
            self._current = vertex
            return vertex


class WorkerPool:
    """Explicit thread pool exposing chunked parallel-for and parallel-reduce.

    Usage::

        with WorkerPool(4) as pool:
            pool.parallel_for(n, lambda start, stop: ...)
            total = pool.parallel_reduce(n, count_chunk, operator.add, 0)
    """

    def __init__(self, num_workers: int | None = None) -> None:
        if num_workers is None:
            num_workers = default_num_workers()
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self.num_workers = num_workers
        self._executor: ThreadPoolExecutor | None = ThreadPoolExecutor(
            max_workers=num_workers, thread_name_prefix="sssp-worker"
        )
        log.debug("Worker pool started with %d workers", num_workers)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _map_chunks(self, n: int, fn: Callable[[int, int], T]) -> list[T]:
        if self._executor is None:
            raise RuntimeError("WorkerPool has been shut down")
        futures = [
            self._executor.submit(fn, start, stop)
            for start, stop in chunk_bounds(n, self.num_workers)
        ]
        # result() re-raises any worker exception in the caller
        return [f.result() for f in futures]

    def parallel_for(self, n: int, body: Callable[[int, int], None]) -> None:
        """Run ``body(start, stop)`` over disjoint chunks of ``range(n)``.

        Returns only after every chunk has completed.
        """
        self._map_chunks(n, body)

    def parallel_reduce(
        self,
        n: int,
        map_chunk: Callable[[int, int], T],
        merge: Callable[[T, T], T],
        initial: T,
    ) -> T:
        """Map chunks of ``range(n)`` in parallel, then fold results in chunk order."""
        result = initial
        for partial in self._map_chunks(n, map_chunk):
            result = merge(result, partial)
        return result
