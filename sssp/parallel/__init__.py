"""Shared-memory parallel primitives: worker pool and lock-guarded minimum."""

from sssp.parallel.pool import (
    SharedBest,
    WorkerPool,
    chunk_bounds,
    default_num_workers,
)

__all__ = [
    "SharedBest",
    "WorkerPool",
    "chunk_bounds",
    "default_num_workers",
]
