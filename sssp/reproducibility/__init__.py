"""Reproducibility infrastructure: seed management."""

from sssp.reproducibility.seed import set_seed, verify_seed_determinism

__all__ = [
    "set_seed",
    "verify_seed_determinism",
]
