"""Centralized seed management for reproducible benchmark runs.

Seeds the global RNG sources (Python random, NumPy, PyTorch CPU/GPU) from a
single master seed. Graph generation itself draws from its own
``np.random.default_rng(seed)`` and does not depend on these globals.
"""

import random

import numpy as np
import torch


def set_seed(seed: int) -> None:
    """Set all global random seeds.

    Seeds are set in this order:

    1. Python random module
    2. NumPy legacy global RNG
    3. PyTorch CPU RNG
    4. PyTorch CUDA RNG (all GPUs)

    Deterministic-algorithm enforcement is left off: the offload relax
    kernel uses ``scatter_reduce`` with ``amin``, which has no deterministic
    CUDA implementation but produces the same minimum in any order.

    Args:
        seed: Master seed value (e.g., 42).
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    torch.cuda.manual_seed_all(seed)


def verify_seed_determinism(seed: int) -> bool:
    """Verify that setting the seed produces identical sequences.

    Sets the seed, draws 10 values from each of random, numpy and torch,
    resets the seed and draws again.

    Args:
        seed: Seed value to test.

    Returns:
        True if all RNG sources produce identical sequences after re-seeding.
    """
    set_seed(seed)
    r1 = [random.random() for _ in range(10)]
    n1 = np.random.rand(10).tolist()
    t1 = torch.rand(10).tolist()

    set_seed(seed)
    r2 = [random.random() for _ in range(10)]
    n2 = np.random.rand(10).tolist()
    t2 = torch.rand(10).tolist()

    return r1 == r2 and n1 == n2 and t1 == t2
