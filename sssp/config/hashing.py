"""Deterministic config hashing using SHA-256 over sorted JSON."""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from sssp.config.experiment import BenchmarkConfig


def config_hash(config: Any) -> str:
    """Deterministic SHA-256 hash of a config object.

    Args:
        config: Any dataclass instance (or sub-config).

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    serialized = json.dumps(
        asdict(config),
        sort_keys=True,
        ensure_ascii=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]


def graph_config_hash(config: BenchmarkConfig) -> str:
    """Hash identifying a generated graph: graph parameters plus seed.

    The same graph parameters with the same seed always produce the same
    graph, so two configs that differ only in engine or device settings
    share a graph hash.
    """
    return config_hash(config.graph) + f"_s{config.seed}"
