"""Benchmark configuration system with frozen, hashable, serializable dataclasses."""

from sssp.config.experiment import (
    BenchmarkConfig,
    DeviceConfig,
    EngineConfig,
    GraphConfig,
    SweepConfig,
)
from sssp.config.defaults import DEFAULT_CONFIG
from sssp.config.hashing import config_hash, graph_config_hash
from sssp.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "BenchmarkConfig",
    "DeviceConfig",
    "EngineConfig",
    "GraphConfig",
    "SweepConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "graph_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
