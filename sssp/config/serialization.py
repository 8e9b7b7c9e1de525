"""JSON serialization and deserialization for benchmark configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from sssp.config.experiment import BenchmarkConfig

_DACITE_CONFIG = DaciteConfig(
    cast=[tuple],
    check_types=True,
    strict=True,
)


def config_to_json(config: BenchmarkConfig) -> str:
    """Serialize a BenchmarkConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> BenchmarkConfig:
    """Deserialize a JSON string to a BenchmarkConfig.

    Uses dacite with strict=True to reject unknown keys and cast=[tuple]
    to convert JSON arrays back to tuples for tags and sweep fields.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: BenchmarkConfig) -> dict[str, Any]:
    """Convert a BenchmarkConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> BenchmarkConfig:
    """Reconstruct a BenchmarkConfig from a plain dictionary."""
    return from_dict(data_class=BenchmarkConfig, data=d, config=_DACITE_CONFIG)
