"""Default configuration: single source of truth for benchmark parameters."""

from sssp.config.experiment import BenchmarkConfig

# Instantiated with all-default values: n=1024, neighbors_per_vertex=6,
# num_workers=4, supersteps_per_burst=10, seed=42, source=0.
DEFAULT_CONFIG = BenchmarkConfig()
