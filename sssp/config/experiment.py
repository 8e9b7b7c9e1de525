"""Benchmark configuration dataclasses, frozen and slotted."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Fixed-out-degree random graph parameters."""

    n: int = 1024  # number of vertices
    neighbors_per_vertex: int = 6  # out-degree k, 0 < k < n


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Execution parameters shared by the parallel engines."""

    num_workers: int = 4  # shared-memory worker pool size
    supersteps_per_burst: int = 10  # offload supersteps between mask readbacks
    work_group_size: int = 256  # device buffers are padded to a multiple of this


@dataclass(frozen=True, slots=True)
class DeviceConfig:
    """Which offload backends discovery may enable."""

    enable_gpu: bool = True
    enable_cpu: bool = True
    compile_kernels: bool = False  # route kernels through torch.compile


@dataclass(frozen=True, slots=True)
class SweepConfig:
    """Graph-size sweep driven by run_benchmark.py."""

    n_values: tuple[int, ...] = (256, 512, 1024)
    neighbors_values: tuple[int, ...] = (6,)


@dataclass(frozen=True, slots=True)
class BenchmarkConfig:
    """Top-level benchmark configuration composing all sub-configs.

    All fields are frozen and typed. Cross-parameter validation runs
    in __post_init__ to reject invalid configurations early.
    """

    graph: GraphConfig = field(default_factory=GraphConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    sweep: SweepConfig | None = None
    seed: int = 42
    source: int = 0
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Cross-parameter validation."""
        if self.graph.n <= 0:
            raise ValueError(f"n must be positive, got {self.graph.n}")
        if not 0 < self.graph.neighbors_per_vertex < self.graph.n:
            raise ValueError(
                f"neighbors_per_vertex ({self.graph.neighbors_per_vertex}) "
                f"must be in (0, n={self.graph.n})"
            )
        if not 0 <= self.source < self.graph.n:
            raise ValueError(
                f"source ({self.source}) must be a vertex in [0, {self.graph.n})"
            )
        if self.engine.num_workers < 1:
            raise ValueError(
                f"num_workers must be >= 1, got {self.engine.num_workers}"
            )
        if self.engine.supersteps_per_burst < 1:
            raise ValueError(
                f"supersteps_per_burst must be >= 1, "
                f"got {self.engine.supersteps_per_burst}"
            )
        if self.engine.work_group_size < 1:
            raise ValueError(
                f"work_group_size must be >= 1, got {self.engine.work_group_size}"
            )
        if self.sweep is not None:
            for n in self.sweep.n_values:
                for k in self.sweep.neighbors_values:
                    if not 0 < k < n:
                        raise ValueError(
                            f"sweep pair (n={n}, neighbors_per_vertex={k}) "
                            f"violates 0 < neighbors_per_vertex < n"
                        )
                    if self.source >= n:
                        raise ValueError(
                            f"source ({self.source}) out of range for "
                            f"sweep size n={n}"
                        )
