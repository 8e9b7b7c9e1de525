#!/usr/bin/env python3
"""Entry point for running SSSP backend benchmarks.

Discovers offload devices, builds their kernel programs once, then for each
graph size generates a graph and runs every available backend on it:
sequential -> shared-memory -> offload (GPU) -> offload (CPU device).
All backends must agree on the distance vector.

Usage:
    python run_benchmark.py
    python run_benchmark.py --vertices 512 --vertices 2048 --neighbors 8
    python run_benchmark.py --config config.json --verbose
    python run_benchmark.py --config config.json --dry-run
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Callable, Generator

import numpy as np

from sssp.config import (
    DEFAULT_CONFIG,
    BenchmarkConfig,
    SweepConfig,
    config_from_json,
    config_hash,
    graph_config_hash,
)

log = logging.getLogger(__name__)

RTOL = 1e-5
ATOL = 1e-4


@contextmanager
def stage_timer(name: str) -> Generator[dict[str, float], None, None]:
    """Context manager that prints stage banners and records elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    timing: dict[str, float] = {}
    t0 = time.perf_counter()
    yield timing
    timing["elapsed"] = time.perf_counter() - t0
    print(f"... done in {timing['elapsed'] * 1000:.1f}ms")
    log.info("Completed: %s in %.4fs", name, timing["elapsed"])


def _sizes(config: BenchmarkConfig) -> list[tuple[int, int]]:
    if config.sweep is None:
        return [(config.graph.n, config.graph.neighbors_per_vertex)]
    return [
        (n, k) for n in config.sweep.n_values for k in config.sweep.neighbors_values
    ]


def run_benchmark(config: BenchmarkConfig, show_graph: bool = False) -> bool:
    """Run every available backend on every configured graph size.

    Args:
        config: Benchmark configuration.
        show_graph: Print the edge list and dense matrix of each graph.

    Returns:
        True if every backend agreed with the sequential baseline.

    Raises:
        KernelBuildError: If a device kernel program fails to build.
        ResourceAllocationError: If device buffers cannot be allocated.
    """
    from sssp.engines import dijkstra_sequential, dijkstra_shared_memory
    from sssp.graph import (
        build_graph,
        format_vertex_data,
        format_weight_matrix,
        reachable_vertices,
    )
    from sssp.offload import discover_devices, initialize_kernels, run_offload
    from sssp.reproducibility import set_seed

    set_seed(config.seed)

    with stage_timer("Device Discovery"):
        discovery = discover_devices(
            enable_gpu=config.device.enable_gpu,
            enable_cpu=config.device.enable_cpu,
        )
        print(f"Discovery: {discovery.status.value}")

    with stage_timer("Kernel Build"):
        discovery = initialize_kernels(
            discovery, compile_kernels=config.device.compile_kernels
        )

    all_agree = True
    for n, k in _sizes(config):
        with stage_timer(f"Graph Generation (n={n}, k={k})"):
            graph = build_graph(n, k, seed=config.seed)
            reachable = reachable_vertices(graph, config.source)
            log.info(
                "Graph: n=%d, k=%d, edges=%d, reachable from %d: %d",
                n, k, graph.num_edges, config.source, reachable.size,
            )
        if show_graph:
            print(format_vertex_data(graph))
            print(format_weight_matrix(graph))

        backends: list[tuple[str, Callable[[], np.ndarray]]] = [
            ("sequential", lambda: dijkstra_sequential(graph, config.source).distances),
            (
                f"shared-memory x{config.engine.num_workers}",
                lambda: dijkstra_shared_memory(
                    graph, config.source, config.engine.num_workers
                ).distances,
            ),
        ]
        for ctx in discovery.contexts():
            backends.append((
                f"offload {ctx.kind} ({ctx.name})",
                lambda ctx=ctx: run_offload(
                    graph,
                    config.source,
                    ctx,
                    config.engine.supersteps_per_burst,
                    config.engine.work_group_size,
                ).distances,
            ))

        baseline: np.ndarray | None = None
        rows = []
        for name, run in backends:
            with stage_timer(f"{name} (n={n})") as timing:
                distances = run()
            if baseline is None:
                baseline = distances
            mismatch = np.flatnonzero(
                ~np.isclose(distances, baseline, rtol=RTOL, atol=ATOL)
            )
            agree = mismatch.size == 0
            if not agree:
                v = int(mismatch[0])
                log.warning(
                    "%s disagrees with sequential on %d vertices "
                    "(first %d: %s vs %s)",
                    name, mismatch.size, v, distances[v], baseline[v],
                )
            all_agree &= agree
            rows.append((name, timing["elapsed"], agree))

        print(f"\nResults for n={n}, k={k}, source={config.source}:")
        for name, elapsed, agree in rows:
            status = "ok" if agree else "MISMATCH"
            print(f"  {name:<36} {elapsed * 1000:10.2f} ms  {status}")

    return all_agree


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    """Load the JSON config (or defaults) and apply command-line overrides."""
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        config = config_from_json(config_path.read_text())
    else:
        config = DEFAULT_CONFIG

    graph = config.graph
    engine = config.engine
    device = config.device
    sweep = config.sweep
    if args.vertices or args.neighbors is not None:
        # Size overrides replace the whole size plan, sweep included.
        if args.vertices:
            n_values = tuple(args.vertices)
        elif sweep is not None:
            n_values = sweep.n_values
        else:
            n_values = (graph.n,)
        if args.neighbors is not None:
            k_values = (args.neighbors,)
        elif sweep is not None:
            k_values = sweep.neighbors_values
        else:
            k_values = (graph.neighbors_per_vertex,)

        if len(n_values) == 1 and len(k_values) == 1:
            graph = replace(graph, n=n_values[0], neighbors_per_vertex=k_values[0])
            sweep = None
        else:
            sweep = SweepConfig(n_values=n_values, neighbors_values=k_values)
    if args.workers is not None:
        engine = replace(engine, num_workers=args.workers)
    if args.burst is not None:
        engine = replace(engine, supersteps_per_burst=args.burst)
    if args.no_gpu:
        device = replace(device, enable_gpu=False)
    if args.no_cpu_device:
        device = replace(device, enable_cpu=False)

    overrides = {
        "graph": graph, "engine": engine, "device": device, "sweep": sweep,
    }
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.source is not None:
        overrides["source"] = args.source
    return replace(config, **overrides)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Benchmark SSSP backends on random fixed-out-degree graphs"
    )
    parser.add_argument("--config", type=str, help="Path to config JSON file")
    parser.add_argument(
        "--vertices", type=int, action="append",
        help="Graph size; repeat for a sweep",
    )
    parser.add_argument("--neighbors", type=int, help="Out-degree per vertex")
    parser.add_argument("--source", type=int, help="Source vertex")
    parser.add_argument("--seed", type=int, help="Graph generation seed")
    parser.add_argument("--workers", type=int, help="Shared-memory worker count")
    parser.add_argument(
        "--burst", type=int, help="Offload supersteps between mask readbacks",
    )
    parser.add_argument(
        "--no-gpu", action="store_true", help="Skip the GPU offload backend",
    )
    parser.add_argument(
        "--no-cpu-device", action="store_true",
        help="Skip the CPU-device offload backend",
    )
    parser.add_argument(
        "--show-graph", action="store_true",
        help="Print each graph's edges and weight matrix",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Show the benchmark plan without running it",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable DEBUG-level logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Config hash: {config_hash(config)}")
    print(f"Graph hash:  {graph_config_hash(config)}")
    print(f"Sizes:       {_sizes(config)}")
    print(f"Source:      {config.source}")
    print(f"Workers:     {config.engine.num_workers}")
    print(f"Burst:       {config.engine.supersteps_per_burst} supersteps")
    print(f"Seed:        {config.seed}")

    if args.dry_run:
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    from sssp.offload import KernelBuildError, ResourceAllocationError

    try:
        agreed = run_benchmark(config, show_graph=args.show_graph)
    except KernelBuildError as exc:
        log.error("Kernel build failed on %s", exc.device_name)
        print(exc.diagnostics, file=sys.stderr)
        sys.exit(1)
    except ResourceAllocationError:
        log.exception("Device resource allocation failed")
        sys.exit(1)

    if not agreed:
        log.error("Backends disagree on shortest distances")
        sys.exit(1)


if __name__ == "__main__":
    main()
