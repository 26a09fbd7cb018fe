#!/usr/bin/env python3
"""
Sampling throughput benchmark.

Times the three estimators on the bundled networks for a range of batch
sizes and reports trials per second.
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import numpy as np

from bayesnet import Query
from bayesnet.networks import get_network

QUERIES = {
    "storm_rain": Query.of("Rain", {"Storm": False}),
    "burglary_alarm": Query.of("Burglary", {"JohnCalls": True, "MaryCalls": True}),
    "sprinkler": Query.of(["Rain", "Sprinkler"], {"WetGrass": True}),
}


@dataclass
class BenchmarkResult:
    network: str
    method: str
    batch_size: Optional[int]
    min_s: float
    mean_s: float
    trials_per_s: float


def bench(fn: Callable[[], object], *, iterations: int) -> List[float]:
    timings = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return timings


def run(
    networks: Iterable[str],
    *,
    samples: int,
    batch_sizes: List[Optional[int]],
    iterations: int,
    seed: int,
) -> List[BenchmarkResult]:
    results = []
    for name in networks:
        network = get_network(name)
        query = QUERIES[name]
        for method in ("prior_sample", "rejection_sample", "likelihood_weighting"):
            sampler = getattr(network, method)
            for batch_size in batch_sizes:
                rng = np.random.default_rng(seed)
                timings = bench(
                    lambda: sampler(query, samples, rng, batch_size=batch_size),
                    iterations=iterations,
                )
                results.append(
                    BenchmarkResult(
                        network=name,
                        method=method,
                        batch_size=batch_size,
                        min_s=min(timings),
                        mean_s=sum(timings) / len(timings),
                        trials_per_s=samples / max(min(timings), 1e-12),
                    )
                )
    return results


def main() -> None:
    parser = argparse.ArgumentParser(description="Sampling throughput benchmark")
    parser.add_argument("--samples", type=int, default=100_000)
    parser.add_argument("--iterations", type=int, default=5)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--batch-sizes",
        type=int,
        nargs="*",
        default=[1024, 4096, 65536],
        help="Batch sizes to time; 0 means one batch holding every trial",
    )
    parser.add_argument("--networks", nargs="*", default=sorted(QUERIES), choices=sorted(QUERIES))
    args = parser.parse_args()

    results = run(
        args.networks,
        samples=args.samples,
        batch_sizes=[size or None for size in args.batch_sizes],
        iterations=args.iterations,
        seed=args.seed,
    )
    print(f"{'network':<16}{'method':<24}{'batch':>8}{'min s':>10}{'mean s':>10}{'trials/s':>14}")
    for row in results:
        batch = "all" if row.batch_size is None else str(row.batch_size)
        print(
            f"{row.network:<16}{row.method:<24}{batch:>8}"
            f"{row.min_s:>10.4f}{row.mean_s:>10.4f}{row.trials_per_s:>14.0f}"
        )


if __name__ == "__main__":
    main()
