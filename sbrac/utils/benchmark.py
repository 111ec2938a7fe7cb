"""
Benchmarks for SBRAC core components.

Run with: python -m sbrac.utils.benchmark
"""

import time
import statistics
from typing import Callable, List
from dataclasses import dataclass

from sbrac.crypto import DeterministicRandom, GroupParameters, MODP_2048
from sbrac.core.auction import ClearingPriceEngine, commit_bid
from sbrac.core.auction.participant import ParticipantState
from sbrac.core.prover import commit_bit, generate_bit_proof, verify_bit_proof
from sbrac.utils.logger import get_logger

logger = get_logger("benchmark")


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Result of a benchmark run."""
    name: str
    iterations: int
    total_time_ms: float
    avg_time_ms: float
    min_time_ms: float
    max_time_ms: float
    ops_per_sec: float

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.1f} ops/s "
            f"(avg={self.avg_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(
    name: str,
    func: Callable,
    iterations: int = 100,
    warmup: int = 5,
) -> BenchmarkResult:
    """
    Run a benchmark.

    Args:
        name: Benchmark name
        func: Function to benchmark (no args)
        iterations: Number of iterations
        warmup: Warmup iterations

    Returns:
        BenchmarkResult
    """
    if iterations < 1:
        raise ValueError("iterations must be >= 1")

    for _ in range(warmup):
        func()

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # ms

    total = sum(times)
    avg = statistics.mean(times)

    return BenchmarkResult(
        name=name,
        iterations=iterations,
        total_time_ms=total,
        avg_time_ms=avg,
        min_time_ms=min(times),
        max_time_ms=max(times),
        ops_per_sec=1000 / avg if avg > 0 else float("inf"),
    )


# =============================================================================
# Participant and Engine Benchmarks
# =============================================================================


def benchmark_engine(params: GroupParameters = MODP_2048, scale: int = 1) -> List[BenchmarkResult]:
    """Benchmark participant setup and full auction runs."""
    results = []
    rng = DeterministicRandom(seed=7)

    results.append(benchmark(
        "Participant setup (9 bits)",
        lambda: ParticipantState.create(params, 123, 0, 9, 4, rng),
        iterations=10 * scale,
        warmup=1,
    ))

    engine = ClearingPriceEngine(params, rng)
    results.append(benchmark(
        "Auction run (4 bidders, 9 bits)",
        lambda: engine.run([159, 102, 390, 215], 9),
        iterations=2 * scale,
        warmup=1,
    ))

    return results


# =============================================================================
# Proof Benchmarks
# =============================================================================


def benchmark_proofs(params: GroupParameters = MODP_2048, scale: int = 1) -> List[BenchmarkResult]:
    """Benchmark bit proof generation and verification."""
    results = []
    rng = DeterministicRandom(seed=11)
    commitment, _ = commit_bid(params, 42, rng)
    value, t, s = commit_bit(params, 1, rng)
    proof = generate_bit_proof(params, commitment, value, t, s, 1, 3, rng)

    results.append(benchmark(
        "Bit proof generation",
        lambda: generate_bit_proof(params, commitment, value, t, s, 1, 3, rng),
        iterations=10 * scale,
        warmup=1,
    ))

    results.append(benchmark(
        "Bit proof verification",
        lambda: verify_bit_proof(params, commitment, value, proof, 3),
        iterations=10 * scale,
        warmup=1,
    ))

    return results


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks(params: GroupParameters = MODP_2048, scale: int = 1) -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print(f"SBRAC Performance Benchmarks (group={params.name})")
    print("=" * 60)

    sections = [
        ("Engine", benchmark_engine),
        ("Bit Proofs", benchmark_proofs),
    ]

    for section_name, bench_func in sections:
        print(f"\n{section_name}")
        print("-" * 40)
        results = bench_func(params, scale)
        for r in results:
            print(f"  {r}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    run_all_benchmarks()
