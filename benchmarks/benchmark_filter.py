"""
Benchmark filtering performance.

Tests separable, rank and recursive filters at various image sizes.
"""

import logging
import time

import numpy as np

from ndfilter import (
    SeparableFilter,
    correlate,
    gaussian_filter,
    maximum_filter,
    spline_filter,
    uniform_filter,
)

# Suppress logging for cleaner output
logging.getLogger("ndfilter").setLevel(logging.WARNING)


def generate_image(shape: tuple[int, ...]) -> np.ndarray:
    """Generate a random float32 image."""
    rng = np.random.default_rng(42)
    return rng.random(shape, dtype=np.float32)


def _time(func, data, iterations: int) -> tuple[float, float]:
    # Warmup (includes Numba compilation on first call)
    for _ in range(3):
        func(data)

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func(data)
        end = time.perf_counter()
        times.append((end - start) * 1000)  # Convert to ms
    return float(np.mean(times)), float(np.std(times))


def _report(title: str, data: np.ndarray, func, iterations: int) -> float:
    print("\n" + "=" * 80)
    print(f"{title} ({data.shape}, {iterations} iterations)")
    print("=" * 80)

    avg_time, std_time = _time(func, data, iterations)
    print(f"Time:       {avg_time:.3f} ms +/- {std_time:.3f} ms")
    print(f"Throughput: {data.size / (avg_time / 1000) / 1e6:.1f}M samples/sec")
    return avg_time


def benchmark_gaussian(shape=(2048, 2048), iterations: int = 20):
    """Benchmark Gaussian smoothing."""
    data = generate_image(shape)
    _report("GAUSSIAN FILTER sigma=3", data, lambda x: gaussian_filter(x, 3.0), iterations)


def benchmark_uniform(shape=(2048, 2048), iterations: int = 20):
    """Benchmark box smoothing."""
    data = generate_image(shape)
    _report("UNIFORM FILTER size=9", data, lambda x: uniform_filter(x, 9), iterations)


def benchmark_maximum(shape=(2048, 2048), iterations: int = 20):
    """Benchmark the running maximum (cost independent of window size)."""
    data = generate_image(shape)
    for size in (3, 15, 63):
        title = f"MAXIMUM FILTER size={size}"
        _report(title, data, lambda x, s=size: maximum_filter(x, s), iterations)


def benchmark_spline(shape=(2048, 2048), iterations: int = 20):
    """Benchmark the cubic and quintic spline pre-filters."""
    data = generate_image(shape)
    _report("SPLINE FILTER order=3", data, lambda x: spline_filter(x, 3), iterations)
    _report("SPLINE FILTER order=5", data, lambda x: spline_filter(x, 5), iterations)


def benchmark_separable_vs_full(shape=(512, 512), iterations: int = 5):
    """Compare the separable composer with the full N-D kernel."""
    data = generate_image(shape)
    w = np.ones(9) / 9.0
    pipeline = SeparableFilter().correlate(0, w).correlate(1, w)

    separable = _report("SEPARABLE 9x9", data, pipeline, iterations)
    full = _report("FULL 9x9", data, lambda x: correlate(x, np.outer(w, w)), iterations)
    print(f"\nSpeedup: {full / separable:.1f}x")


def benchmark_scaling():
    """Benchmark Gaussian smoothing across image sizes."""
    print("\n" + "=" * 80)
    print("GAUSSIAN FILTER SCALING")
    print("=" * 80)

    for n in (256, 512, 1024, 2048, 4096):
        data = generate_image((n, n))
        avg_time, _ = _time(lambda x: gaussian_filter(x, 2.0), data, 10)
        throughput = data.size / (avg_time / 1000) / 1e6
        print(f"N={n:>5}x{n:<5}: {avg_time:8.2f} ms ({throughput:6.1f}M samples/s)")


def main():
    """Run all benchmarks."""
    print("=" * 80)
    print("NDFILTER PERFORMANCE BENCHMARKS")
    print("=" * 80)

    benchmark_gaussian()
    benchmark_uniform()
    benchmark_maximum()
    benchmark_spline()
    benchmark_separable_vs_full()
    benchmark_scaling()

    print("\n" + "=" * 80)
    print("ALL BENCHMARKS COMPLETED")
    print("=" * 80)


if __name__ == "__main__":
    main()
