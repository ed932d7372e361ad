#!/usr/bin/env python3
"""
Benchmark Script: Diagram Generation and Region Lookup

This script measures how diagram construction and region lookup scale
with the number of seeds:

1. Half-plane backend: bounding box cut by bisectors, nearest seeds first
2. scipy backend: scipy.spatial.Voronoi with mirrored guard seeds
3. Region lookup: KD-tree find_region vs brute-force nearest seed

Usage:
    python benchmarks/benchmark_generators.py
    python benchmarks/benchmark_generators.py --sizes 100,1000,5000 --trials 5

Output:
    - Console table with timing results
    - CSV file with detailed results
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Dict, Any

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voronoi_mesh.data_models import BoundingWindow
from voronoi_mesh.geometry.generator import GeneratorConfig, VoronoiDiagram2DGenerator
from voronoi_mesh.geometry.kd_tree import brute_force_nearest_neighbor
from voronoi_mesh.synthetic_data import SeedPattern, generate_seeds
from voronoi_mesh.timing import BenchmarkResult, Timer, benchmark_function, compute_speedup

WINDOW = BoundingWindow((0.0, 0.0), (1000.0, 1000.0))
NUM_QUERIES = 1000


def benchmark_generation(method: str, seeds: np.ndarray, n_trials: int) -> BenchmarkResult:
    """Time a full update() with one backend."""
    generator = VoronoiDiagram2DGenerator(GeneratorConfig(method=method))
    generator.set_boundary(WINDOW.size)
    generator.set_origin(WINDOW.origin)
    generator.set_seeds(seeds)
    return benchmark_function(method, generator.update, n_trials=n_trials)


def benchmark_lookup(seeds: np.ndarray, queries: np.ndarray, n_trials: int):
    """
    Time region lookup for a batch of query points.

    Returns:
        Tuple of (KD-tree result, brute-force result)
    """
    generator = VoronoiDiagram2DGenerator()
    generator.set_boundary(WINDOW.size)
    generator.set_origin(WINDOW.origin)
    generator.set_seeds(seeds)
    diagram = generator.update()
    diagram.find_region(queries[0])  # build the tree outside the timing

    kdtree = BenchmarkResult("KD-tree lookup")
    brute = BenchmarkResult("Brute-force lookup")
    for _ in range(n_trials):
        with Timer(verbose=False) as t:
            diagram.find_regions(queries)
        kdtree.add_trial(t.elapsed_ms)

        with Timer(verbose=False) as t:
            for q in queries:
                brute_force_nearest_neighbor(seeds, q)
        brute.add_trial(t.elapsed_ms)

    return kdtree, brute


def run_benchmark_suite(
    sizes: List[int],
    n_trials: int = 3,
    verbose: bool = True
) -> List[Dict[str, Any]]:
    """
    Run the benchmark suite for multiple seed counts.

    Args:
        sizes: List of seed counts
        n_trials: Number of timing trials per benchmark
        verbose: Print progress information

    Returns:
        List of result dictionaries
    """
    results = []
    rng = np.random.RandomState(0)

    for size in sizes:
        if verbose:
            print(f"\n{'='*60}")
            print(f"Benchmarking size: {size}")
            print('='*60)

        seeds = generate_seeds(SeedPattern.JITTERED_GRID, size, WINDOW, seed=42 + size)
        queries = rng.uniform(0.0, 1000.0, size=(NUM_QUERIES, 2))
        entry: Dict[str, Any] = {'num_seeds': size}

        for method in ("halfplane", "scipy"):
            if verbose:
                print(f"  Running {method} generation...")
            result = benchmark_generation(method, seeds, n_trials)
            entry[f'{method}_ms'] = result.mean_ms
            entry[f'{method}_std'] = result.std_ms
            if verbose:
                print(f"    {result.mean_ms:.2f} ± {result.std_ms:.2f} ms")

        if verbose:
            print(f"  Running region lookup ({NUM_QUERIES} queries)...")
        kdtree, brute = benchmark_lookup(seeds, queries, n_trials)
        entry['kdtree_lookup_ms'] = kdtree.mean_ms
        entry['brute_lookup_ms'] = brute.mean_ms

        entry['speedup_scipy_vs_halfplane'] = compute_speedup(entry['halfplane_ms'], entry['scipy_ms'])
        entry['speedup_kdtree_vs_brute'] = compute_speedup(brute.mean_ms, kdtree.mean_ms)
        results.append(entry)

    return results


def save_results_csv(results: List[Dict[str, Any]], filepath: str):
    """Save benchmark results to CSV file."""
    if not results:
        return

    with open(filepath, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)

    print(f"\nResults saved to: {filepath}")


def print_results_table(results: List[Dict[str, Any]]):
    print("\n" + "=" * 80)
    print("BENCHMARK RESULTS SUMMARY")
    print("=" * 80)
    print(f"{'Seeds':>8} {'Halfplane':>12} {'scipy':>10} {'Speedup':>9} "
          f"{'KD lookup':>11} {'BF lookup':>11}")
    print("-" * 80)

    for r in results:
        print(f"{r['num_seeds']:>8} {r['halfplane_ms']:>12.2f} {r['scipy_ms']:>10.2f} "
              f"{r['speedup_scipy_vs_halfplane']:>8.2f}× "
              f"{r['kdtree_lookup_ms']:>11.2f} {r['brute_lookup_ms']:>11.2f}")

    print("=" * 80)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Benchmark Voronoi diagram generation backends'
    )
    parser.add_argument(
        '--sizes', type=str, default='100,500,1000,2500',
        help='Comma-separated seed counts (default: 100,500,1000,2500)'
    )
    parser.add_argument(
        '--trials', type=int, default=3,
        help='Number of timing trials per benchmark (default: 3)'
    )
    parser.add_argument(
        '--output', type=str, default='benchmarks/benchmark_results.csv',
        help='Output CSV file path'
    )
    parser.add_argument(
        '--quiet', '-q', action='store_true',
        help='Minimal output'
    )

    args = parser.parse_args()
    sizes = [int(s.strip()) for s in args.sizes.split(',')]

    if not args.quiet:
        print("=" * 60)
        print("  VORONOI DIAGRAM GENERATION BENCHMARK")
        print("  Half-plane vs scipy, KD-tree vs brute-force lookup")
        print("=" * 60)
        print(f"\nSeed counts: {sizes}")
        print(f"Trials per size: {args.trials}")

    results = run_benchmark_suite(sizes, args.trials, verbose=not args.quiet)
    print_results_table(results)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    save_results_csv(results, str(output_path))

    return 0


if __name__ == "__main__":
    sys.exit(main())
