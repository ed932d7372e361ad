"""
Command Line Entry Point for voronoi_mesh

Generates a seed set, builds its bounded Voronoi diagram and prints a
summary of the resulting mesh.

Usage:
    # Build a diagram for 50 jittered-grid seeds in a 100 x 100 window
    python -m voronoi_mesh.main --num-seeds 50 --pattern jittered_grid

    # Three rounds of Lloyd relaxation, plotted to a file
    python -m voronoi_mesh.main --num-seeds 200 --relax 3 --plot diagram.png

    # Compare the two cell backends
    python -m voronoi_mesh.main --benchmark --sizes 100,500,1000

All seed data is synthetically generated - there is NO external dataset.
"""

import argparse
import sys

from .data_models import BoundingWindow
from .errors import VoronoiDiagramError
from .geometry.diagram import VoronoiDiagram2D
from .geometry.generator import GeneratorConfig, VoronoiDiagram2DGenerator
from .logging_config import configure_logging
from .synthetic_data import SeedPattern, generate_seeds
from .timing import Timer, benchmark_function, compute_speedup


def print_header():
    print("=" * 70)
    print("  BOUNDED VORONOI DIAGRAM MESH")
    print("=" * 70)
    print()


def build_window(args) -> BoundingWindow:
    return BoundingWindow((args.origin_x, args.origin_y), (args.width, args.height))


def build_diagram(args) -> VoronoiDiagram2D:
    """
    Generate seeds and build their diagram as the arguments describe.

    Args:
        args: Command line arguments

    Returns:
        Diagram in the QUERYABLE state
    """
    window = build_window(args)
    seeds = generate_seeds(SeedPattern(args.pattern), args.num_seeds, window, seed=args.seed)

    generator = VoronoiDiagram2DGenerator(GeneratorConfig(method=args.method))
    generator.set_boundary(window.size)
    generator.set_origin(window.origin)
    generator.set_seeds(seeds)

    with Timer("build") as t:
        if args.relax > 0:
            diagram = generator.relax(args.relax)
        else:
            diagram = generator.update()

    if not args.quiet:
        print(f"Seeds:  {args.num_seeds} ({args.pattern}, random seed {args.seed})")
        print(f"Method: {args.method}")
        print(f"Build time: {t.elapsed_ms:.2f} ms")
        print()

    return diagram


def print_report(diagram: VoronoiDiagram2D, verbose: bool = False) -> None:
    print(diagram.summary())

    areas = [diagram.region_area(i) for i in range(diagram.number_of_seeds)]
    degrees = [len(list(diagram.neighbor_ids(i))) for i in range(diagram.number_of_seeds)]
    print(f"  Total region area: {sum(areas):.4f} (window {diagram.window.area:.4f})")
    print(f"  Mean neighbors per region: {sum(degrees) / max(1, len(degrees)):.2f}")
    print()

    if verbose:
        print("Regions:")
        print("-" * 40)
        for i in range(diagram.number_of_seeds):
            seed = diagram.get_seed(i)
            neighbors = sorted(diagram.neighbor_ids(i))
            print(f"  {i:4d} seed=({seed[0]:.2f}, {seed[1]:.2f}) "
                  f"area={areas[i]:.2f} neighbors={neighbors}")
        print()


def run_benchmark(args) -> None:
    """Time both cell backends over several seed counts."""
    sizes = [int(s.strip()) for s in args.sizes.split(',')]
    window = build_window(args)

    print(f"{'Seeds':>8} {'halfplane(ms)':>15} {'scipy(ms)':>12} {'Speedup':>10}")
    print("-" * 50)

    for size in sizes:
        seeds = generate_seeds(SeedPattern.RANDOM, size, window, seed=args.seed + size)
        results = {}
        for method in ("halfplane", "scipy"):
            generator = VoronoiDiagram2DGenerator(GeneratorConfig(method=method))
            generator.set_boundary(window.size)
            generator.set_origin(window.origin)
            generator.set_seeds(seeds)
            results[method] = benchmark_function(
                method, generator.update, n_trials=args.trials
            )

        speedup = compute_speedup(results["halfplane"].mean_ms, results["scipy"].mean_ms)
        print(f"{size:>8} {results['halfplane'].mean_ms:>15.2f} "
              f"{results['scipy'].mean_ms:>12.2f} {speedup:>9.2f}×")
    print()


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Bounded Voronoi diagram mesh builder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m voronoi_mesh.main --num-seeds 50
  python -m voronoi_mesh.main --num-seeds 200 --relax 3 --plot diagram.png
  python -m voronoi_mesh.main --benchmark --sizes 100,500,1000
        """
    )

    gen_group = parser.add_argument_group('Seeds')
    gen_group.add_argument('--num-seeds', '-n', type=int, default=30,
                           help='Number of seeds (default: 30)')
    gen_group.add_argument('--pattern', type=str, default='jittered_grid',
                           choices=[p.value for p in SeedPattern],
                           help='Seed layout (default: jittered_grid)')
    gen_group.add_argument('--seed', type=int, default=42,
                           help='Random seed (default: 42)')

    win_group = parser.add_argument_group('Boundary')
    win_group.add_argument('--width', type=float, default=100.0,
                           help='Window width (default: 100.0)')
    win_group.add_argument('--height', type=float, default=100.0,
                           help='Window height (default: 100.0)')
    win_group.add_argument('--origin-x', type=float, default=0.0,
                           help='Window origin x (default: 0.0)')
    win_group.add_argument('--origin-y', type=float, default=0.0,
                           help='Window origin y (default: 0.0)')

    proc_group = parser.add_argument_group('Processing')
    proc_group.add_argument('--method', type=str, default='halfplane',
                            choices=['halfplane', 'scipy'],
                            help='Cell backend (default: halfplane)')
    proc_group.add_argument('--relax', type=int, default=0,
                            help="Lloyd relaxation iterations (default: 0)")

    bench_group = parser.add_argument_group('Benchmarking')
    bench_group.add_argument('--benchmark', '-b', action='store_true',
                             help='Compare cell backends')
    bench_group.add_argument('--sizes', type=str, default='100,500,1000',
                             help='Comma-separated seed counts (default: 100,500,1000)')
    bench_group.add_argument('--trials', type=int, default=3,
                             help='Number of timing trials (default: 3)')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--plot', type=str, default=None,
                           help='Save a plot of the diagram to this path')
    out_group.add_argument('--verbose', '-v', action='store_true',
                           help='List every region with its neighbors')
    out_group.add_argument('--quiet', '-q', action='store_true',
                           help='Minimal output')
    out_group.add_argument('--log-level', type=str, default='WARNING',
                           help='Logging level (default: WARNING)')
    out_group.add_argument('--log-json', action='store_true',
                           help='Emit logs as JSON lines')

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_output=args.log_json)

    if not args.quiet:
        print_header()

    try:
        if args.benchmark:
            run_benchmark(args)
            return 0

        diagram = build_diagram(args)
    except (VoronoiDiagramError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_report(diagram, verbose=args.verbose)

    if args.plot:
        from .visualize import plot_diagram
        plot_diagram(diagram, save_path=args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
