"""
Tests for the Command Line Tool and Timing Helpers

Test Categories:
1. End-to-end runs of main()
2. Timer and benchmark results

Run with: pytest tests/test_main.py -v
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from voronoi_mesh.main import main
from voronoi_mesh.timing import BenchmarkResult, Timer, benchmark_function, compute_speedup


class TestMain:
    """End-to-end runs."""

    def test_default_run(self, capsys):
        assert main(["--num-seeds", "20"]) == 0

        out = capsys.readouterr().out
        assert "VoronoiDiagram2D (queryable)" in out
        assert "Seeds:    20" in out

    def test_verbose_lists_regions(self, capsys):
        assert main(["-n", "5", "--pattern", "grid", "--verbose"]) == 0
        out = capsys.readouterr().out
        assert "neighbors=" in out

    def test_relax_with_scipy(self, capsys):
        assert main(["-n", "15", "--method", "scipy", "--relax", "2", "-q"]) == 0
        assert capsys.readouterr().out == ""

    def test_invalid_window_fails(self, capsys):
        assert main(["-n", "5", "--width", "0"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_benchmark(self, capsys):
        assert main(["--benchmark", "--sizes", "10,20", "--trials", "1"]) == 0
        out = capsys.readouterr().out
        assert "halfplane(ms)" in out


class TestTiming:
    """Timer and benchmark bookkeeping."""

    def test_timer_measures(self):
        with Timer() as t:
            sum(range(1000))
        assert t.elapsed >= 0
        assert t.elapsed_ms == t.elapsed * 1000

    def test_speedup(self):
        assert compute_speedup(10.0, 5.0) == 2.0
        assert compute_speedup(10.0, 0.0) == float('inf')

    def test_benchmark_result_stats(self):
        result = BenchmarkResult("build", metadata={"size": 10})
        for ms in [1.0, 2.0, 3.0]:
            result.add_trial(ms)

        assert result.mean_ms == 2.0
        assert result.min_ms == 1.0
        assert result.std_ms == 1.0
        assert result.to_dict()["size"] == 10
        assert "n=3" in result.summary()

    def test_benchmark_function_counts_calls(self):
        calls = []
        result = benchmark_function("append", calls.append, 1, n_trials=4, warmup=2)

        assert len(calls) == 6
        assert result.num_trials == 4
