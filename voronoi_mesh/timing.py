"""
Build Timing

Wall-clock measurement for diagram construction, used by the command line
summary, the backend comparison and the benchmark script.

Example:
    >>> with Timer("build") as t:
    ...     diagram = generator.update()
    >>> t.elapsed_ms
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import numpy as np
import structlog

logger = structlog.get_logger()


class Timer:
    """
    Measures the wall-clock duration of a ``with`` block.

    A named timer logs its duration at debug level when the block exits.

    Attributes:
        name: Label for the logged event, or None to stay silent
        elapsed: Duration of the last block in seconds
    """

    def __init__(self, name: Optional[str] = None, verbose: bool = True):
        self.name = name
        self.verbose = verbose
        self.elapsed = 0.0
        self._started_at: Optional[float] = None

    def __enter__(self) -> 'Timer':
        self._started_at = time.perf_counter()
        return self

    def __exit__(self, *exc_info) -> None:
        self.elapsed = time.perf_counter() - self._started_at
        self._started_at = None
        if self.name and self.verbose:
            logger.debug("Timed block", block=self.name,
                         elapsed_ms=round(self.elapsed_ms, 3))

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1e3


def compute_speedup(baseline_time: float, optimized_time: float) -> float:
    """Ratio of two timings; above 1 when the second one is faster."""
    if optimized_time <= 0:
        return float('inf')
    return baseline_time / optimized_time


@dataclass
class BenchmarkResult:
    """
    Repeated timings of one operation.

    Attributes:
        name: Operation label, e.g. the generator backend
        times_ms: One duration per trial, in milliseconds
        metadata: Extra columns for reports (seed count, method, ...)
    """
    name: str
    times_ms: List[float] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_trial(self, time_ms: float) -> None:
        self.times_ms.append(float(time_ms))

    @property
    def num_trials(self) -> int:
        return len(self.times_ms)

    def _stat(self, reduce: Callable[[np.ndarray], float], min_trials: int = 1) -> float:
        if self.num_trials < min_trials:
            return 0.0
        return float(reduce(np.asarray(self.times_ms)))

    @property
    def mean_ms(self) -> float:
        return self._stat(np.mean)

    @property
    def std_ms(self) -> float:
        # Sample standard deviation; a single trial has none
        return self._stat(lambda t: np.std(t, ddof=1), min_trials=2)

    @property
    def min_ms(self) -> float:
        return self._stat(np.min)

    def summary(self) -> str:
        return (f"{self.name}: {self.mean_ms:.2f} ± {self.std_ms:.2f} ms "
                f"(n={self.num_trials}, min={self.min_ms:.2f})")

    def to_dict(self) -> Dict[str, Any]:
        row = dict(name=self.name, mean_ms=self.mean_ms, std_ms=self.std_ms,
                   min_ms=self.min_ms, num_trials=self.num_trials)
        row.update(self.metadata)
        return row


def benchmark_function(
    name: str,
    func: Callable,
    *args,
    n_trials: int = 3,
    warmup: int = 1,
    **kwargs
) -> BenchmarkResult:
    """
    Call ``func(*args, **kwargs)`` repeatedly and record each duration.

    The first ``warmup`` calls are not recorded.
    """
    for _ in range(warmup):
        func(*args, **kwargs)

    result = BenchmarkResult(name)
    for _ in range(n_trials):
        with Timer(verbose=False) as t:
            func(*args, **kwargs)
        result.add_trial(t.elapsed_ms)
    return result
