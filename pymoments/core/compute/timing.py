"""
Wall-clock timing for solver pipelines.

describe() reports how long it spent building partition accumulators,
folding them with combine() and reading the results. A section that is
entered once per column accumulates over all columns.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Overall timer with named, accumulating sections.

    Usage:
        timer = Timer()
        timer.start()
        for column in columns:
            with timer.section('partition'):
                partials = [DoubleStatistics.of_range(stats, column, a, b)
                            for a, b in blocks]
            with timer.section('combine'):
                total = reduce(lambda x, y: x.combine(y), partials)
        timer.stop()
        timer.result()     # {'total_seconds': ..., 'partition': ..., 'combine': ...}
        timer.calls('combine')   # number of columns
    """

    def __init__(self):
        self._elapsed: dict[str, float] = {}
        self._calls: dict[str, int] = {}
        self._t0: float | None = None
        self._total: float | None = None

    def start(self) -> None:
        self._t0 = time.perf_counter()

    def stop(self) -> None:
        """
        Record the total time since start().

        Raises:
            RuntimeError: If start() was not called
        """
        if self._t0 is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the ``with`` block to section ``name``."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._elapsed[name] = self._elapsed.get(name, 0.0) + (time.perf_counter() - t0)
            self._calls[name] = self._calls.get(name, 0) + 1

    def calls(self, name: str) -> int:
        """Number of times section ``name`` was entered (0 if never)."""
        return self._calls.get(name, 0)

    def result(self) -> dict[str, float]:
        """
        Seconds per section, with the overall time under 'total_seconds'.

        Raises:
            RuntimeError: If stop() was not called
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._elapsed}


@contextmanager
def timed() -> Iterator[Timer]:
    """
    Time a block as a whole.

        with timed() as timer:
            v = Variance.of(values)
        timer.result()['total_seconds']
    """
    timer = Timer()
    timer.start()
    try:
        yield timer
    finally:
        timer.stop()
