"""
Wall-clock timing for fits and data loads.

Backends time their named stages (solve, residuals, statistics) into
Result.timing; the engine times whole reloads with timed().
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class Timer:
    """
    Wall-clock timer with accumulating named sections.

    Usage:
        timer = Timer().start()
        with timer.section('solve'):
            beta, _ = qr_solve(X, y, check_rank=True)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'solve': ...}
    """

    def __init__(self):
        self._sections: dict[str, float] = {}
        self._started_at: float | None = None
        self._total: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._total is None

    def start(self) -> 'Timer':
        self._started_at = time.perf_counter()
        self._total = None
        return self

    def stop(self) -> float:
        """Stop the clock and return total seconds."""
        if self._started_at is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._started_at
        return self._total

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time a block; repeated names accumulate."""
        began = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] = (
                self._sections.get(name, 0.0) + time.perf_counter() - began
            )

    def result(self) -> dict[str, float]:
        """
        'total_seconds' plus every section.

        Raises:
            RuntimeError: If the timer was never stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}


@contextmanager
def timed(label: str | None = None) -> Iterator[Timer]:
    """
    Time a block, logging the duration at DEBUG when `label` is given.

    Usage:
        with timed('load') as timer:
            dataset = load_dataset(path, predictors, 'Flux')
        timer.result()['total_seconds']
    """
    timer = Timer().start()
    try:
        yield timer
    finally:
        elapsed = timer.stop()
        if label is not None:
            logger.debug(f"{label} took {elapsed:.3f}s")
