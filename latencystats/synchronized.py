"""Lock-guarded access to a LatencyAggregator shared by many producers."""

import threading
from typing import Any, Dict, Iterable, List, Optional

from .aggregator import LatencyAggregator, Median
from .buckets import DayBucket
from .errors import ValidationError


class SynchronizedAggregator:
    """Serializes every call to the wrapped aggregator through one lock."""

    def __init__(self, aggregator: Optional[LatencyAggregator] = None, **kwargs):
        """
        Args:
            aggregator: Aggregator to wrap; a new one is built from kwargs when None
            **kwargs: Passed to LatencyAggregator when no aggregator is given
        """
        self._aggregator = aggregator if aggregator is not None else LatencyAggregator(**kwargs)
        self._lock = threading.Lock()

    def record(self, value: Any) -> Optional[ValidationError]:
        with self._lock:
            return self._aggregator.record(value)

    def average(self) -> int:
        with self._lock:
            return self._aggregator.average()

    def median(self) -> Median:
        with self._lock:
            return self._aggregator.median()

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self._aggregator.snapshot()

    def fill_window(self, buckets: Iterable, total_count: Optional[int] = None) -> None:
        with self._lock:
            self._aggregator.fill_window(buckets, total_count)

    def reset(self) -> None:
        with self._lock:
            self._aggregator.reset()

    @property
    def window(self) -> List[DayBucket]:
        # Copy of the list; the buckets themselves are live
        with self._lock:
            return list(self._aggregator.window)

    @property
    def error_count(self) -> int:
        with self._lock:
            return self._aggregator.error_count

    @property
    def total_count(self) -> int:
        with self._lock:
            return self._aggregator.total_count
