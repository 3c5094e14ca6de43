"""Rolling 7-day latency statistics built from per-day histograms."""

import math
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .buckets import DayBucket
from .constants import DEFAULT_TIMEOUT_MS, MIN_SAMPLE_MS, WINDOW_DAYS
from .errors import InvariantViolation, ValidationError
from .logging import get_logger

logger = get_logger(__name__)

Median = Union[int, float]


def rejection_reason(value: Any, timeout: int) -> Optional[str]:
    """
    Check a candidate sample against the accepted domain.

    Args:
        value: Candidate sample
        timeout: Exclusive upper bound

    Returns:
        None if the sample is acceptable, otherwise a short reason
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "not a number"
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return "not a whole number"
    if value < MIN_SAMPLE_MS:
        return "not positive"
    if value >= timeout:
        return f"not below timeout {timeout}"
    return None


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


class LatencyAggregator:
    """
    Average and median latency over a trailing window of day buckets.

    The window holds at most WINDOW_DAYS buckets, newest first. Only the
    bucket at index 0 is ever mutated. Not thread-safe; see
    SynchronizedAggregator for concurrent producers.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT_MS, clock: Callable[[], date] = date.today):
        """
        Initialize the aggregator with one empty bucket for today.

        Args:
            timeout: Exclusive upper bound for samples, also the histogram size
            clock: Returns the current calendar day; consulted on every accepted sample
        """
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= MIN_SAMPLE_MS:
            raise ValueError(f"timeout must be an integer greater than {MIN_SAMPLE_MS}, got {timeout!r}")
        self._timeout = timeout
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Drop all collected data and start over with an empty bucket for today."""
        self._window: List[DayBucket] = [self._new_bucket(self._clock())]
        self._total_count = 0

    def _new_bucket(self, day: Optional[date]) -> DayBucket:
        return DayBucket(date=day, timeout=self._timeout)

    def record(self, value: Any) -> Optional[ValidationError]:
        """
        Ingest one response-time sample.

        Rejected samples only bump the current day's error counter; they never
        trigger a day rotation.

        Args:
            value: Response time in the timeout's unit

        Returns:
            None if accepted, a ValidationError describing the rejection otherwise
        """
        reason = rejection_reason(value, self._timeout)
        if reason is not None:
            self._window[0].error_count += 1
            logger.debug(f"Rejected sample {value!r}: {reason}")
            return ValidationError(value, reason)

        today = self._clock()
        if self._window[0].date != today:
            self._rotate(today)

        self._total_count += 1
        self._window[0].observe(int(value))
        return None

    def _rotate(self, today: date) -> None:
        if len(self._window) >= WINDOW_DAYS:
            evicted = self._window.pop()
            self._total_count -= evicted.count
            logger.info(f"Evicted day {evicted.date} ({evicted.count} samples)")
        self._window.insert(0, self._new_bucket(today))
        logger.info(f"Started new day bucket {today} (window: {len(self._window)} days)")

    def average(self) -> int:
        """
        Mean of the per-day means, rounded half up.

        Every day in the window weighs the same regardless of how many samples
        it holds.
        """
        total = sum(bucket.running_mean for bucket in self._window)
        return round_half_up(total / len(self._window))

    def median(self) -> Median:
        """
        Exact median across every sample in the window.

        Per-day histograms are merged and scanned in ascending value order
        until the cumulative count reaches the rank target. For an even total
        the target is n/2 + 1; when rank n/2 falls on the previous distinct
        value the two values are averaged.

        Returns:
            0 for an empty window, an int when a single value is the median,
            otherwise the float midpoint of two neighbouring values

        Raises:
            InvariantViolation: If the histograms do not hold exactly total_count samples
        """
        n = self._total_count
        merged = [sum(column) for column in zip(*(bucket.histogram for bucket in self._window))]
        held = sum(merged)
        if held != n:
            logger.error(f"Histogram holds {held} samples but total_count is {n}")
            raise InvariantViolation(f"Histogram holds {held} samples but total_count is {n}")
        if n == 0:
            return 0

        odd = n % 2 == 1
        target = (n + 1) // 2 if odd else n // 2 + 1

        cumulative = 0
        previous = 0
        for value in range(MIN_SAMPLE_MS, self._timeout):
            hits = merged[value]
            if not hits:
                continue
            cumulative += hits
            jump = cumulative - target
            if cumulative >= target:
                # Rank n/2 is inside this value's run too
                if hits - jump > 1 or odd:
                    return value
                return (value + previous) / 2
            previous = value

        logger.error(f"Median scan exhausted the histogram (total_count={n}, target rank={target})")
        raise InvariantViolation(f"Median rank {target} not reached for total_count {n}")

    def fill_window(
        self,
        buckets: Iterable[Union[DayBucket, Dict[str, Any]]],
        total_count: Optional[int] = None,
    ) -> None:
        """
        Replace the window with pre-built buckets (newest first).

        Used to seed fixtures and to restore snapshots taken elsewhere.

        Args:
            buckets: DayBucket instances or dicts accepted by DayBucket.from_dict
            total_count: New total sample count; the current total is kept when None

        Raises:
            ValueError: If the window would be empty, too long, or a bucket has a
                different histogram domain
        """
        window = []
        for bucket in buckets:
            if not isinstance(bucket, DayBucket):
                bucket = DayBucket.from_dict(bucket, timeout=self._timeout)
            elif bucket.timeout != self._timeout:
                raise ValueError(f"Bucket timeout {bucket.timeout} does not match {self._timeout}")
            window.append(bucket)

        if not window:
            raise ValueError("Window needs at least one bucket")
        if len(window) > WINDOW_DAYS:
            raise ValueError(f"Window holds at most {WINDOW_DAYS} buckets, got {len(window)}")

        self._window = window
        if total_count is not None:
            self._total_count = total_count

    @property
    def window(self) -> List[DayBucket]:
        return self._window

    @property
    def error_count(self) -> int:
        return self._window[0].error_count

    @property
    def total_count(self) -> int:
        return self._total_count

    @property
    def timeout(self) -> int:
        return self._timeout

    def snapshot(self) -> Dict[str, Any]:
        """
        Current window statistics.

        Returns:
            Dictionary with average, median, total_count, error_count, days and date keys
        """
        current = self._window[0].date
        return {
            "average": self.average(),
            "median": self.median(),
            "total_count": self._total_count,
            "error_count": self.error_count,
            "days": len(self._window),
            "date": current.isoformat() if current else None,
        }
