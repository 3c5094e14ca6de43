"""Per-day latency buckets for the rolling window."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .constants import DEFAULT_TIMEOUT_MS, MIN_SAMPLE_MS


@dataclass
class DayBucket:
    """Aggregate of one calendar day's samples."""
    date: Optional[date]          # calendar day, compared against "today"
    timeout: int = DEFAULT_TIMEOUT_MS
    count: int = 0                # accepted samples
    error_count: int = 0          # rejected samples
    running_mean: float = 0.0     # incremental mean of accepted samples
    histogram: List[int] = field(default_factory=list)  # indexed by value

    def __post_init__(self):
        if not self.histogram:
            self.histogram = [0] * self.timeout
        elif len(self.histogram) != self.timeout:
            raise ValueError(
                f"Histogram has {len(self.histogram)} slots, expected {self.timeout}"
            )

    def observe(self, value: int) -> None:
        """
        Fold an accepted sample into this bucket.

        The mean is updated as ((n - 1) * mean + value) / n so raw samples are
        never retained.

        Args:
            value: Validated sample, MIN_SAMPLE_MS <= value < timeout
        """
        self.count += 1
        self.running_mean = ((self.count - 1) * self.running_mean + value) / self.count
        self.histogram[value] += 1

    def occurrences(self) -> Iterator[Tuple[int, int]]:
        """Yield (value, occurrences) pairs in ascending value order, skipping zeros."""
        for value in range(MIN_SAMPLE_MS, self.timeout):
            hits = self.histogram[value]
            if hits:
                yield value, hits

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form with a sparse histogram."""
        return {
            "date": self.date.isoformat() if self.date else None,
            "count": self.count,
            "error_count": self.error_count,
            "running_mean": self.running_mean,
            "histogram": dict(self.occurrences()),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], timeout: int = DEFAULT_TIMEOUT_MS) -> "DayBucket":
        """
        Build a bucket from a plain dict, filling in missing fields.

        Fixtures may carry only a day's mean or only its histogram; anything
        absent starts at zero.

        Args:
            data: Mapping with any of date, count, error_count, running_mean, histogram
            timeout: Exclusive upper bound of the histogram domain

        Returns:
            DayBucket instance

        Raises:
            ValueError: If a histogram key falls outside [1, timeout) or a count is negative
        """
        raw_date = data.get("date")
        if isinstance(raw_date, str):
            raw_date = date.fromisoformat(raw_date)

        histogram = [0] * timeout
        for key, hits in (data.get("histogram") or {}).items():
            value = int(key)
            if not MIN_SAMPLE_MS <= value < timeout:
                raise ValueError(f"Histogram key {key!r} outside [{MIN_SAMPLE_MS}, {timeout})")
            hits = int(hits)
            if hits < 0:
                raise ValueError(f"Histogram count for {key!r} is negative: {hits}")
            histogram[value] = hits

        return cls(
            date=raw_date,
            timeout=timeout,
            count=int(data.get("count", 0)),
            error_count=int(data.get("error_count", 0)),
            running_mean=float(data.get("running_mean", 0.0)),
            histogram=histogram,
        )
