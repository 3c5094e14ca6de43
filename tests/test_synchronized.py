"""Tests for the lock-guarded aggregator wrapper."""

import threading
from datetime import date

from latencystats.aggregator import LatencyAggregator
from latencystats.errors import ValidationError
from latencystats.synchronized import SynchronizedAggregator

TODAY = date(2024, 3, 8)


def test_concurrent_producers():
    """Test that samples from many threads are all counted."""
    stats = SynchronizedAggregator(clock=lambda: TODAY)

    def produce(offset):
        for i in range(1000):
            stats.record(1 + (offset + i) % 100)
            if i % 100 == 0:
                stats.record(-1)

    threads = [threading.Thread(target=produce, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert stats.total_count == 8000
    assert stats.error_count == 80
    assert sum(stats.window[0].histogram) == 8000
    assert 1 <= stats.median() <= 100


def test_wraps_existing_aggregator():
    """Test that the wrapper delegates to a given aggregator."""
    inner = LatencyAggregator(timeout=100, clock=lambda: TODAY)
    stats = SynchronizedAggregator(inner)

    assert stats.record(10) is None
    assert isinstance(stats.record(100), ValidationError)
    assert stats.average() == 10
    assert stats.median() == 10
    assert inner.total_count == 1
    assert stats.snapshot()["error_count"] == 1


def test_fill_window_and_reset():
    """Test seeding and resetting through the wrapper."""
    stats = SynchronizedAggregator(clock=lambda: TODAY)
    stats.fill_window([{"date": TODAY, "count": 1, "running_mean": 4, "histogram": {4: 1}}], 1)
    assert stats.median() == 4
    assert len(stats.window) == 1

    stats.reset()
    assert stats.total_count == 0
    assert stats.median() == 0
