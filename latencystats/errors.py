"""Error types for the latency aggregator."""


class ValidationError(ValueError):
    """A sample that is not a positive whole number below the timeout bound.

    Instances are returned by ``LatencyAggregator.record`` rather than raised,
    so the ingestion path never interrupts the producer.
    """

    def __init__(self, value, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Rejected sample {value!r}: {reason}")


class InvariantViolation(RuntimeError):
    """Internal accounting drifted (total count vs. histogram occurrences)."""
