"""Constants used throughout the latencystats package."""

# Sample domain
DEFAULT_TIMEOUT_MS = 19_000  # Response timeout; valid samples are in [1, timeout)
MIN_SAMPLE_MS = 1

# Window
WINDOW_DAYS = 7  # Trailing days retained by the aggregator

# Log rotation defaults
DEFAULT_LOG_MAX_BYTES = 10_485_760  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 30
DEFAULT_LOG_DIR = "logs"
