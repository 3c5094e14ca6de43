"""Command-line replay tool for latencystats."""

import sys
import json
import argparse
from typing import Any, Iterable, TextIO

from .aggregator import LatencyAggregator
from .config import Config
from .logging import setup_logging, get_logger

logger = get_logger(__name__)


def parse_sample(line: str) -> Any:
    """
    Turn one input line into a sample.

    Lines that are neither int nor float are returned unchanged so the
    aggregator counts them as rejected.
    """
    text = line.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def replay(aggregator: LatencyAggregator, lines: Iterable[str]) -> int:
    """
    Feed every non-blank line into the aggregator.

    Returns:
        Number of rejected samples
    """
    rejected = 0
    for line in lines:
        if not line.strip():
            continue
        if aggregator.record(parse_sample(line)) is not None:
            rejected += 1
    return rejected


def _open_inputs(paths) -> Iterable[TextIO]:
    if not paths:
        yield sys.stdin
        return
    for path in paths:
        with open(path, "r", encoding="utf-8") as f:
            yield f


def main(argv=None):
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Replay recorded response times and print the rolling "
                    "average and median."
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Files with one sample per line (default: stdin)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config.yaml (default: search for config.yaml)"
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Override stats.timeout_ms"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Indented JSON output"
    )

    args = parser.parse_args(argv)

    try:
        config = Config(args.config, create_if_missing=False)
    except Exception as e:
        import logging
        logging.basicConfig(level=logging.ERROR, format='[%(levelname)s] %(message)s')
        logger.error(f"Error loading config: {e}")
        sys.exit(1)

    setup_logging(config)

    timeout = args.timeout if args.timeout is not None else config.timeout_ms
    try:
        aggregator = LatencyAggregator(timeout=timeout)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    rejected = 0
    try:
        for stream in _open_inputs(args.inputs):
            rejected += replay(aggregator, stream)
    except OSError as e:
        logger.error(f"Error reading input: {e}")
        sys.exit(1)

    output = aggregator.snapshot()
    logger.info(f"Replayed {output['total_count']} samples, rejected {rejected}")

    if args.verbose:
        print(json.dumps(output, indent=2))
    else:
        print(json.dumps(output))


if __name__ == "__main__":
    main()
