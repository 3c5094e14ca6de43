"""Centralized logging configuration for latencystats."""

import logging
import logging.handlers
from pathlib import Path


def setup_logging(config) -> None:
    """
    Initialize logging system based on configuration.

    Console output is always on; rotating log files only when
    ``config.log_to_file`` is set.

    Args:
        config: Configuration instance with logging settings
    """
    file_level = getattr(logging, config.log_level.upper(), logging.INFO)
    console_level = getattr(logging, config.console_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('[%(levelname)-8s] [%(name)s] %(message)s'))
    root_logger.addHandler(console_handler)

    if not config.log_to_file:
        root_logger.setLevel(console_level)
        return

    root_logger.setLevel(min(file_level, console_level))

    log_dir_path = Path(config.log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)
    archive_dir = log_dir_path / "archive"
    archive_dir.mkdir(exist_ok=True)

    rotation_config = config.log_rotation
    main_log_path = log_dir_path / "latencystats.log"
    error_log_path = log_dir_path / "latencystats-error.log"

    if rotation_config.get("when") == "midnight":
        file_handler = logging.handlers.TimedRotatingFileHandler(
            main_log_path,
            when="midnight",
            interval=1,
            backupCount=rotation_config.get("backup_count", 30),
            encoding="utf-8"
        )
        # Rotated files go to the archive directory
        def namer(name):
            return str(archive_dir / Path(name).name)
        file_handler.namer = namer
    else:
        file_handler = logging.handlers.RotatingFileHandler(
            main_log_path,
            maxBytes=rotation_config.get("max_bytes", 10485760),
            backupCount=rotation_config.get("backup_count", 30),
            encoding="utf-8"
        )

    file_handler.setLevel(file_level)
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)-8s] [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    error_handler = logging.handlers.RotatingFileHandler(
        error_log_path,
        maxBytes=rotation_config.get("max_bytes", 10485760),
        backupCount=rotation_config.get("backup_count", 30),
        encoding="utf-8"
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_formatter)
    root_logger.addHandler(error_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific component.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
