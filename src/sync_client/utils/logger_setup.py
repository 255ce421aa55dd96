import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from sync_client.config.settings import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s.%(funcName)s:%(lineno)d] - %(message)s"
LOG_FILE_MAX_BYTES_DEFAULT = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT_DEFAULT = 5


def setup_logging(
    logger_name: str = "sync_client",
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    log_file_max_bytes: int = LOG_FILE_MAX_BYTES_DEFAULT,
    log_file_backup_count: int = LOG_FILE_BACKUP_COUNT_DEFAULT,
    console_output: bool = True,
    file_output: bool = True,
) -> logging.Logger:
    """
    Configures and returns a logger instance.

    Console output goes to stderr so that CLI listings printed on stdout
    stay machine-readable.

    Args:
        logger_name: Name of the logger to configure (usually the package name,
            so every ``sync_client.*`` module logger inherits the handlers).
        log_level: The minimum log level to capture.
        log_dir: Directory for the rotating log file (defaults to ``Settings.LOGS_DIR``).
        log_file_max_bytes: Maximum size of a log file before rotation.
        log_file_backup_count: Number of rotated files to keep.
        console_output: Whether to log to the console.
        file_output: Whether to log to a rotating file.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(logger_name)

    # Configure once; repeated calls only adjust the level
    if logger.handlers:
        logger.setLevel(log_level)
        return logger

    logger.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if file_output:
        log_dir = log_dir or Settings.LOGS_DIR
        log_dir.mkdir(parents=True, exist_ok=True)

        sanitized_logger_name = "".join(c if c.isalnum() or c in ["_", "-"] else "_" for c in logger_name)
        file_handler = RotatingFileHandler(
            log_dir / f"{sanitized_logger_name}.log",
            maxBytes=log_file_max_bytes,
            backupCount=log_file_backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
