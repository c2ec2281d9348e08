"""Logging configuration for the routing daemon config loader.

Provides configurable logging with:
- Console output
- File-based logging with rotation
- Timing decorator for the startup validation pass

Environment Variables:
    LINKSTATE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    LINKSTATE_LOG_FILE: Path to log file (default: ~/.linkstate/linkstate-config.log)
    LINKSTATE_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    LINKSTATE_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from linkstate_config.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("validate")
    def validate(self, document):
        ...
"""
import functools
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("linkstate.perf")
main_logger = logging.getLogger("linkstate_config")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("LINKSTATE_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".linkstate" / "linkstate-config.log"
    path_str = os.environ.get("LINKSTATE_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(log_to_file: bool = True, level: Optional[int] = None) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (INFO+ by default, respects LINKSTATE_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics

    Calling it again replaces the handlers installed by a previous call.
    """
    log_level = level if level is not None else get_log_level()

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)
    handlers: list[logging.Handler] = [console_handler]

    log_file = None
    if log_to_file:
        log_file = get_log_file()
        max_size_mb = int(os.environ.get("LINKSTATE_LOG_MAX_SIZE", "10"))
        backup_count = int(os.environ.get("LINKSTATE_LOG_BACKUPS", "5"))

        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(main_format)
        handlers.append(file_handler)

    for logger in (main_logger, perf_logger):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
        logger.propagate = False
        for handler in handlers:
            logger.addHandler(handler)

    main_logger.info(
        f"Logging initialized: level={logging.getLevelName(log_level)}, "
        f"file={log_file or 'disabled'}"
    )


def timed(operation: str) -> Callable:
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "load", "validate")

    Usage:
        @timed("validate")
        def validate(self, document):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000  # ms
                perf_logger.info(f"{operation:20s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(
                    f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}"
                )
                raise

        return wrapper

    return decorator
