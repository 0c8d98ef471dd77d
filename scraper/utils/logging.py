"""
Logging utility module for the scraper.

Everything logs through ``logging.getLogger(__name__)`` under the
``scraper`` package logger; ``setup_logging`` attaches the handlers.
"""

import logging
import os
import sys
import time
from datetime import datetime
from typing import Dict, Mapping, Optional, TextIO

ROOT_LOGGER_NAME = "scraper"
LOG_FILE_ENV = "SCRAPER_LOG_FILE"

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"


def parse_level(name: str, default: int) -> int:
    """
    Convert a level name such as "debug" or "WARNING" to a logging level.

    Args:
        name: Level name, case-insensitive
        default: Level used when the name is not recognised

    Returns:
        int: The logging level
    """
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


class LogFormatter(logging.Formatter):
    """Console formatter that colours the level name on terminals."""

    RESET = '\033[0m'

    # Level -> ANSI colour
    LEVEL_COLORS = {
        logging.DEBUG: '\033[34m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[31m\033[1m',
    }

    def __init__(self, stream: Optional[TextIO] = None, *args, **kwargs):
        """
        Initialize formatter.

        Args:
            stream: Stream the output goes to; colours are used only if it is a tty
            *args: Additional formatter args
            **kwargs: Additional formatter kwargs
        """
        super().__init__(*args, **kwargs)
        isatty = getattr(stream, 'isatty', None)
        self.colored = bool(isatty and isatty()) and sys.platform != 'win32'

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno)
        if not self.colored or color is None:
            return formatted
        return formatted.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


def setup_logging(log_file: Optional[str] = None,
                  console_level: str = "INFO",
                  file_level: str = "DEBUG",
                  component: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for the scraper.

    Args:
        log_file: Path to log file (None for no file logging)
        console_level: Console logging level
        file_level: File logging level
        component: Optional component name for the logger

    Returns:
        logging.Logger: Configured logger
    """
    name = f"{ROOT_LOGGER_NAME}.{component}" if component else ROOT_LOGGER_NAME
    logger = logging.getLogger(name)

    # Configured already, e.g. by an earlier import
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(parse_level(console_level, logging.INFO))
    console_handler.setFormatter(LogFormatter(sys.stderr, fmt=CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    handlers = [console_handler]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(parse_level(file_level, logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handlers.append(file_handler)

    logger.setLevel(min(handler.level for handler in handlers))
    for handler in handlers:
        logger.addHandler(handler)

    return logger


def get_default_log_file() -> str:
    """
    Get the default log file path, ~/.scraper/logs/scraper_YYYY-MM-DD.log.

    The directory is created when a handler first opens the file.
    """
    log_dir = os.path.join(os.path.expanduser("~"), ".scraper", "logs")
    date_str = datetime.now().strftime("%Y-%m-%d")
    return os.path.join(log_dir, f"scraper_{date_str}.log")


def log_file_from_env(environ: Mapping[str, str] = os.environ) -> Optional[str]:
    """
    Get the log file requested through SCRAPER_LOG_FILE.

    "default" selects get_default_log_file(); any other value is used as a
    path. Unset or empty means no file logging.
    """
    value = environ.get(LOG_FILE_ENV, "").strip()
    if not value:
        return None
    if value.lower() == "default":
        return get_default_log_file()
    return value


def log_exception(logger: logging.Logger, exception: Exception,
                  message: str = "An exception occurred") -> None:
    """
    Log an exception.

    Args:
        logger: Logger to use
        exception: Exception to log
        message: Message to log with the exception
    """
    exc_info = (type(exception), exception, exception.__traceback__)
    logger.error(f"{message}: {exception}", exc_info=exc_info)


class PerformanceLogger:
    """Named timers whose durations are written to a logger."""

    def __init__(self, logger: logging.Logger, component: str):
        """
        Initialize performance logger.

        Args:
            logger: Logger to use
            component: Component name
        """
        self.logger = logger
        self.component = component
        self.start_times: Dict[str, float] = {}

    def start(self, name: str) -> None:
        """Start timing an operation."""
        self.start_times[name] = time.perf_counter()

    def end(self, name: str, level: str = "DEBUG") -> float:
        """
        End timing an operation and log the duration.

        Args:
            name: Operation name
            level: Log level

        Returns:
            float: Duration in seconds
        """
        if name not in self.start_times:
            self.logger.warning(f"No start time found for {name}")
            return 0.0

        duration = time.perf_counter() - self.start_times.pop(name)
        self.logger.log(parse_level(level, logging.DEBUG),
                        f"{self.component} {name} took {duration:.4f} seconds")

        return duration
