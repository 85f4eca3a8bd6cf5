#!/usr/bin/env python3
"""
Logging setup for the drainer process
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"

# HTTP and AWS SDK loggers are chatty at INFO
QUIET_LOGGERS = ("requests", "urllib3", "botocore", "boto3", "uvicorn.access")


class ColoredFormatter(logging.Formatter):
    """Colours the level name of console records"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)
        # The record is shared with the file handler
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_colors: bool = True,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS
) -> None:
    """
    Replace the root logger handlers with a console handler and an optional file handler

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Log file path, parent directories are created
        enable_colors: Colour level names on the console
        quiet_loggers: Loggers raised to WARNING
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_formatter = ColoredFormatter(CONSOLE_FORMAT) if enable_colors else logging.Formatter(CONSOLE_FORMAT)
    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), numeric_level, console_formatter))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_handler(logging.FileHandler(log_path), numeric_level, logging.Formatter(FILE_FORMAT)))

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured at {logging.getLevelName(numeric_level)} level"
        + (f", writing to {log_file}" if log_file else "")
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a drainer module"""
    return logging.getLogger(name)
