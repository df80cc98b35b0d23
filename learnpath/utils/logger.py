"""
Logging for learnpath: one package logger ("learnpath") with a rotating file
handler, an optional colour console handler, and the current request id
stamped on every record.
"""

from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

ROOT_LOGGER = "learnpath"

LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "request_id=%(request_id)s src=%(filename)s:%(lineno)d %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.request_id = _request_id.get()
        return True


class ColorFormatter(logging.Formatter):
    """ANSI colours by level for the console handler."""

    RESET = "\x1b[0m"
    DIM = "\x1b[2m"
    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def format(self, record: logging.LogRecord) -> str:
        colored = copy.copy(record)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        colored.name = f"{self.DIM}{record.name}{self.RESET}"
        return super().format(colored)


def _console_supports_color(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get((name or "INFO").upper(), logging.INFO)


def configure_logging(
    *,
    log_dir: str | Path = "logs",
    log_file: str = "learnpath.log",
    level: str = "INFO",
    console: bool = False,
) -> logging.Logger:
    """
    Attach handlers to the package logger. Calling it again is a no-op, so the
    app module and scripts can both call it.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger

    numeric_level = _level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False
    request_filter = RequestIdFilter()

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        Path(log_dir) / log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handlers: list[logging.Handler] = [file_handler]

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        formatter_cls = ColorFormatter if _console_supports_color(sys.stdout) else logging.Formatter
        console_handler.setFormatter(formatter_cls(LOG_FORMAT, DATE_FORMAT))
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.addFilter(request_filter)
        logger.addHandler(handler)

    logger.debug("logging configured dir=%s level=%s console=%s", log_dir, level, console)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger, e.g. get_logger("store") -> learnpath.store."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or uuid.uuid4().hex
    _request_id.set(rid)
    return rid


def clear_request_id() -> None:
    _request_id.set("-")


@contextmanager
def log_request(logger: logging.Logger, name: str) -> Iterator[None]:
    """
    Time a block and log its outcome:

        with log_request(logger, "load dashboard user=..."):
            ...
    """
    start = time.perf_counter()
    try:
        yield
    except Exception:
        logger.warning("%s failed duration_ms=%d", name, (time.perf_counter() - start) * 1000)
        raise
    logger.info("%s ok duration_ms=%d", name, (time.perf_counter() - start) * 1000)
