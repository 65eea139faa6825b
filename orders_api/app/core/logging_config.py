"""
Logging configuration for the application.

The ``setup_logging`` function configures the root logger with a
console handler and, optionally, a file handler.  Every record is
stamped with the correlation id of the request being served (or ``-``
outside of a request) so log lines emitted by services and
repositories can be tied back to the HTTP request that caused them.

The correlation id lives in a :mod:`contextvars` variable.  The HTTP
middleware in ``main.py`` sets it on entry; because FastAPI copies the
context into worker threads, repository code running in the threadpool
sees the same value.
"""

import logging
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


def new_request_id() -> str:
    return uuid.uuid4().hex


def get_request_id() -> Optional[str]:
    """Return the correlation id bound to the current context, if any."""
    return _request_id.get()


def bind_request_id(request_id: Optional[str] = None):
    """Bind ``request_id`` (or a fresh one) to the current context.

    Returns the token needed by :func:`reset_request_id` to restore the
    previous value.
    """
    return _request_id.set(request_id or new_request_id())


def reset_request_id(token) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Attach ``record.request_id`` so formatters can reference it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    If no handlers are attached to the root logger, attach a console
    handler and optionally a file handler.  The root logger's level is
    set based on the provided ``level``.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured, e.g. by pytest or by an earlier create_app().
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    request_filter = RequestIdFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(request_filter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(request_filter)
        logger.addHandler(file_handler)
