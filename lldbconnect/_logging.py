"""
Structured logging for lldbconnect.

Records follow the OpenTelemetry Logging Data Model when rendered as JSON,
and a compact one-line form when rendered for a terminal. Modules log
through a scoped adapter::

    log = scoped_logger("factory")
    log.error("Native constructor faulted", extra={"locator": url})

Environment::

    LLDBCONNECT_LOG_LEVEL=trace|debug|info|warn|error|fatal|off (default: info)
    LLDBCONNECT_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from typing import Any

__all__ = ["logger", "setup_logging", "scoped_logger"]

LEVEL_ENV = "LLDBCONNECT_LOG_LEVEL"
FORMAT_ENV = "LLDBCONNECT_LOG_FORMAT"

_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

# Python has no TRACE; it shares DEBUG.
_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}

_LOCATED_LEVELS = {logging.DEBUG, logging.ERROR, logging.CRITICAL}

# Attribute names every LogRecord carries; anything else came from ``extra``.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "scope",
    "taskName",
}

_SCOPES = (
    (("bridge", "encod"), "bridge"),
    (("factory", "create"), "factory"),
    (("option",), "options"),
    (("binding", "native", "lib"), "native"),
)

_HUMAN_ATTRIBUTES = ("locator", "encoding")


def _package_version() -> str:
    try:
        return get_version("lldbconnect")
    except PackageNotFoundError:
        return "0.0.0"


def _scope(record: logging.LogRecord) -> str:
    scope = getattr(record, "scope", None)
    if scope:
        return scope
    for needles, name in _SCOPES:
        if any(needle in record.name for needle in needles):
            return name
    return record.name.rsplit(".", 1)[-1] or "lldbconnect"


def _source_path(record: logging.LogRecord) -> str:
    path = record.pathname.replace("\\", "/")
    marker = "lldbconnect/"
    if marker in path:
        return path[path.rindex(marker) + len(marker) :]
    return path


def _created(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, shaped as an OpenTelemetry log record."""

    def __init__(self) -> None:
        super().__init__()
        self._resource = {"service.name": "lldbconnect", "service.version": _package_version()}

    def format(self, record: logging.LogRecord) -> str:
        created = _created(record)
        # RFC3339 with nanoseconds; Python only has microseconds.
        timestamp = f"{created:%Y-%m-%dT%H:%M:%S}.{created.microsecond * 1000:09d}Z"

        attributes: dict[str, Any] = {"scope": _scope(record)}
        attributes.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        )
        if record.levelno in _LOCATED_LEVELS:
            attributes["code.filepath"] = _source_path(record)
            attributes["code.lineno"] = record.lineno
        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            attributes["exception.type"] = type(error).__name__
            attributes["exception.message"] = str(error)

        return json.dumps(
            {
                "timestamp": timestamp,
                "severityText": _SEVERITY.get(record.levelno, "INFO"),
                "body": record.getMessage(),
                "attributes": attributes,
                "resource": self._resource,
            },
            separators=(",", ":"),
            default=str,
        )


class HumanFormatter(logging.Formatter):
    """
    Single-line terminal format::

        12:00:01 ERROR [factory] Native constructor faulted (locator=connect://h:1) [factory.py:88]
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _RED = "\x1b[31m"
    _YELLOW = "\x1b[33m"
    _CYAN = "\x1b[36m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _paint(self, text: str, color: str) -> str:
        if not (self._use_colors and color):
            return text
        return f"{color}{text}{self._RESET}"

    def _level_color(self, levelno: int) -> str:
        if levelno <= logging.DEBUG:
            return self._DIM
        if levelno >= logging.ERROR:
            return self._RED
        if levelno >= logging.WARNING:
            return self._YELLOW
        return ""

    def format(self, record: logging.LogRecord) -> str:
        severity = _SEVERITY.get(record.levelno, "INFO")
        line = (
            f"{_created(record):%H:%M:%S} "
            + self._paint(f"{severity:<5} ", self._level_color(record.levelno))
            + self._paint(f"[{_scope(record)}] ", self._CYAN)
            + record.getMessage()
        )

        shown = [
            f"{name}={getattr(record, name)}"
            for name in _HUMAN_ATTRIBUTES
            if getattr(record, name, None) is not None
        ]
        if shown:
            line += f" ({', '.join(shown)})"

        if record.levelno in _LOCATED_LEVELS:
            line += self._paint(f" [{_source_path(record)}:{record.lineno}]", self._DIM)
        return line


def _get_log_level() -> int:
    return _LEVELS.get(os.environ.get(LEVEL_ENV, "info").lower(), logging.INFO)


def _get_log_format() -> str:
    fmt = os.environ.get(FORMAT_ENV)
    if fmt:
        return fmt.lower()
    return "human" if sys.stderr.isatty() else "json"


def _create_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if _get_log_format() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(use_colors=sys.stderr.isatty()))
    return handler


logger = logging.getLogger("lldbconnect")


def _setup_default_handler() -> None:
    # Leave alone a logger the application has already configured.
    if logger.handlers:
        return
    logger.addHandler(_create_handler())
    logger.setLevel(_get_log_level())


def setup_logging(level: str | int = "info", format: str | None = None) -> None:
    """
    Configure lldbconnect logging, replacing any existing handlers.

    Parameters
    ----------
    level : str or int, default "info"
        One of trace, debug, info, warn, error, fatal, off (any case), or a
        ``logging`` constant. Unknown names fall back to info.
    format : str, optional
        "json" or "human". Also exported as LLDBCONNECT_LOG_FORMAT so child
        processes inherit it. Defaults to the environment, then TTY detection.

    Examples
    --------
    Trace every bridged locator while debugging a launch::

        >>> import lldbconnect
        >>> lldbconnect.setup_logging("debug", format="human")
    """
    if isinstance(level, str):
        level = _LEVELS.get(level.lower(), logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    if format:
        os.environ[FORMAT_ENV] = format

    logger.addHandler(_create_handler())
    logger.setLevel(level)


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """Return an adapter that tags every record with ``scope``."""
    return _ScopedLoggerAdapter(logger, {"scope": scope})


_setup_default_handler()
