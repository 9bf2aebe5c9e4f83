"""Structured key/value loggers with levels, context fields and level filtering."""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, TextIO

LEVEL_KEY = "level"
MISSING_VALUE = "(MISSING)"


class Level(Enum):
    """Log levels, ordered from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __str__(self) -> str:
        return self.value


_RANKS = {Level.DEBUG: 0, Level.INFO: 1, Level.WARN: 2, Level.ERROR: 3}


class Logger(ABC):
    """A logger that emits events made of alternating keys and values."""

    @abstractmethod
    def log(self, *args: Any) -> None:
        """Emit one event made of alternating keys and values."""


class _ContextLogger(Logger):
    """A logger that places fixed key/values before every event."""

    def __init__(self, inner: Logger, keyvals: tuple[Any, ...]) -> None:
        self._inner = inner
        self._keyvals = keyvals

    def log(self, *args: Any) -> None:
        self._inner.log(*self._keyvals, *args)


def _json_value(value: Any) -> Any:
    if isinstance(value, BaseException):
        return str(value)
    if isinstance(value, Enum):
        return str(value)
    return value


class JSONLogger(Logger):
    """Writes every event as one JSON object per line; later keys win."""

    def __init__(self, writer: TextIO) -> None:
        self._writer = writer
        self._lock = threading.Lock()

    def log(self, *args: Any) -> None:
        keyvals = list(args)
        if len(keyvals) % 2:
            keyvals.append(MISSING_VALUE)
        record = {str(key): _json_value(value) for key, value in zip(keyvals[::2], keyvals[1::2])}
        line = json.dumps(record, default=str)
        with self._lock:
            self._writer.write(line + "\n")


class NopLogger(Logger):
    """A logger that discards every event."""

    def log(self, *args: Any) -> None:
        return None


class LevelFilter(Logger):
    """Passes on events whose level is at least ``allowed``.

    Events without a level pass unless ``squelch_no_level`` is set.
    """

    def __init__(self, logger: Logger, allowed: Level = Level.DEBUG, *, squelch_no_level: bool = False) -> None:
        self._logger = logger
        self._allowed = allowed
        self._squelch_no_level = squelch_no_level

    def log(self, *args: Any) -> None:
        levels = [value for value in args[1::2] if isinstance(value, Level)]
        if not levels:
            if self._squelch_no_level:
                return
        elif any(level.rank < self._allowed.rank for level in levels):
            return
        self._logger.log(*args)


def with_fields(logger: Logger, *args: Any) -> Logger:
    """Return a logger that appends ``args`` to the fields already bound to ``logger``."""
    if not args:
        return logger
    if isinstance(logger, _ContextLogger):
        return _ContextLogger(logger._inner, logger._keyvals + args)
    return _ContextLogger(logger, args)


def _with_prefix(logger: Logger, *args: Any) -> Logger:
    if isinstance(logger, _ContextLogger):
        return _ContextLogger(logger._inner, args + logger._keyvals)
    return _ContextLogger(logger, args)


def debug(logger: Logger) -> Logger:
    """Return a logger whose events carry the debug level."""
    return _with_prefix(logger, LEVEL_KEY, Level.DEBUG)


def info(logger: Logger) -> Logger:
    """Return a logger whose events carry the info level."""
    return _with_prefix(logger, LEVEL_KEY, Level.INFO)


def warn(logger: Logger) -> Logger:
    """Return a logger whose events carry the warn level."""
    return _with_prefix(logger, LEVEL_KEY, Level.WARN)


def error(logger: Logger) -> Logger:
    """Return a logger whose events carry the error level."""
    return _with_prefix(logger, LEVEL_KEY, Level.ERROR)