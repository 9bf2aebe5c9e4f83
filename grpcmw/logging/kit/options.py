"""Options shared by the kit logging interceptors."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from grpcmw.logging.kit.logger import Logger, debug, error, info, warn
from grpcmw.status import Code, default_decider, default_error_to_code

RFC3339 = "%Y-%m-%dT%H:%M:%S%z"

CodeToLevel = Callable[[Code, Logger], Logger]
DurationToField = Callable[[timedelta], tuple[Any, ...]]
Decider = Callable[[str, "BaseException | None"], bool]
ErrorToCode = Callable[["BaseException | None"], Code]


def duration_to_time_millis_field(duration: timedelta) -> tuple[Any, ...]:
    """Return the duration in milliseconds under the key ``grpc.time_ms``."""
    microseconds = duration // timedelta(microseconds=1)
    return ("grpc.time_ms", microseconds / 1000)


def duration_to_duration_field(duration: timedelta) -> tuple[Any, ...]:
    """Return the duration itself under the key ``grpc.duration``."""
    return ("grpc.duration", duration)


DEFAULT_DURATION_TO_FIELD = duration_to_time_millis_field


def default_code_to_level(code: Code, logger: Logger) -> Logger:
    """Server-side mapping from a status code to a levelled logger."""
    if code in (Code.OK, Code.CANCELED, Code.INVALID_ARGUMENT, Code.NOT_FOUND,
                Code.ALREADY_EXISTS, Code.UNAUTHENTICATED):
        return info(logger)
    if code in (Code.DEADLINE_EXCEEDED, Code.PERMISSION_DENIED, Code.RESOURCE_EXHAUSTED,
                Code.FAILED_PRECONDITION, Code.ABORTED, Code.OUT_OF_RANGE, Code.UNAVAILABLE):
        return warn(logger)
    return error(logger)


def default_client_code_to_level(code: Code, logger: Logger) -> Logger:
    """Client-side mapping from a status code to a levelled logger."""
    if code in (Code.OK, Code.CANCELED, Code.INVALID_ARGUMENT, Code.NOT_FOUND,
                Code.ALREADY_EXISTS, Code.RESOURCE_EXHAUSTED, Code.FAILED_PRECONDITION,
                Code.ABORTED, Code.OUT_OF_RANGE):
        return debug(logger)
    if code in (Code.UNIMPLEMENTED, Code.INTERNAL, Code.UNAVAILABLE, Code.DATA_LOSS):
        return warn(logger)
    return info(logger)


@dataclass
class Options:
    """Settings of a kit logging interceptor."""

    level_func: CodeToLevel = default_code_to_level
    should_log: Decider = default_decider
    code_func: ErrorToCode = default_error_to_code
    duration_func: DurationToField = DEFAULT_DURATION_TO_FIELD
    timestamp_format: str = RFC3339


Option = Callable[[Options], None]


def with_decider(f: Decider) -> Option:
    """Customise the function deciding whether a call is logged."""
    def apply(options: Options) -> None:
        options.should_log = f
    return apply


def with_levels(f: CodeToLevel) -> Option:
    """Customise the mapping from status codes to log levels."""
    def apply(options: Options) -> None:
        options.level_func = f
    return apply


def with_codes(f: ErrorToCode) -> Option:
    """Customise the mapping from errors to status codes."""
    def apply(options: Options) -> None:
        options.code_func = f
    return apply


def with_duration_field(f: DurationToField) -> Option:
    """Customise the fields produced for the call duration."""
    def apply(options: Options) -> None:
        options.duration_func = f
    return apply


def with_timestamp_format(fmt: str) -> Option:
    """Customise the strftime format of emitted timestamps."""
    def apply(options: Options) -> None:
        options.timestamp_format = fmt
    return apply


def _evaluate(opts: Iterable[Option], level_func: CodeToLevel) -> Options:
    options = Options(level_func=level_func)
    for apply in opts:
        apply(options)
    return options


def evaluate_server_options(opts: Iterable[Option]) -> Options:
    """Build server-side options from the defaults and ``opts``."""
    return _evaluate(opts, default_code_to_level)


def evaluate_client_options(opts: Iterable[Option]) -> Options:
    """Build client-side options from the defaults and ``opts``."""
    return _evaluate(opts, default_client_code_to_level)