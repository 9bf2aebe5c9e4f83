"""Server interceptors that put a call-scoped kit logger in the context and log each finished call."""

from __future__ import annotations

import posixpath
import time
from datetime import datetime, timedelta
from typing import Any

from grpcmw.chain import (
    StreamHandler,
    StreamServerInfo,
    StreamServerInterceptor,
    UnaryHandler,
    UnaryServerInfo,
    UnaryServerInterceptor,
)
from grpcmw.context import Context
from grpcmw.logging.kit.ctxkit import extract, tags_to_fields, to_context
from grpcmw.logging.kit.logger import Logger, with_fields
from grpcmw.logging.kit.options import Option, Options, evaluate_server_options
from grpcmw.status import Code

SYSTEM_FIELD = "grpc"
SERVER_FIELD = "server"


def _split_full_method(full_method: str) -> tuple[str, str]:
    """Split ``/package.Service/Method`` into its service and method names."""
    service = posixpath.normpath(posixpath.dirname(full_method))[1:]
    stripped = full_method.rstrip("/")
    if not full_method:
        method = "."
    elif not stripped:
        method = "/"
    else:
        method = stripped.rsplit("/", 1)[-1]
    return service, method


def server_call_fields(full_method: str) -> list[Any]:
    """Return the fields describing a server-side call to ``full_method``."""
    service, method = _split_full_method(full_method)
    return [
        "system", SYSTEM_FIELD,
        "span.kind", SERVER_FIELD,
        "grpc.service", service,
        "grpc.method", method,
    ]


class _ContextStream:
    """A server stream whose context is replaced; everything else is delegated."""

    def __init__(self, stream: Any, ctx: Context) -> None:
        self._stream = stream
        self._ctx = ctx

    def context(self) -> Context:
        return self._ctx

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


def _inject_logger(
    ctx: Context, logger: Logger, full_method: str, start: datetime, timestamp_format: str
) -> Context:
    fields = tags_to_fields(ctx)
    fields += ["grpc.start_time", start.strftime(timestamp_format)]
    deadline = ctx.deadline()
    if deadline is not None:
        fields += ["grpc.request.deadline", deadline.strftime(timestamp_format)]
    fields += server_call_fields(full_method)
    return to_context(ctx, with_fields(logger, *fields))


def _log_call(
    ctx: Context, options: Options, msg: str, code: Code, elapsed: timedelta, err: BaseException | None
) -> None:
    logger = options.level_func(code, extract(ctx))
    logger.log("msg", msg, "error", err, "grpc.code", str(code), *options.duration_func(elapsed))


def _finish(
    ctx: Context,
    options: Options,
    full_method: str,
    prefix: str,
    started: float,
    err: BaseException | None,
) -> None:
    if not options.should_log(full_method, err):
        return
    code = options.code_func(err)
    elapsed = timedelta(seconds=time.monotonic() - started)
    _log_call(ctx, options, f"{prefix} with code {code}", code, elapsed, err)


def unary_server_interceptor(logger: Logger, *opts: Option) -> UnaryServerInterceptor:
    """Return a unary server interceptor that adds ``logger`` to the context and logs the call."""
    options = evaluate_server_options(opts)

    def interceptor(ctx: Context, req: Any, info: UnaryServerInfo, handler: UnaryHandler) -> Any:
        started = time.monotonic()
        new_ctx = _inject_logger(
            ctx, logger, info.full_method, datetime.now().astimezone(), options.timestamp_format
        )
        try:
            resp = handler(new_ctx, req)
        except Exception as exc:
            _finish(new_ctx, options, info.full_method, "finished unary call", started, exc)
            raise
        _finish(new_ctx, options, info.full_method, "finished unary call", started, None)
        return resp

    return interceptor


def stream_server_interceptor(logger: Logger, *opts: Option) -> StreamServerInterceptor:
    """Return a stream server interceptor that adds ``logger`` to the context and logs the call."""
    options = evaluate_server_options(opts)

    def interceptor(srv: Any, stream: Any, info: StreamServerInfo, handler: StreamHandler) -> Any:
        started = time.monotonic()
        new_ctx = _inject_logger(
            stream.context(), logger, info.full_method, datetime.now().astimezone(),
            options.timestamp_format,
        )
        try:
            result = handler(srv, _ContextStream(stream, new_ctx))
        except Exception as exc:
            _finish(new_ctx, options, info.full_method, "finished streaming call", started, exc)
            raise
        _finish(new_ctx, options, info.full_method, "finished streaming call", started, None)
        return result

    return interceptor