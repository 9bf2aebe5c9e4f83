"""Client interceptors that log the outcome of outgoing calls."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Any

from grpcmw.chain import StreamClientInterceptor, UnaryClientInterceptor
from grpcmw.context import Context
from grpcmw.logging.kit.logger import Logger, with_fields
from grpcmw.logging.kit.options import Option, Options, evaluate_client_options
from grpcmw.logging.kit.server import _split_full_method


def client_call_fields(full_method: str) -> list[Any]:
    """Return the fields describing a client-side call to ``full_method``."""
    service, method = _split_full_method(full_method)
    return [
        "system", "grpc",
        "span.kind", "client",
        "grpc.service", service,
        "grpc.method", method,
    ]


def _log_final(
    options: Options, logger: Logger, started: float, err: BaseException | None, msg: str
) -> None:
    code = options.code_func(err)
    levelled = options.level_func(code, logger)
    elapsed = timedelta(seconds=time.monotonic() - started)
    levelled.log("msg", msg, "error", err, "grpc.code", str(code), *options.duration_func(elapsed))


def unary_client_interceptor(logger: Logger, *opts: Option) -> UnaryClientInterceptor:
    """Return a unary client interceptor that logs every finished call."""
    options = evaluate_client_options(opts)

    def interceptor(ctx: Context, method: str, req: Any, reply: Any, cc: Any, invoker: Any, *call_opts: Any) -> Any:
        call_logger = with_fields(logger, *client_call_fields(method))
        started = time.monotonic()
        try:
            result = invoker(ctx, method, req, reply, cc, *call_opts)
        except Exception as exc:
            _log_final(options, call_logger, started, exc, "finished client unary call")
            raise
        _log_final(options, call_logger, started, None, "finished client unary call")
        return result

    return interceptor


def stream_client_interceptor(logger: Logger, *opts: Option) -> StreamClientInterceptor:
    """Return a stream client interceptor that logs the opening of every stream."""
    options = evaluate_client_options(opts)

    def interceptor(ctx: Context, desc: Any, cc: Any, method: str, streamer: Any, *call_opts: Any) -> Any:
        call_logger = with_fields(logger, *client_call_fields(method))
        started = time.monotonic()
        try:
            stream = streamer(ctx, desc, cc, method, *call_opts)
        except Exception as exc:
            _log_final(options, call_logger, started, exc, "finished client streaming call")
            raise
        _log_final(options, call_logger, started, None, "finished client streaming call")
        return stream

    return interceptor