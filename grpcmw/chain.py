"""Combine several interceptors into one, executed left to right."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

UnaryHandler = Callable[[Any, Any], Any]
UnaryServerInterceptor = Callable[[Any, Any, "UnaryServerInfo", UnaryHandler], Any]
StreamHandler = Callable[[Any, Any], Any]
StreamServerInterceptor = Callable[[Any, Any, "StreamServerInfo", StreamHandler], Any]
UnaryInvoker = Callable[..., Any]
UnaryClientInterceptor = Callable[..., Any]
Streamer = Callable[..., Any]
StreamClientInterceptor = Callable[..., Any]


@dataclass(frozen=True)
class UnaryServerInfo:
    """Information about a unary call, passed to server interceptors."""

    full_method: str
    server: Any = None


@dataclass(frozen=True)
class StreamServerInfo:
    """Information about a streaming call, passed to server interceptors."""

    full_method: str
    is_client_stream: bool = False
    is_server_stream: bool = False


@dataclass(frozen=True)
class StreamDesc:
    """Description of a stream, passed to client stream interceptors."""

    stream_name: str
    server_streams: bool = False
    client_streams: bool = False


def chain_unary_server(*interceptors: UnaryServerInterceptor) -> UnaryServerInterceptor:
    """Build one unary server interceptor running ``interceptors`` left to right."""
    if not interceptors:
        def passthrough(ctx, req, info, handler):
            return handler(ctx, req)
        return passthrough
    if len(interceptors) == 1:
        return interceptors[0]

    def bind(interceptor, info, inner):
        return lambda ctx, req: interceptor(ctx, req, info, inner)

    def chained(ctx, req, info, handler):
        current = handler
        for interceptor in reversed(interceptors[1:]):
            current = bind(interceptor, info, current)
        return interceptors[0](ctx, req, info, current)

    return chained


def chain_stream_server(*interceptors: StreamServerInterceptor) -> StreamServerInterceptor:
    """Build one stream server interceptor running ``interceptors`` left to right."""
    if not interceptors:
        def passthrough(srv, stream, info, handler):
            return handler(srv, stream)
        return passthrough
    if len(interceptors) == 1:
        return interceptors[0]

    def bind(interceptor, info, inner):
        return lambda srv, stream: interceptor(srv, stream, info, inner)

    def chained(srv, stream, info, handler):
        current = handler
        for interceptor in reversed(interceptors[1:]):
            current = bind(interceptor, info, current)
        return interceptors[0](srv, stream, info, current)

    return chained


def chain_unary_client(*interceptors: UnaryClientInterceptor) -> UnaryClientInterceptor:
    """Build one unary client interceptor running ``interceptors`` left to right."""
    if not interceptors:
        def passthrough(ctx, method, req, reply, cc, invoker, *opts):
            return invoker(ctx, method, req, reply, cc, *opts)
        return passthrough
    if len(interceptors) == 1:
        return interceptors[0]

    def bind(interceptor, inner):
        def invoke(ctx, method, req, reply, cc, *opts):
            return interceptor(ctx, method, req, reply, cc, inner, *opts)
        return invoke

    def chained(ctx, method, req, reply, cc, invoker, *opts):
        current = invoker
        for interceptor in reversed(interceptors[1:]):
            current = bind(interceptor, current)
        return interceptors[0](ctx, method, req, reply, cc, current, *opts)

    return chained


def chain_stream_client(*interceptors: StreamClientInterceptor) -> StreamClientInterceptor:
    """Build one stream client interceptor running ``interceptors`` left to right."""
    if not interceptors:
        def passthrough(ctx, desc, cc, method, streamer, *opts):
            return streamer(ctx, desc, cc, method, *opts)
        return passthrough
    if len(interceptors) == 1:
        return interceptors[0]

    def bind(interceptor, inner):
        def stream(ctx, desc, cc, method, *opts):
            return interceptor(ctx, desc, cc, method, inner, *opts)
        return stream

    def chained(ctx, desc, cc, method, streamer, *opts):
        current = streamer
        for interceptor in reversed(interceptors[1:]):
            current = bind(interceptor, current)
        return interceptors[0](ctx, desc, cc, method, current, *opts)

    return chained