"""Server-side authentication interceptors.

Each call is passed through a user-supplied auth function, which may enrich the
context handed to the handler or raise a ``StatusError`` to reject the call. A
service object that defines ``auth_func_override`` replaces the auth function
for every method it serves.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from grpcmw.chain import (
    StreamHandler,
    StreamServerInfo,
    StreamServerInterceptor,
    UnaryHandler,
    UnaryServerInfo,
    UnaryServerInterceptor,
)
from grpcmw.context import Context

AuthFunc = Callable[[Context], Context]


@runtime_checkable
class ServiceAuthFuncOverride(Protocol):
    """A service that performs its own authentication instead of the global auth function."""

    def auth_func_override(self, ctx: Context, full_method_name: str) -> Context:
        """Authenticate a call to ``full_method_name`` and return the context for the handler."""


class _WrappedServerStream:
    """A server stream whose context is replaced; everything else is delegated."""

    def __init__(self, stream: Any, ctx: Context) -> None:
        self._stream = stream
        self._ctx = ctx

    def context(self) -> Context:
        return self._ctx

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


def unary_server_interceptor(auth_func: AuthFunc) -> UnaryServerInterceptor:
    """Return a unary server interceptor that authenticates every request."""

    def interceptor(ctx: Context, req: Any, info: UnaryServerInfo, handler: UnaryHandler) -> Any:
        if isinstance(info.server, ServiceAuthFuncOverride):
            new_ctx = info.server.auth_func_override(ctx, info.full_method)
        else:
            new_ctx = auth_func(ctx)
        return handler(new_ctx, req)

    return interceptor


def stream_server_interceptor(auth_func: AuthFunc) -> StreamServerInterceptor:
    """Return a stream server interceptor that authenticates every stream."""

    def interceptor(srv: Any, stream: Any, info: StreamServerInfo, handler: StreamHandler) -> Any:
        if isinstance(srv, ServiceAuthFuncOverride):
            new_ctx = srv.auth_func_override(stream.context(), info.full_method)
        else:
            new_ctx = auth_func(stream.context())
        return handler(srv, _WrappedServerStream(stream, new_ctx))

    return interceptor