"""Interceptors that log request and response payloads as JSON."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from google.protobuf.json_format import MessageToJson
from google.protobuf.message import Message

from grpcmw.chain import (
    StreamClientInterceptor,
    StreamHandler,
    StreamServerInfo,
    StreamServerInterceptor,
    UnaryHandler,
    UnaryServerInfo,
    UnaryServerInterceptor,
)
from grpcmw.context import Context
from grpcmw.logging.kit.client import client_call_fields
from grpcmw.logging.kit.ctxkit import tags_to_fields
from grpcmw.logging.kit.logger import Logger, info, with_fields
from grpcmw.logging.kit.server import server_call_fields

ServerPayloadLoggingDecider = Callable[[Context, str, Any], bool]
ClientPayloadLoggingDecider = Callable[[Context, str], bool]

REQUEST_KEY = "grpc.request.content"
RESPONSE_KEY = "grpc.response.content"


def marshal_message(message: Any) -> str:
    """Serialize a protobuf message to JSON text."""
    try:
        return MessageToJson(message)
    except Exception as exc:
        raise ValueError(f"jsonpb serializer failed: {exc}") from exc


def _log_message(logger: Logger, message: Any, key: str) -> None:
    if not isinstance(message, Message):
        return
    try:
        payload = marshal_message(message)
    except ValueError as exc:
        info(logger).log(key, exc)
        payload = ""
    info(logger).log(key, payload)


class _LoggingServerStream:
    """A server stream that logs every message it sends or receives."""

    def __init__(self, stream: Any, logger: Logger) -> None:
        self._stream = stream
        self._logger = logger

    def send_msg(self, message: Any) -> Any:
        result = self._stream.send_msg(message)
        _log_message(self._logger, message, RESPONSE_KEY)
        return result

    def recv_msg(self, message: Any) -> Any:
        result = self._stream.recv_msg(message)
        _log_message(self._logger, message, REQUEST_KEY)
        return result

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


class _LoggingClientStream:
    """A client stream that logs every message it sends or receives."""

    def __init__(self, stream: Any, logger: Logger) -> None:
        self._stream = stream
        self._logger = logger

    def send_msg(self, message: Any) -> Any:
        result = self._stream.send_msg(message)
        _log_message(self._logger, message, REQUEST_KEY)
        return result

    def recv_msg(self, message: Any) -> Any:
        result = self._stream.recv_msg(message)
        _log_message(self._logger, message, RESPONSE_KEY)
        return result

    def __getattr__(self, name: str) -> Any:
        return getattr(self._stream, name)


def payload_unary_server_interceptor(
    logger: Logger, decider: ServerPayloadLoggingDecider
) -> UnaryServerInterceptor:
    """Return a unary server interceptor logging the request and, on success, the response."""

    def interceptor(ctx: Context, req: Any, info_: UnaryServerInfo, handler: UnaryHandler) -> Any:
        if not decider(ctx, info_.full_method, info_.server):
            return handler(ctx, req)
        entry = with_fields(logger, *server_call_fields(info_.full_method), *tags_to_fields(ctx))
        _log_message(entry, req, REQUEST_KEY)
        resp = handler(ctx, req)
        _log_message(entry, resp, RESPONSE_KEY)
        return resp

    return interceptor


def payload_stream_server_interceptor(
    logger: Logger, decider: ServerPayloadLoggingDecider
) -> StreamServerInterceptor:
    """Return a stream server interceptor logging every message on the stream."""

    def interceptor(srv: Any, stream: Any, info_: StreamServerInfo, handler: StreamHandler) -> Any:
        ctx = stream.context()
        if not decider(ctx, info_.full_method, srv):
            return handler(srv, stream)
        entry = with_fields(logger, *server_call_fields(info_.full_method), *tags_to_fields(ctx))
        return handler(srv, _LoggingServerStream(stream, entry))

    return interceptor


def payload_unary_client_interceptor(logger: Logger, decider: ClientPayloadLoggingDecider):
    """Return a unary client interceptor logging the request and, on success, the reply."""

    def interceptor(ctx: Context, method: str, req: Any, reply: Any, cc: Any, invoker: Any, *call_opts: Any) -> Any:
        if not decider(ctx, method):
            return invoker(ctx, method, req, reply, cc, *call_opts)
        entry = with_fields(logger, *client_call_fields(method))
        _log_message(entry, req, REQUEST_KEY)
        result = invoker(ctx, method, req, reply, cc, *call_opts)
        _log_message(entry, reply, RESPONSE_KEY)
        return result

    return interceptor


def payload_stream_client_interceptor(
    logger: Logger, decider: ClientPayloadLoggingDecider
) -> StreamClientInterceptor:
    """Return a stream client interceptor logging every message on the stream."""

    def interceptor(ctx: Context, desc: Any, cc: Any, method: str, streamer: Any, *call_opts: Any) -> Any:
        if not decider(ctx, method):
            return streamer(ctx, desc, cc, method, *call_opts)
        entry = with_fields(logger, *client_call_fields(method))
        stream = streamer(ctx, desc, cc, method, *call_opts)
        return _LoggingClientStream(stream, entry)

    return interceptor