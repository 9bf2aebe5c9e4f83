# grpcmw

Composable middleware for gRPC-style calls: interceptor chaining, per-request
authentication, and structured key/value logging of finished calls and their
payloads.

Interceptors here are plain Python callables. A unary server interceptor is
called as `interceptor(ctx, req, info, handler)`, a stream server interceptor
as `interceptor(srv, stream, info, handler)`, a unary client interceptor as
`interceptor(ctx, method, req, reply, cc, invoker, *opts)` and a stream client
interceptor as `interceptor(ctx, desc, cc, method, streamer, *opts)`.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Contexts and status codes

`grpcmw.context.Context` is an immutable request context. `background()`
returns the empty root; `with_value`, `with_deadline`, `with_timeout`,
`with_incoming_metadata` and `with_tags` each return a derived child, read
back with `value`, `deadline`, `incoming_metadata` and `tags`. Metadata keys
are lower-cased and every key holds a tuple of values.

`grpcmw.status` has the `Code` enum of canonical status codes, `StatusError`
(an exception carrying a `code` and a `message`), and `code_of(err)`, which
gives `Code.OK` for `None`, the error's code for a `StatusError` and
`Code.UNKNOWN` for anything else.

## Chaining interceptors

`grpcmw.chain` turns several interceptors into one. They run from left to
right, and each sees the context changes made by the ones before it. With no
interceptors the chain just calls the handler; with one it is returned as is.

```python
from grpcmw.chain import chain_unary_server, UnaryServerInfo
from grpcmw.context import background

def first(ctx, req, info, handler):
    return handler(ctx.with_value("first", 1), req)

def second(ctx, req, info, handler):
    return handler(ctx.with_value("second", 1), req)

def handler(ctx, req):
    return (ctx.value("first"), ctx.value("second"), req)

chained = chain_unary_server(first, second)
chained(background(), "input", UnaryServerInfo(full_method="/pkg.Service/Method"), handler)
```

`chain_stream_server`, `chain_unary_client` and `chain_stream_client` do the
same for streaming and client-side interceptors. `StreamServerInfo` and
`StreamDesc` describe streaming calls.

## Authentication

`grpcmw.auth.metadata.auth_from_md` reads the `authorization` entry from the
incoming metadata of a context and checks its scheme case-insensitively,
returning what follows the scheme. A missing, malformed or wrong-scheme value
raises a `StatusError` with code `UNAUTHENTICATED`.

```python
from grpcmw.auth.metadata import auth_from_md
from grpcmw.auth.interceptors import unary_server_interceptor

def auth_func(ctx):
    credentials = auth_from_md(ctx, "bearer")
    return ctx.with_value("credentials", credentials)

interceptor = unary_server_interceptor(auth_func)
```

`stream_server_interceptor` does the same for streams, handing the handler a
stream whose `context()` returns the authenticated context. A service object
that implements `ServiceAuthFuncOverride.auth_func_override(ctx,
full_method_name)` is used instead of the global auth function. Errors raised
by the auth function propagate and the handler is not called.

## Logging

`grpcmw.logging.kit.logger` provides a small key/value logger: `JSONLogger`
(one JSON object per line on a text stream), `NopLogger`, `LevelFilter`
(drops events below a given `Level`), `with_fields` to bind fields, and the
level helpers `debug`, `info`, `warn` and `error`.

- `grpcmw.logging.kit.server.unary_server_interceptor` /
  `stream_server_interceptor` put a request-scoped logger into the context
  (with start time, deadline if any, service and method) and log a final line
  with the status code and duration.
- `grpcmw.logging.kit.client.unary_client_interceptor` /
  `stream_client_interceptor` log finished outgoing calls.
- `grpcmw.logging.kit.payload` logs protobuf request and response messages as
  JSON (`marshal_message`), server- and client-side, unary and streaming,
  whenever the supplied decider returns true.

Behaviour is tuned with options from `grpcmw.logging.kit.options`:
`with_decider`, `with_levels`, `with_codes`, `with_duration_field` and
`with_timestamp_format` (a `strftime` format). `default_code_to_level` and
`default_client_code_to_level` are the default level mappings;
`duration_to_time_millis_field` (the default) and `duration_to_duration_field`
produce the duration field.

Inside a handler, `grpcmw.logging.kit.ctxkit.extract(ctx)` returns the
request-scoped logger carrying all tags set so far, and
`ctxkit.add_fields(ctx, ...)` attaches extra fields to it.

## What this package does not do

It does not run a server or open connections, and it does not register
itself with any RPC framework: the interceptors are callables that you wire
into your own call path. Nothing fills the context's tags automatically;
attach a tag mapping with `Context.with_tags` if you want tags in the logs.