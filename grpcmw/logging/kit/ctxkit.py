"""A call-scoped kit logger stored in the request context.

The logger placed by ``to_context`` is retrieved with ``extract``, which binds
the context's tags and any fields added with ``add_fields``. Extraction walks
all tags, so extract once per handler and reuse the logger.
"""

from __future__ import annotations

from typing import Any

from grpcmw.context import Context
from grpcmw.logging.kit.logger import Logger, NopLogger, with_fields


class _CtxLogger:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger
        self.fields: list[Any] = []


_CTX_MARKER = object()


def add_fields(ctx: Context, *args: Any) -> None:
    """Add fields to the logger stored in ``ctx``; does nothing if there is none."""
    entry = ctx.value(_CTX_MARKER)
    if entry is None:
        return
    entry.fields.extend(args)


def extract(ctx: Context) -> Logger:
    """Return the call-scoped logger with current tags and added fields bound."""
    entry = ctx.value(_CTX_MARKER)
    if entry is None:
        return NopLogger()
    return with_fields(entry.logger, *tags_to_fields(ctx), *entry.fields)


def tags_to_fields(ctx: Context) -> list[Any]:
    """Flatten the context's tags into alternating keys and values."""
    fields: list[Any] = []
    for key, value in ctx.tags().items():
        fields.extend((key, value))
    return fields


def to_context(ctx: Context, logger: Logger) -> Context:
    """Return a child context carrying ``logger`` for later extraction."""
    return ctx.with_value(_CTX_MARKER, _CtxLogger(logger))