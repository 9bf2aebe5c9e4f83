"""Extraction of credentials from the incoming ``authorization`` header."""

from __future__ import annotations

from grpcmw.context import Context
from grpcmw.status import Code, StatusError

HEADER_AUTHORIZE = "authorization"


def auth_from_md(ctx: Context, expected_scheme: str) -> str:
    """Return the credentials of the ``authorization`` header for ``expected_scheme``.

    The scheme is compared case-insensitively. A missing header, a header without
    credentials or a header of another scheme raises a ``StatusError`` with
    ``Code.UNAUTHENTICATED``.
    """
    values = ctx.incoming_metadata().get(HEADER_AUTHORIZE, ())
    header = values[0] if values else ""
    if not header:
        raise StatusError(Code.UNAUTHENTICATED, "Request unauthenticated with " + expected_scheme)
    parts = header.split(" ", 1)
    if len(parts) < 2:
        raise StatusError(Code.UNAUTHENTICATED, "Bad authorization string")
    scheme, credentials = parts
    if scheme.casefold() != expected_scheme.casefold():
        raise StatusError(Code.UNAUTHENTICATED, "Request unauthenticated with " + expected_scheme)
    return credentials