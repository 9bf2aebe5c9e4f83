"""Status codes, status errors and the shared logging decision helpers."""

from __future__ import annotations

from enum import IntEnum


class Code(IntEnum):
    """Canonical RPC status codes."""

    OK = 0
    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    def __str__(self) -> str:
        if self is Code.OK:
            return "OK"
        return "".join(part.capitalize() for part in self.name.split("_"))

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class StatusError(Exception):
    """An error that carries an RPC status code and a message."""

    def __init__(self, code: Code | int, message: str = "") -> None:
        self.code = Code(code)
        self.message = message
        super().__init__(f"rpc error: code = {self.code} desc = {message}")


def code_of(err: BaseException | None) -> Code:
    """Return the status code of ``err``: OK for None, UNKNOWN for non-status errors."""
    if err is None:
        return Code.OK
    if isinstance(err, StatusError):
        return err.code
    return Code.UNKNOWN


def default_error_to_code(err: BaseException | None) -> Code:
    """Default mapping from an error to its status code."""
    return code_of(err)


# Methods whose successful calls the default decider leaves out; none by default.
_SUPPRESSED_METHODS: frozenset[str] = frozenset()


def default_decider(full_method_name: str, err: BaseException | None) -> bool:
    """Default logging decider: every call is logged."""
    return err is not None or full_method_name not in _SUPPRESSED_METHODS