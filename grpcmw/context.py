"""Immutable request-scoped context carrying values, a deadline, metadata and tags."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, MutableMapping
from datetime import datetime, timedelta, timezone
from typing import Any, Union

MetadataInput = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def _normalize_metadata(metadata: MetadataInput) -> dict[str, tuple[str, ...]]:
    items = metadata.items() if isinstance(metadata, Mapping) else metadata
    merged: dict[str, list[str]] = {}
    for key, value in items:
        values = [value] if isinstance(value, (str, bytes)) else list(value)
        merged.setdefault(key.lower(), []).extend(values)
    return {key: tuple(values) for key, values in merged.items()}


class Context:
    """An immutable context; every ``with_*`` method returns a derived child."""

    __slots__ = ("_values", "_deadline", "_metadata", "_tags")

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}
        self._deadline: datetime | None = None
        self._metadata: dict[str, tuple[str, ...]] | None = None
        self._tags: MutableMapping[str, Any] | None = None

    def _derive(self) -> Context:
        child = Context()
        child._values = dict(self._values)
        child._deadline = self._deadline
        child._metadata = self._metadata
        child._tags = self._tags
        return child

    def value(self, key: Hashable) -> Any:
        """Return the value stored under ``key``, or None."""
        return self._values.get(key)

    def with_value(self, key: Hashable, value: Any) -> Context:
        child = self._derive()
        child._values[key] = value
        return child

    def with_deadline(self, deadline: datetime) -> Context:
        """Derive a context whose deadline is the earlier of the current one and ``deadline``."""
        child = self._derive()
        if child._deadline is None or deadline < child._deadline:
            child._deadline = deadline
        return child

    def with_timeout(self, seconds: float | timedelta) -> Context:
        delta = seconds if isinstance(seconds, timedelta) else timedelta(seconds=seconds)
        return self.with_deadline(datetime.now(timezone.utc) + delta)

    def deadline(self) -> datetime | None:
        return self._deadline

    def with_incoming_metadata(self, metadata: MetadataInput) -> Context:
        """Attach incoming request metadata; keys are lower-cased, values kept in order."""
        child = self._derive()
        child._metadata = _normalize_metadata(metadata)
        return child

    def incoming_metadata(self) -> dict[str, tuple[str, ...]]:
        """Return a copy of the incoming metadata (empty if none was attached)."""
        return dict(self._metadata or {})

    def with_tags(self, tags: MutableMapping[str, Any]) -> Context:
        child = self._derive()
        child._tags = tags
        return child

    def tags(self) -> MutableMapping[str, Any]:
        """Return the attached tag mapping, or a throwaway empty dict when none is set."""
        if self._tags is None:
            return {}
        return self._tags


_BACKGROUND = Context()


def background() -> Context:
    """Return the empty root context."""
    return _BACKGROUND