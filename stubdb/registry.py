"""
Stub registry: normalized query text -> ordered queue of canned responses.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from .exc import Exhausted, NotStubbed
from .rows import Result, Rows

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def query_hash(query: str) -> str:
    # Whitespace and case are ignored to make stubbing less brittle.
    normalized = _WHITESPACE.sub("", query).lower()
    return hashlib.sha1(normalized.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class RowsStub:
    rows: Rows


@dataclass(frozen=True)
class ResultStub:
    result: Result


@dataclass(frozen=True)
class ErrorStub:
    error: BaseException


StubEntry = Union[RowsStub, ResultStub, ErrorStub]

_KINDS: dict[str, tuple[type, type]] = {
    "rows": (Rows, RowsStub),
    "result": (Result, ResultStub),
    "error": (BaseException, ErrorStub),
}


def stub_entry(value: Any, kinds: Iterable[str] = ("rows", "result", "error")) -> StubEntry:
    """
    Classify ``value`` into a stub entry.

    ``kinds`` restricts the accepted variants. Entries pass through unchanged
    when their variant is allowed. Anything else is a broken test and raises
    ``TypeError``.
    """
    allowed = [_KINDS[k] for k in kinds]
    for _, entry_type in allowed:
        if isinstance(value, entry_type):
            return value
    for value_type, entry_type in allowed:
        if isinstance(value, value_type):
            return entry_type(value)
    raise TypeError(f"invalid value for stub result: {value!r}")


@dataclass
class StubQueue:
    entries: list[StubEntry] = field(default_factory=list)
    pos: int = 0

    @property
    def exhausted(self) -> bool:
        return self.pos == len(self.entries)

    def current(self) -> StubEntry:
        return self.entries[self.pos]

    def advance(self) -> StubEntry:
        entry = self.entries[self.pos]
        self.pos += 1
        return entry


class StubRegistry:
    def __init__(self) -> None:
        self._queues: dict[str, StubQueue] = {}

    def register(self, query: str, entries: Iterable[Any]) -> StubQueue:
        """Append ``entries`` to the queue for ``query``, creating it if needed."""
        # Classify everything before touching the queue so a bad value leaves
        # no partial registration behind.
        classified = [stub_entry(e) for e in entries]
        queue = self._queues.setdefault(query_hash(query), StubQueue())
        queue.entries.extend(classified)
        logger.debug("Stubbed %d result(s) for %r", len(classified), query)
        return queue

    def lookup(self, query: str) -> StubQueue | None:
        return self._queues.get(query_hash(query))

    def consult(self, query: str) -> StubEntry:
        """Return the entry at the queue position and advance past it."""
        queue = self.lookup(query)
        if queue is None:
            raise NotStubbed(query)
        if queue.exhausted:
            raise Exhausted(query)
        entry = queue.advance()
        logger.debug("Consulted stub %d/%d for %r", queue.pos, len(queue.entries), query)
        return entry

    def clear(self) -> None:
        self._queues.clear()

    def __contains__(self, query: object) -> bool:
        return isinstance(query, str) and query_hash(query) in self._queues

    def __len__(self) -> int:
        return len(self._queues)
