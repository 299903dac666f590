"""
Fake DB-API connection.

Every call is answered either by an override function installed by the test or
by the stub registry. ``query``/``exec``/``prepare`` form the driver-level
contract; ``cursor()`` adapts it to PEP 249 so SQLAlchemy can drive it.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import TracebackType
from typing import Any, Optional, Type

from .exc import ExecNotStubbed, Exhausted, InterfaceError, NotStubbed, ProgrammingError, QueryNotStubbed
from .registry import ErrorStub, ResultStub, RowsStub, StubEntry, StubQueue, StubRegistry
from .rows import Result, Rows

QueryFunc = Callable[[str, Any], Rows]
ExecFunc = Callable[[str, Any], Result]

# First keywords of statements that produce a result set.
_ROW_KEYWORDS = frozenset({"select", "with", "values", "show", "explain", "pragma", "describe"})
_FIRST_WORD = re.compile(r"^[\s(]*([A-Za-z]+)")


def returns_rows(query: str) -> bool:
    m = _FIRST_WORD.match(query)
    return bool(m) and m.group(1).lower() in _ROW_KEYWORDS


def _rows_or_raise(entry: StubEntry, query: str) -> Rows:
    if isinstance(entry, RowsStub):
        return entry.rows.clone()
    if isinstance(entry, ErrorStub):
        raise entry.error
    raise NotStubbed(query)


def _result_or_raise(entry: StubEntry, query: str) -> Result:
    if isinstance(entry, ResultStub):
        return entry.result
    if isinstance(entry, ErrorStub):
        raise entry.error
    raise ExecNotStubbed(query)


def _take(queue: StubQueue, query: str) -> StubEntry:
    if queue.exhausted:
        raise Exhausted(query)
    return queue.advance()


class Transaction:
    """Transaction handle; this fake has no isolation to commit or roll back."""

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass


class Statement:
    """A query bound to whichever capabilities ``Connection.prepare`` resolved."""

    def __init__(
        self,
        query: str,
        query_func: Callable[[Any], Rows] | None = None,
        exec_func: Callable[[Any], Result] | None = None,
    ):
        self.text = query
        self._query_func = query_func
        self._exec_func = exec_func

    @property
    def num_input(self) -> int:
        # Bind parameters are never validated.
        return -1

    def query(self, args: Any = ()) -> Rows:
        if self._query_func is None:
            raise QueryNotStubbed(self.text)
        return self._query_func(args)

    def exec(self, args: Any = ()) -> Result:
        if self._exec_func is None:
            raise ExecNotStubbed(self.text)
        return self._exec_func(args)

    def close(self) -> None:
        pass


class Connection:
    def __init__(self) -> None:
        self.registry = StubRegistry()
        self.query_func: QueryFunc | None = None
        self.exec_func: ExecFunc | None = None

    def prepare(self, query: str) -> Statement:
        query_func: Callable[[Any], Rows] | None = None
        exec_func: Callable[[Any], Result] | None = None

        if self.query_func is not None:
            query_func = functools.partial(self.query_func, query)
        if self.exec_func is not None:
            exec_func = functools.partial(self.exec_func, query)

        if query_func is None or exec_func is None:
            queue = self.registry.lookup(query)
            if queue is not None:
                if queue.exhausted:
                    raise Exhausted(query)
                # Both statement paths share the queue position with query()/exec().
                if query_func is None:
                    query_func = lambda args: _rows_or_raise(_take(queue, query), query)  # noqa: E731
                if exec_func is None:
                    exec_func = lambda args: _result_or_raise(_take(queue, query), query)  # noqa: E731

        if query_func is None and exec_func is None:
            raise QueryNotStubbed(query)
        return Statement(query, query_func, exec_func)

    def query(self, query: str, args: Any = ()) -> Rows:
        if self.query_func is not None:
            return self.query_func(query, args)
        return _rows_or_raise(self.registry.consult(query), query)

    def exec(self, query: str, args: Any = ()) -> Result:
        if self.exec_func is not None:
            return self.exec_func(query, args)
        queue = self.registry.lookup(query)
        if queue is None:
            raise ExecNotStubbed(query)
        return _result_or_raise(_take(queue, query), query)

    def run(self, query: str, args: Any = ()) -> Rows | Result:
        """Answer a statement without knowing up front whether it returns rows."""
        if self.query_func is not None and self.exec_func is not None:
            if returns_rows(query):
                return self.query_func(query, args)
            return self.exec_func(query, args)
        if self.query_func is not None:
            return self.query_func(query, args)
        if self.exec_func is not None:
            return self.exec_func(query, args)

        entry = self.registry.consult(query)
        if isinstance(entry, RowsStub):
            return entry.rows.clone()
        if isinstance(entry, ResultStub):
            return entry.result
        raise entry.error

    def begin(self) -> Transaction:
        return Transaction()

    def close(self) -> None:
        # Shared by every open(); closing must not invalidate it.
        pass

    # PEP 249

    def cursor(self) -> Cursor:
        return Cursor(self)

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Connection(stubbed_queries={len(self.registry)}, "
            f"query_func={self.query_func is not None}, exec_func={self.exec_func is not None})"
        )


def _bind_args(parameters: Any) -> Any:
    if parameters is None:
        return ()
    if isinstance(parameters, Mapping):
        return dict(parameters)
    if isinstance(parameters, (str, bytes)) or not isinstance(parameters, Sequence):
        raise ProgrammingError("parameters must be a sequence or a mapping")
    return tuple(parameters)


class Cursor:
    """PEP 249 cursor over ``Connection.run``."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.arraysize = 1
        self._closed = False
        self._reset()

    def _reset(self) -> None:
        self._rows: Rows | None = None
        self.description: list[tuple[Any, ...]] | None = None
        self.rowcount = -1
        self.lastrowid: int | None = None

    def _check_open(self) -> None:
        if self._closed:
            raise InterfaceError("cursor is closed")

    def execute(self, operation: str, parameters: Any = None) -> Cursor:
        self._check_open()
        self._reset()
        outcome = self.connection.run(operation, _bind_args(parameters))
        if isinstance(outcome, Rows):
            self._rows = outcome
            self.description = outcome.description
        elif isinstance(outcome, Result):
            self.rowcount = outcome.rows_affected
            self.lastrowid = outcome.last_insert_id
        else:
            raise InterfaceError(
                f"expected Rows or Result for {operation!r}, got {type(outcome).__name__}"
            )
        return self

    def executemany(self, operation: str, seq_of_parameters: Iterable[Any]) -> Cursor:
        self._check_open()
        total = 0
        for parameters in seq_of_parameters:
            self.execute(operation, parameters)
            if self.rowcount > 0:
                total += self.rowcount
        self.rowcount = total
        return self

    def _result_set(self) -> Rows:
        self._check_open()
        if self._rows is None:
            raise ProgrammingError("no result set; execute a row-returning statement first")
        return self._rows

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._result_set().next()

    def fetchmany(self, size: int | None = None) -> list[tuple[Any, ...]]:
        rows = self._result_set()
        out = []
        for _ in range(self.arraysize if size is None else size):
            row = rows.next()
            if row is None:
                break
            out.append(row)
        return out

    def fetchall(self) -> list[tuple[Any, ...]]:
        return self._result_set().remaining()

    def setinputsizes(self, sizes: Any) -> None:
        pass

    def setoutputsize(self, size: Any, column: Any = None) -> None:
        pass

    def close(self) -> None:
        if self._rows is not None:
            self._rows.close()
        self._closed = True

    def __iter__(self) -> Cursor:
        return self

    def __next__(self) -> tuple[Any, ...]:
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row
