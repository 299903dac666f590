"""
The fake driver: owns the shared connection, the open override and the
timestamp parsing configuration.

Tests normally use the module-level functions re-exported by ``stubdb``, which
act on ``default_driver`` (the instance behind ``stubdb.dbapi.connect`` and the
``stubdb://`` SQLAlchemy URL). A private ``StubDriver()`` is useful when the code
under test accepts a DB-API ``connect`` callable.

Not thread safe: stubs are consumed in call order and tests sharing a driver
must run sequentially and call ``reset()`` in between.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import Any

from .connection import Connection, ExecFunc, QueryFunc
from .registry import stub_entry
from .rows import Result, Rows

logger = logging.getLogger(__name__)

# RFC 3339, e.g. 2023-01-02T15:04:05Z or 2023-01-02T15:04:05+02:00
DEFAULT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
# RFC 3339 with fractional seconds, e.g. 2023-01-02T15:04:05.123Z
_FRACTIONAL_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

OpenFunc = Callable[[str], Connection]


class StubDriver:
    def __init__(self) -> None:
        self._conn: Connection | None = Connection()
        self.open_func: OpenFunc | None = None
        self.time_parsing = False
        self.time_format = DEFAULT_TIME_FORMAT

    # Connections

    def open(self, dsn: str = "") -> Connection:
        if self.open_func is not None:
            return self.open_func(dsn)
        return self.connection()

    def connection(self) -> Connection:
        # Always the shared connection, even when open_func is set.
        if self._conn is None:
            self._conn = Connection()
        return self._conn

    def reset(self) -> None:
        """Drop every stub and override. Time parsing settings are kept."""
        self._conn = Connection()
        self.open_func = None
        logger.debug("Reset stub driver")

    # Stubs

    def stub_query(self, query: str, *results: Rows | BaseException) -> None:
        """
        Queue ``results`` for ``query``; each call consumes the next one.

        Rows are returned, exceptions raised. Matching ignores case and
        whitespace.
        """
        entries = [stub_entry(r, ("rows", "error")) for r in results]
        self.connection().registry.register(query, entries)

    def stub_query_error(self, query: str, err: BaseException) -> None:
        self.stub_query(query, err)

    def stub_exec(self, query: str, *results: Result | BaseException) -> None:
        entries = [stub_entry(r, ("result", "error")) for r in results]
        self.connection().registry.register(query, entries)

    def stub_exec_error(self, query: str, err: BaseException) -> None:
        self.stub_exec(query, err)

    # Overrides

    def set_query_func(self, f: Callable[[str], Rows]) -> None:
        self.set_query_with_args_func(lambda query, args: f(query))

    def set_query_with_args_func(self, f: QueryFunc) -> None:
        self.connection().query_func = f
        logger.debug("Installed query override %r", f)

    def set_exec_func(self, f: Callable[[str], Result]) -> None:
        self.set_exec_with_args_func(lambda query, args: f(query))

    def set_exec_with_args_func(self, f: ExecFunc) -> None:
        self.connection().exec_func = f
        logger.debug("Installed exec override %r", f)

    def set_open_func(self, f: OpenFunc) -> None:
        self.open_func = f

    # Configuration

    def enable_time_parsing(self, flag: bool) -> None:
        self.time_parsing = flag

    def enable_time_parsing_with_format(self, fmt: str) -> None:
        self.time_parsing = True
        self.time_format = fmt

    # Row builders

    def rows_from_slice(self, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> Rows:
        return Rows(columns, rows)

    def rows_from_csv_string(self, columns: Sequence[str], s: str) -> Rows:
        """
        Build rows from CSV text.

        Fields are stripped. With time parsing enabled, fields matching the
        configured format become ``datetime`` values. Reading stops at the first
        malformed line or at the first record whose field count differs from
        the first record's; rows are padded with ``None`` or truncated to fit
        ``columns``.
        """
        reader = csv.reader(io.StringIO(s.strip()), skipinitialspace=True, strict=True)
        data: list[list[Any]] = []
        width: int | None = None
        while True:
            try:
                record = next(reader)
            except (StopIteration, csv.Error):
                break
            if not record:
                continue
            if width is None:
                width = len(record)
            elif len(record) != width:
                break
            row: list[Any] = [None] * len(columns)
            for i, v in enumerate(record[: len(columns)]):
                row[i] = self._convert(v.strip())
            data.append(row)
        return self.rows_from_slice(columns, data)

    def _convert(self, value: str) -> Any:
        if not self.time_parsing:
            return value
        formats = [self.time_format]
        if self.time_format == DEFAULT_TIME_FORMAT:
            formats.append(_FRACTIONAL_TIME_FORMAT)
        for fmt in formats:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        return value

    def __repr__(self) -> str:
        return f"StubDriver(conn={self._conn!r}, time_parsing={self.time_parsing})"


default_driver = StubDriver()


def open(dsn: str = "") -> Connection:  # noqa: A001
    return default_driver.open(dsn)


def conn() -> Connection:
    """Return the shared connection holding the stubs of the default driver."""
    return default_driver.connection()


def reset() -> None:
    default_driver.reset()


def stub_query(query: str, *results: Rows | BaseException) -> None:
    default_driver.stub_query(query, *results)


def stub_query_error(query: str, err: BaseException) -> None:
    default_driver.stub_query_error(query, err)


def stub_exec(query: str, *results: Result | BaseException) -> None:
    default_driver.stub_exec(query, *results)


def stub_exec_error(query: str, err: BaseException) -> None:
    default_driver.stub_exec_error(query, err)


def set_query_func(f: Callable[[str], Rows]) -> None:
    default_driver.set_query_func(f)


def set_query_with_args_func(f: QueryFunc) -> None:
    default_driver.set_query_with_args_func(f)


def set_exec_func(f: Callable[[str], Result]) -> None:
    default_driver.set_exec_func(f)


def set_exec_with_args_func(f: ExecFunc) -> None:
    default_driver.set_exec_with_args_func(f)


def set_open_func(f: OpenFunc) -> None:
    default_driver.set_open_func(f)


def enable_time_parsing(flag: bool) -> None:
    default_driver.enable_time_parsing(flag)


def enable_time_parsing_with_format(fmt: str) -> None:
    default_driver.enable_time_parsing_with_format(fmt)


def rows_from_slice(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> Rows:
    return default_driver.rows_from_slice(columns, rows)


def rows_from_csv_string(columns: Sequence[str], s: str) -> Rows:
    return default_driver.rows_from_csv_string(columns, s)
