"""
PEP 249 module interface of the fake driver.

``connect()`` goes through ``stubdb.driver.default_driver``, so stubs and
overrides registered with the ``stubdb`` functions answer every connection.
"""

from __future__ import annotations

import datetime

from . import driver
from .connection import Connection, Cursor
from .exc import (
    DatabaseError,
    DataError,
    Error,
    IntegrityError,
    InterfaceError,
    InternalError,
    NotSupportedError,
    OperationalError,
    ProgrammingError,
    Warning,
)

apilevel = "2.0"
# Threads may share the module, but not connections.
threadsafety = 1
paramstyle = "qmark"

Date = datetime.date
Time = datetime.time
Timestamp = datetime.datetime
Binary = bytes


def DateFromTicks(ticks: float) -> datetime.date:
    return datetime.date.fromtimestamp(ticks)


def TimeFromTicks(ticks: float) -> datetime.time:
    return datetime.datetime.fromtimestamp(ticks).time()


def TimestampFromTicks(ticks: float) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(ticks)


class _DBAPITypeObject:
    def __init__(self, *values: str):
        self.values = frozenset(values)

    def __eq__(self, other: object) -> bool:
        return other in self.values

    def __hash__(self) -> int:
        return hash(self.values)


STRING = _DBAPITypeObject("STRING", "TEXT", "VARCHAR")
BINARY = _DBAPITypeObject("BINARY", "BLOB")
NUMBER = _DBAPITypeObject("NUMBER", "INTEGER", "NUMERIC")
DATETIME = _DBAPITypeObject("DATETIME", "TIMESTAMP", "DATE", "TIME")
ROWID = _DBAPITypeObject("ROWID")


def connect(dsn: str = "", **kwargs: object) -> Connection:
    # Extra connection options are ignored.
    return driver.default_driver.open(dsn)


__all__ = [
    "apilevel",
    "threadsafety",
    "paramstyle",
    "connect",
    "Connection",
    "Cursor",
    "Warning",
    "Error",
    "InterfaceError",
    "DatabaseError",
    "DataError",
    "OperationalError",
    "IntegrityError",
    "InternalError",
    "ProgrammingError",
    "NotSupportedError",
    "Date",
    "Time",
    "Timestamp",
    "DateFromTicks",
    "TimeFromTicks",
    "TimestampFromTicks",
    "Binary",
    "STRING",
    "BINARY",
    "NUMBER",
    "DATETIME",
    "ROWID",
]
