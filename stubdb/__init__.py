"""
stubdb

Programmable fake database driver for testing code that issues SQL.

Queries are answered from stubs registered ahead of time (rows, mutation
results or exceptions, consumed in order) or from override functions. The
driver is exposed as a PEP 249 module (``stubdb.dbapi``) and as a SQLAlchemy
dialect registered under the name:

- stubdb  (URL: ``stubdb://``)

Example::

    import stubdb
    from sqlalchemy import create_engine, text

    stubdb.stub_query(
        "SELECT id, name FROM users",
        stubdb.rows_from_csv_string(["id", "name"], "1,tim\\n2,joe"),
    )
    with create_engine("stubdb://").connect() as conn:
        rows = conn.execute(text("select id, name from users")).all()
"""

from sqlalchemy.dialects import registry as _dialect_registry

from .connection import Connection, Cursor, Statement, Transaction
from .dialect import StubDialect
from .driver import (
    StubDriver,
    conn,
    default_driver,
    enable_time_parsing,
    enable_time_parsing_with_format,
    open,
    reset,
    rows_from_csv_string,
    rows_from_slice,
    set_exec_func,
    set_exec_with_args_func,
    set_open_func,
    set_query_func,
    set_query_with_args_func,
    stub_exec,
    stub_exec_error,
    stub_query,
    stub_query_error,
)
from .exc import Exhausted, ExecNotStubbed, NotStubbed, QueryNotStubbed
from .registry import ErrorStub, ResultStub, RowsStub, StubRegistry, query_hash
from .rows import Result, Rows

# Keep in sync with pyproject.toml version for now (KISS).
__version__ = "0.1.0"

# Allow runtime registration without requiring entrypoints (useful for tests/dev).
_dialect_registry.register("stubdb", "stubdb.dialect", "StubDialect")

__all__ = [
    "Connection",
    "Cursor",
    "Statement",
    "Transaction",
    "StubDialect",
    "StubDriver",
    "default_driver",
    "conn",
    "open",
    "reset",
    "stub_query",
    "stub_query_error",
    "stub_exec",
    "stub_exec_error",
    "set_query_func",
    "set_query_with_args_func",
    "set_exec_func",
    "set_exec_with_args_func",
    "set_open_func",
    "enable_time_parsing",
    "enable_time_parsing_with_format",
    "rows_from_slice",
    "rows_from_csv_string",
    "NotStubbed",
    "ExecNotStubbed",
    "QueryNotStubbed",
    "Exhausted",
    "RowsStub",
    "ResultStub",
    "ErrorStub",
    "StubRegistry",
    "query_hash",
    "Result",
    "Rows",
    "__version__",
]
