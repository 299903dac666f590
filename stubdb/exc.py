"""
DB-API 2.0 exception hierarchy plus the stub lookup failures.

The lookup failures subclass ``ProgrammingError`` so that SQLAlchemy wraps them
like any other driver error (``sqlalchemy.exc.ProgrammingError`` with ``.orig``).
"""

from __future__ import annotations


class Warning(Exception):  # noqa: A001
    pass


class Error(Exception):
    pass


class InterfaceError(Error):
    pass


class DatabaseError(Error):
    pass


class DataError(DatabaseError):
    pass


class OperationalError(DatabaseError):
    pass


class IntegrityError(DatabaseError):
    pass


class InternalError(DatabaseError):
    pass


class ProgrammingError(DatabaseError):
    pass


class NotSupportedError(DatabaseError):
    pass


class NotStubbed(ProgrammingError):
    """No stub queue is registered for the query."""

    prefix = "Query not stubbed"

    def __init__(self, query: str):
        super().__init__(f"{self.prefix}: {query}")
        self.query = query


class ExecNotStubbed(NotStubbed):
    prefix = "Exec call not stubbed"


class QueryNotStubbed(NotStubbed):
    """Raised by ``prepare`` when neither query nor exec could be resolved."""


class Exhausted(ProgrammingError):
    """Every stub registered for the query has already been consumed."""

    def __init__(self, query: str):
        super().__init__(f"Exhausted stubs for query: {query}")
        self.query = query
