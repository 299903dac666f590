from __future__ import annotations

import pytest

from stubdb.exc import Exhausted, NotStubbed
from stubdb.registry import ErrorStub, ResultStub, RowsStub, StubRegistry, query_hash, stub_entry
from stubdb.rows import Result, Rows


@pytest.mark.parametrize(
    "other",
    [
        "select * from users",
        "SELECT  *\n  FROM\tusers",
        "  Select *From Users  ",
    ],
)
def test_query_hash_ignores_case_and_whitespace(other):
    assert query_hash("SELECT * FROM users") == query_hash(other)


def test_query_hash_distinguishes_different_queries():
    assert query_hash("SELECT * FROM users") != query_hash("SELECT * FROM user")


def test_stub_entry_classifies_values():
    rows = Rows(["id"], [])
    err = RuntimeError("boom")

    assert stub_entry(rows) == RowsStub(rows)
    assert stub_entry(Result(1)) == ResultStub(Result(1))
    assert stub_entry(err) == ErrorStub(err)
    assert stub_entry(RowsStub(rows)) == RowsStub(rows)


def test_stub_entry_rejects_unknown_values():
    with pytest.raises(TypeError, match="invalid value for stub result"):
        stub_entry("not a result")
    with pytest.raises(TypeError):
        stub_entry(RuntimeError)


def test_stub_entry_respects_allowed_kinds():
    with pytest.raises(TypeError):
        stub_entry(Result(1), ("rows", "error"))
    with pytest.raises(TypeError):
        stub_entry(Rows(["id"], []), ("result", "error"))


def test_consult_returns_entries_in_order_then_exhausts():
    reg = StubRegistry()
    first = Rows(["id"], [[1]])
    err = RuntimeError("boom")
    reg.register("SELECT * FROM users", [first, err, Result(3)])

    assert reg.consult("select * from users") == RowsStub(first)
    assert reg.consult("SELECT * FROM users") == ErrorStub(err)
    assert reg.consult("SELECT *  FROM users") == ResultStub(Result(3))
    with pytest.raises(Exhausted, match="Exhausted stubs for query: SELECT \\* FROM users"):
        reg.consult("SELECT * FROM users")


def test_consult_unregistered_query():
    reg = StubRegistry()
    with pytest.raises(NotStubbed) as exc_info:
        reg.consult("SELECT 1")
    assert exc_info.value.query == "SELECT 1"
    assert str(exc_info.value) == "Query not stubbed: SELECT 1"


def test_register_appends_to_existing_queue():
    reg = StubRegistry()
    reg.register("DELETE FROM users", [Result(1)])
    reg.register("delete from users", [Result(2)])

    queue = reg.lookup("DELETE FROM users")
    assert queue is not None
    assert [e.result.rows_affected for e in queue.entries] == [1, 2]
    assert len(reg) == 1


def test_register_rejects_bad_value_without_partial_registration():
    reg = StubRegistry()
    with pytest.raises(TypeError):
        reg.register("SELECT 1", [Result(1), object()])
    assert "SELECT 1" not in reg


def test_queue_position_invariant():
    reg = StubRegistry()
    queue = reg.register("SELECT 1", [Result(1), Result(2)])

    assert queue.pos == 0
    reg.consult("SELECT 1")
    assert queue.pos == 1 and not queue.exhausted
    reg.consult("SELECT 1")
    assert queue.pos == 2 and queue.exhausted
    with pytest.raises(Exhausted):
        reg.consult("SELECT 1")
    assert queue.pos == 2


def test_clear():
    reg = StubRegistry()
    reg.register("SELECT 1", [Result(1)])
    reg.clear()
    assert len(reg) == 0
    assert reg.lookup("SELECT 1") is None
