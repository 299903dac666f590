from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Result:
    """Outcome of a statement that does not return rows."""

    rows_affected: int = 0
    last_insert_id: int | None = None


class Rows:
    """
    In-memory, forward-only result set.

    Row data is immutable once built, so ``clone()`` can hand out any number of
    independent cursors over the same rows.
    """

    def __init__(self, columns: Iterable[str], rows: Iterable[Sequence[Any]] = ()):
        self._columns: tuple[str, ...] = tuple(columns)
        data = tuple(tuple(r) for r in rows)
        for i, row in enumerate(data):
            if len(row) != len(self._columns):
                raise ValueError(
                    f"row {i} has {len(row)} values, expected {len(self._columns)}"
                )
        self._rows: tuple[tuple[Any, ...], ...] = data
        self._pos = 0
        self._closed = False

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def description(self) -> list[tuple[Any, ...]]:
        # name, type_code, display_size, internal_size, precision, scale, null_ok
        return [(name, None, None, None, None, None, None) for name in self._columns]

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pos(self) -> int:
        return self._pos

    def next(self) -> tuple[Any, ...] | None:
        """Return the next row, or ``None`` when exhausted or closed."""
        if self._closed or self._pos >= len(self._rows):
            return None
        row = self._rows[self._pos]
        self._pos += 1
        return row

    def remaining(self) -> list[tuple[Any, ...]]:
        if self._closed:
            return []
        rest = list(self._rows[self._pos :])
        self._pos = len(self._rows)
        return rest

    def close(self) -> None:
        self._closed = True

    def clone(self) -> Rows:
        copy = Rows.__new__(Rows)
        copy._columns = self._columns
        copy._rows = self._rows
        copy._pos = 0
        copy._closed = False
        return copy

    def __iter__(self) -> Rows:
        return self

    def __next__(self) -> tuple[Any, ...]:
        row = self.next()
        if row is None:
            raise StopIteration
        return row

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Rows(columns={list(self._columns)!r}, rows={len(self._rows)}, pos={self._pos})"
