"""Materialised row cursor with one-row push-back.

Group-boundary detection reads a row, sometimes discovers it belongs to
the next aggregate, and has to hand it back.  Driver cursors are not
reliably scrollable, so rows are fetched up front and walked by index.

    cursor = RowCursor(rows)
    while not cursor.exhausted:
        row = cursor.next()
        if belongs_to_next_group(row):
            cursor.push_back()
            break
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

Row = Mapping[str, Any]


class RowCursor:
    """Forward cursor over an ordered sequence of rows."""

    def __init__(self, rows: Sequence[Row]) -> None:
        self._rows = rows
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._rows)

    @property
    def position(self) -> int:
        return self._index

    def peek(self) -> Row | None:
        """Current row without consuming it (None at the end)."""
        if self.exhausted:
            return None
        return self._rows[self._index]

    def next(self) -> Row:
        """Consume and return the current row."""
        if self.exhausted:
            raise IndexError("cursor exhausted")
        row = self._rows[self._index]
        self._index += 1
        return row

    def push_back(self) -> None:
        """Undo the last ``next()``."""
        if self._index == 0:
            raise ValueError("nothing to push back")
        self._index -= 1

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"RowCursor(position={self._index}, rows={len(self._rows)})"
