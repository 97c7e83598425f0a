"""Rebuild Person aggregates from flattened join rows.

The find queries join PEOPLE to its children, spouse and four address
roles in one statement, so a parent with *n* children arrives as *n* rows
(one row when it has none), each repeating the parent, address and spouse
columns.  Rows of one parent are contiguous.

One call to :meth:`GraphReconstructor.reconstruct` consumes exactly one
parent group from the cursor and returns its aggregate::

    rows:  P1×–   P2×C1   P2×C2   P2×C3
           └─ 1 ─┘└────────── 2 ────────┘

    reconstruct(cursor) → P1 (children=[])        cursor at row 1
    reconstruct(cursor) → P2 (children=[C1,C2,C3]) cursor exhausted

The first row of the next group is read, recognised by its different
parent identity and pushed back for the following call.

The spouse is hydrated one level deep: its scalar columns and its own
home/secondary addresses (under ``SPOUSE_HOME_``/``SPOUSE_SECONDARY_``),
never its spouse or children.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from peopledb.core.cursor import RowCursor
from peopledb.core.logging import get_logger
from peopledb.models.people import Person
from peopledb.repositories._columns import (
    CHILD_PREFIX,
    HOME_PREFIX,
    PARENT_PREFIX,
    SECONDARY_PREFIX,
    SPOUSE_HOME_PREFIX,
    SPOUSE_PREFIX,
    SPOUSE_SECONDARY_PREFIX,
    decode_address,
    decode_person,
)

logger = get_logger(__name__)


class GraphReconstructor:
    """Stateless grouping of join rows into Person aggregates."""

    def reconstruct(self, cursor: RowCursor) -> Person | None:
        """Consume one parent group and return its aggregate.

        Returns ``None`` only when the remaining rows carry no parent at all.
        A row whose parent ID is NULL ends the current group and is consumed.
        """
        parent: Person | None = None
        while not cursor.exhausted:
            row = cursor.next()
            candidate = decode_person(row, PARENT_PREFIX)
            if candidate is None:
                if parent is None:
                    continue
                break
            if parent is None:
                parent = candidate
            elif candidate.id != parent.id:
                cursor.push_back()
                break
            self._hydrate(parent, row)
        return parent

    # -- per-row hydration -------------------------------------------------

    def _hydrate(self, parent: Person, row: Mapping[str, Any]) -> None:
        # Associations repeat on every fan-out row; the first decode wins
        if parent.home_address is None:
            parent.home_address = decode_address(row, HOME_PREFIX)
        if parent.secondary_address is None:
            parent.secondary_address = decode_address(row, SECONDARY_PREFIX)
        if parent.spouse is None:
            parent.spouse = self._decode_spouse(row)

        child = decode_person(row, CHILD_PREFIX)
        if child is not None:
            if child.parent_id is None:
                child.parent_id = parent.id
            if not parent.add_child(child):
                logger.debug("duplicate_child_row", parent_id=parent.id, child_id=child.id)

    def _decode_spouse(self, row: Mapping[str, Any]) -> Person | None:
        spouse = decode_person(row, SPOUSE_PREFIX)
        if spouse is None:
            return None
        spouse.home_address = decode_address(row, SPOUSE_HOME_PREFIX)
        spouse.secondary_address = decode_address(row, SPOUSE_SECONDARY_PREFIX)
        return spouse
