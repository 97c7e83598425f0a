"""
CLI utility helpers: connection management and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from peopledb.core.connection import ConnectionInfo, create_connection
from peopledb.core.errors import PeopleDBError
from peopledb.core.logging import get_logger
from peopledb.core.settings import get_settings
from peopledb.models.people import Address, Person

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


# ── Connection helper ────────────────────────────────────────────────────


@contextmanager
def open_database(database: str | None = None, *, init_schema: bool = False) -> Iterator[tuple[Any, ConnectionInfo]]:
    """Open ``database`` (or ``PEOPLEDB_DATABASE_URL``) for one command; closed on exit.

    Commit and rollback stay with the command.
    """
    settings = get_settings()
    conn, info = create_connection(
        database or settings.database_url,
        init_schema=init_schema,
        echo=settings.echo_sql,
    )
    try:
        yield conn, info
    finally:
        conn.close()
        logger.debug("connection_closed", backend=info.backend)


def fail(error: PeopleDBError) -> None:
    """Report a domain error and exit with status 1."""
    logger.debug("command_failed", error=error)
    err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {error.message}")
    raise typer.Exit(code=1)


# ── Serialisation ────────────────────────────────────────────────────────


def address_to_dict(address: Address | None) -> dict[str, Any] | None:
    if address is None:
        return None
    return {
        "id": address.id,
        "street_address": address.street_address,
        "address2": address.address2,
        "city": address.city,
        "state": address.state,
        "postcode": address.postcode,
        "country": address.country,
        "county": address.county,
        "region": address.region.value,
    }


def person_to_dict(person: Person, *, depth: int = 1) -> dict[str, Any]:
    """Plain-dict view of a person.  Spouse and children stop at ``depth``."""
    data: dict[str, Any] = {
        "id": person.id,
        "first_name": person.first_name,
        "last_name": person.last_name,
        "date_of_birth": person.date_of_birth.isoformat() if person.date_of_birth else None,
        "salary": str(person.salary),
        "email": person.email,
        "parent_id": person.parent_id,
        "home_address": address_to_dict(person.home_address),
        "secondary_address": address_to_dict(person.secondary_address),
    }
    if depth > 0:
        data["spouse"] = person_to_dict(person.spouse, depth=0) if person.spouse else None
        data["children"] = [person_to_dict(c, depth=0) for c in person.children]
    return data


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_people(people: list[Person], *, title: str = "") -> None:
    """Render people as a Rich table (one row per aggregate)."""
    if not people:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in ("id", "name", "dob", "salary", "children", "spouse"):
        table.add_column(col, overflow="fold")
    for p in people:
        table.add_row(
            str(p.id),
            f"{p.first_name} {p.last_name}",
            p.date_of_birth.date().isoformat() if p.date_of_birth else "",
            str(p.salary),
            str(len(p.children)),
            str(p.spouse.id) if p.spouse else "",
        )
    console.print(table)


def print_person(person: Person) -> None:
    """Render a single aggregate as key-value pairs."""
    data = person_to_dict(person)
    console.print(f"[bold]{person.first_name} {person.last_name}[/bold]")
    for k, v in data.items():
        if k == "children":
            v = ", ".join(f"{c['id']}:{c['first_name']}" for c in v) or "-"
        elif k == "spouse" and v is not None:
            v = f"{v['id']}:{v['first_name']} {v['last_name']}"
        elif isinstance(v, dict):
            v = f"{v['street_address']}, {v['city']} ({v['region']})"
        console.print(f"  [cyan]{k}[/cyan]: {v}")
