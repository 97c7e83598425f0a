"""
Root Typer application for the peopledb CLI.

Every command opens its own connection (``--db`` or
``PEOPLEDB_DATABASE_URL``) and commits after writes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation

import typer
from typer import Typer

from peopledb.cli.utils import console, fail, open_database, print_json, print_people, print_person, person_to_dict
from peopledb.core.errors import PeopleDBError
from peopledb.core.logging import configure_logging
from peopledb.core.schema import create_schema
from peopledb.core.settings import get_settings
from peopledb.core.timestamps import to_utc
from peopledb.models.people import Address, Person, Region
from peopledb.repositories.people import PeopleRepository

app = Typer(
    name="peopledb",
    help="peopledb: people, addresses and families over SQL.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

DbOption = typer.Option(None, "--db", "-d", help="Database URL or SQLite path")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from peopledb import __version__

        typer.echo(f"peopledb {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """peopledb CLI: create, inspect and delete people."""
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_format=settings.log_json,
        service="peopledb-cli",
        cache_loggers=False,
    )


# ── Parsing helpers ──────────────────────────────────────────────────────


def _parse_dob(value: str) -> datetime:
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError as exc:
        raise typer.BadParameter(f"not an ISO date/time: {value!r}", param_hint="DOB") from exc


def _parse_salary(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise typer.BadParameter(f"not a decimal amount: {value!r}", param_hint="--salary") from exc


def _parse_region(value: str) -> Region:
    try:
        return Region.parse(value)
    except ValueError as exc:
        choices = ", ".join(r.value for r in Region)
        raise typer.BadParameter(f"expected one of {choices}", param_hint="--region") from exc


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("init-db")
def init_db(database: str | None = DbOption) -> None:
    """Create the PEOPLE and ADDRESSES tables (idempotent)."""
    with open_database(database) as (conn, info):
        tables = create_schema(conn, info.dialect)
    console.print(f"Initialised {', '.join(tables)} on {info.backend}")


@app.command()
def add(
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    dob: str = typer.Argument(..., help="Date of birth, ISO 8601 (offset optional, UTC assumed)"),
    salary: str = typer.Option("0", "--salary", help="Salary amount"),
    email: str | None = typer.Option(None, "--email"),
    street: str | None = typer.Option(None, "--street", help="Home street address"),
    city: str = typer.Option("", "--city"),
    state: str = typer.Option("", "--state"),
    postcode: str = typer.Option("", "--postcode"),
    country: str = typer.Option("", "--country"),
    county: str = typer.Option("", "--county"),
    region: str = typer.Option(Region.CENTRAL.value, "--region"),
    spouse_id: int | None = typer.Option(None, "--spouse-id", help="Existing person to reference as spouse"),
    parent_id: int | None = typer.Option(None, "--parent-id", help="Existing person to attach to as a child"),
    database: str | None = DbOption,
) -> None:
    """Save a new person, optionally with a home address."""
    person = Person(
        first_name,
        last_name,
        _parse_dob(dob),
        salary=_parse_salary(salary),
        email=email,
        parent_id=parent_id,
    )
    if street:
        person.home_address = Address(
            street_address=street,
            city=city,
            state=state,
            postcode=postcode,
            country=country,
            county=county,
            region=_parse_region(region),
        )

    with open_database(database) as (conn, info):
        repo = PeopleRepository(conn, info.dialect)
        try:
            if spouse_id is not None:
                person.spouse = repo.find_by_id(spouse_id)
                if person.spouse is None:
                    raise typer.BadParameter(f"no person with id {spouse_id}", param_hint="--spouse-id")
            repo.save(person)
            repo.commit()
        except PeopleDBError as e:
            repo.rollback()
            fail(e)
    console.print(f"Saved person {person.id}")


@app.command()
def show(
    person_id: int = typer.Argument(..., help="Person ID"),
    database: str | None = DbOption,
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show one person with addresses, spouse and children."""
    with open_database(database) as (conn, info):
        try:
            person = PeopleRepository(conn, info.dialect).find_by_id(person_id)
        except PeopleDBError as e:
            fail(e)
    if person is None:
        console.print(f"[dim]No person with id {person_id}.[/dim]")
        raise typer.Exit(code=1)
    if json_out:
        print_json(person_to_dict(person))
    else:
        print_person(person)


@app.command("list")
def list_people(
    database: str | None = DbOption,
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """List every person aggregate, ordered by ID."""
    with open_database(database) as (conn, info):
        try:
            people = PeopleRepository(conn, info.dialect).find_all()
        except PeopleDBError as e:
            fail(e)
    if json_out:
        print_json([person_to_dict(p) for p in people])
    else:
        print_people(people, title="People")


@app.command()
def count(database: str | None = DbOption) -> None:
    """Print the number of people."""
    with open_database(database) as (conn, info):
        try:
            total = PeopleRepository(conn, info.dialect).count()
        except PeopleDBError as e:
            fail(e)
    typer.echo(total)


@app.command()
def delete(
    person_ids: list[int] = typer.Argument(..., help="One or more person IDs"),
    database: str | None = DbOption,
) -> None:
    """Delete people by ID (several IDs are deleted as one batch)."""
    with open_database(database) as (conn, info):
        repo = PeopleRepository(conn, info.dialect)
        try:
            people = []
            for person_id in person_ids:
                person = repo.find_by_id(person_id)
                if person is None:
                    raise typer.BadParameter(f"no person with id {person_id}", param_hint="PERSON_IDS")
                people.append(person)
            repo.delete(*people)
            repo.commit()
        except PeopleDBError as e:
            repo.rollback()
            fail(e)
    console.print(f"Deleted {len(people)} person(s)")


if __name__ == "__main__":  # pragma: no cover
    app()
