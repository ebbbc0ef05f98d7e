"""
Dialect-aware INSERT ... ON CONFLICT helpers.

PostgreSQL in production, SQLite in tests: both support the same
ON CONFLICT DO UPDATE shape through their SQLAlchemy dialects.
"""
from typing import Iterable, Sequence

from sqlalchemy import Table, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def insert_for(session: AsyncSession, table: Table):
    """Return the dialect-specific insert() for the session's bind."""
    dialect = session.get_bind().dialect.name
    try:
        return _INSERT_BY_DIALECT[dialect](table)
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported on dialect '{dialect}'") from None


def upsert_overwrite(
    session: AsyncSession,
    table: Table,
    values: dict,
    index_elements: Sequence[str],
    update_columns: Iterable[str],
):
    """
    INSERT ... ON CONFLICT DO UPDATE that overwrites update_columns
    with the incoming values.
    """
    stmt = insert_for(session, table).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=list(index_elements),
        set_={column: stmt.excluded[column] for column in update_columns},
    )


def upsert_coalesce(
    session: AsyncSession,
    table: Table,
    values: dict,
    index_elements: Sequence[str],
    merge_columns: Iterable[str],
    overwrite_columns: Iterable[str] = (),
):
    """
    INSERT ... ON CONFLICT DO UPDATE with "last non-null wins" merge:
    each merge column becomes COALESCE(incoming, existing).
    """
    stmt = insert_for(session, table).values(**values)
    set_ = {
        column: func.coalesce(stmt.excluded[column], table.c[column])
        for column in merge_columns
    }
    for column in overwrite_columns:
        set_[column] = stmt.excluded[column]
    return stmt.on_conflict_do_update(index_elements=list(index_elements), set_=set_)
