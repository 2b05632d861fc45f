"""
Work history persistence (raw SQL).

Dates are opaque strings; ordering by start_date is plain text ordering.
"""

from __future__ import annotations

from meapi.core.db import Store

_COLUMNS = "company, role, start_date, end_date, description"


async def list_by_start_date(store: Store) -> list[dict]:
    return await store.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM work
        ORDER BY start_date ASC, id ASC
        """
    )


async def list_all(store: Store) -> list[dict]:
    return await store.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM work
        ORDER BY id ASC
        """
    )


async def insert_work(
    store: Store,
    *,
    company: str | None,
    role: str | None,
    start_date: str | None,
    end_date: str | None,
    description: str | None,
) -> None:
    await store.execute(
        """
        INSERT INTO work (company, role, start_date, end_date, description)
        VALUES ($1, $2, $3, $4, $5)
        """,
        company,
        role,
        start_date,
        end_date,
        description,
    )


async def delete_all(store: Store) -> int:
    return await store.execute("DELETE FROM work")
