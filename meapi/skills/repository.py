"""
Skill persistence (raw SQL).

Names are unique as stored (case-sensitive). Inserting a name that already
exists is a no-op and leaves the existing score untouched.
"""

from __future__ import annotations

from meapi.core.db import Store


async def list_ranked(store: Store) -> list[dict]:
    return await store.fetch_all(
        """
        SELECT name, score
        FROM skills
        ORDER BY score DESC, name ASC
        """
    )


async def list_all(store: Store) -> list[dict]:
    return await store.fetch_all(
        """
        SELECT name, score
        FROM skills
        ORDER BY id ASC
        """
    )


async def count_skills(store: Store) -> int:
    row = await store.fetch_one("SELECT COUNT(*) AS cnt FROM skills")
    return int(row["cnt"]) if row is not None else 0


async def insert_skill(store: Store, name: str, *, score: int = 1) -> bool:
    """
    Returns False when the name was already present.
    """
    inserted = await store.execute(
        """
        INSERT INTO skills (name, score)
        VALUES ($1, $2)
        ON CONFLICT (name) DO NOTHING
        """,
        name,
        score,
    )
    return inserted > 0


async def delete_all(store: Store) -> int:
    return await store.execute("DELETE FROM skills")
