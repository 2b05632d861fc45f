"""
Profile persistence (raw SQL).

The profile table holds a single row with the fixed id 1.
"""

from __future__ import annotations

from typing import Any

from meapi.core import jsontext
from meapi.core.db import Store

PROFILE_ID = 1


async def count_profiles(store: Store) -> int:
    row = await store.fetch_one("SELECT COUNT(*) AS cnt FROM profile")
    return int(row["cnt"]) if row is not None else 0


async def get_profile(store: Store) -> dict[str, Any] | None:
    row = await store.fetch_one(
        """
        SELECT id, name, email, education, links_json
        FROM profile
        WHERE id = $1
        """,
        PROFILE_ID,
    )
    if row is None:
        return None
    return {
        "name": row["name"],
        "email": row["email"],
        "education": row["education"],
        "links": jsontext.load_mapping(row.get("links_json"), column="profile.links_json"),
    }


async def insert_profile(
    store: Store,
    *,
    name: str,
    email: str,
    education: str,
    links: dict[str, Any] | None = None,
) -> None:
    await store.execute(
        """
        INSERT INTO profile (id, name, email, education, links_json)
        VALUES ($1, $2, $3, $4, $5)
        """,
        PROFILE_ID,
        name,
        email,
        education,
        jsontext.dump_mapping(links or {}),
    )


async def delete_profile(store: Store) -> int:
    return await store.execute("DELETE FROM profile WHERE id = $1", PROFILE_ID)
