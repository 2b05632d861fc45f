"""
Project persistence (raw SQL).

`skills_json` / `links_json` are JSON text; rows leave this module with
structured `skills` (list) and `links` (dict) values.
"""

from __future__ import annotations

from typing import Any

from meapi.core import jsontext
from meapi.core.db import Store


def _row_to_project(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "title": row["title"],
        "description": row["description"],
        "skills": jsontext.load_list(row.get("skills_json"), column="projects.skills_json"),
        "links": jsontext.load_mapping(row.get("links_json"), column="projects.links_json"),
    }


async def list_projects(store: Store, *, newest_first: bool = True) -> list[dict[str, Any]]:
    order = "DESC" if newest_first else "ASC"
    rows = await store.fetch_all(
        f"""
        SELECT id, title, description, skills_json, links_json
        FROM projects
        ORDER BY id {order}
        """
    )
    return [_row_to_project(r) for r in rows]


async def insert_project(
    store: Store,
    *,
    title: str | None,
    description: str | None,
    skills: list[Any] | None = None,
    links: dict[str, Any] | None = None,
) -> int:
    row = await store.fetch_one(
        """
        INSERT INTO projects (title, description, skills_json, links_json)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        title,
        description,
        jsontext.dump_list(skills or []),
        jsontext.dump_mapping(links or {}),
    )
    if row is None:
        raise RuntimeError("Failed to insert project.")
    return int(row["id"])


async def delete_all(store: Store) -> int:
    return await store.execute("DELETE FROM projects")
