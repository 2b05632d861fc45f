"""
Skill ranking.
"""

from __future__ import annotations

from meapi.core.db import Store

from . import repository


async def list_skills(store: Store) -> list[dict]:
    """
    All skills, score descending, then name ascending.
    """
    rows = await repository.list_ranked(store)
    return [{"name": r["name"], "score": int(r["score"])} for r in rows]
