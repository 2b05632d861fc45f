"""
Project listing with an optional exact-tag filter.
"""

from __future__ import annotations

from typing import Any

from meapi.core.db import Store

from . import repository


def has_tag(project: dict[str, Any], skill: str) -> bool:
    """
    Case-insensitive exact match against each tag (not a substring match).
    """
    wanted = skill.lower()
    return any(str(tag).lower() == wanted for tag in project.get("skills") or [])


async def list_projects(store: Store, skill: str | None = None) -> list[dict[str, Any]]:
    projects = await repository.list_projects(store, newest_first=True)
    if skill:
        projects = [p for p in projects if has_tag(p, skill)]
    return projects
