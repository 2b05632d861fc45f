"""
Free-text search across projects, skills and work history.

Matching is a case-insensitive substring test; every match is returned, in
insertion order, with no ranking and no limit. An empty query returns empty
results without touching the store.
"""

from __future__ import annotations

from typing import Any

from meapi.core.db import Store
from meapi.projects import repository as projects_repository
from meapi.skills import repository as skills_repository
from meapi.work import repository as work_repository


def empty_results() -> dict[str, list]:
    return {"projects": [], "skills": [], "work": []}


def _project_matches(project: dict[str, Any], q: str) -> bool:
    text = f"{project.get('title') or ''} {project.get('description') or ''}".lower()
    if q in text:
        return True
    return any(q in str(tag).lower() for tag in project.get("skills") or [])


def _skill_matches(skill: dict[str, Any], q: str) -> bool:
    return q in str(skill.get("name") or "").lower()


def _work_matches(entry: dict[str, Any], q: str) -> bool:
    text = f"{entry.get('company') or ''} {entry.get('role') or ''} {entry.get('description') or ''}"
    return q in text.lower()


async def search(store: Store, query: str | None) -> dict[str, list]:
    q = (query or "").lower()
    if not q:
        return empty_results()

    projects = await projects_repository.list_projects(store, newest_first=False)
    skills = await skills_repository.list_all(store)
    work = await work_repository.list_all(store)

    return {
        "projects": [p for p in projects if _project_matches(p, q)],
        "skills": [s for s in skills if _skill_matches(s, q)],
        "work": [w for w in work if _work_matches(w, q)],
    }
