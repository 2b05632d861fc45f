"""
Profile aggregate: read and replace.

Replace semantics:
- the profile row is always deleted and re-inserted (missing fields -> "")
- skills / work / projects are delete-all-then-insert, but only when the
  payload carries that key as a list; an omitted key leaves the table as is
- each step commits on its own unless atomic mode is on, so a failure half
  way leaves a mix of old and new collections
"""

from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Any

from meapi.core import settings
from meapi.core.db import Store
from meapi.projects import repository as projects_repository
from meapi.skills import repository as skills_repository
from meapi.work import repository as work_repository

from . import repository, schemas

logger = logging.getLogger(__name__)


async def get_profile(store: Store) -> dict[str, Any]:
    profile = await repository.get_profile(store) or {}
    skills = await skills_repository.list_ranked(store)
    work = await work_repository.list_by_start_date(store)
    projects = await projects_repository.list_projects(store, newest_first=False)
    return {
        "name": profile.get("name"),
        "email": profile.get("email"),
        "education": profile.get("education"),
        "links": profile.get("links", {}),
        "skills": skills,
        "work": work,
        "projects": projects,
    }


def _text(value: Any) -> str:
    if not value:
        return ""
    return value if isinstance(value, str) else str(value)


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _score(value: Any) -> int:
    if not value or isinstance(value, bool):
        return 1
    try:
        return int(value)
    except (TypeError, ValueError):
        return 1


def _skill_entry(item: Any) -> schemas.SkillEntry | None:
    if isinstance(item, str):
        return schemas.SkillEntry(name=item, score=1) if item else None
    if isinstance(item, dict):
        name = _text(item.get("name"))
        if not name:
            return None
        return schemas.SkillEntry(name=name, score=_score(item.get("score")))
    return None


def _work_entry(item: Any) -> schemas.WorkEntry:
    fields = item if isinstance(item, dict) else {}
    return schemas.WorkEntry(
        company=_text(fields.get("company")),
        role=_text(fields.get("role")),
        start_date=_text(fields.get("start_date")),
        end_date=_text(fields.get("end_date")),
        description=_text(fields.get("description")),
    )


def _project_entry(item: Any) -> schemas.ProjectEntry:
    fields = item if isinstance(item, dict) else {}
    tags = fields.get("skills")
    return schemas.ProjectEntry(
        title=_text(fields.get("title")),
        description=_text(fields.get("description")),
        skills=list(tags) if isinstance(tags, list) else [],
        links=_mapping(fields.get("links")),
    )


def normalize_payload(payload: Any) -> schemas.ProfileReplacement:
    """
    Lenient: nothing in a payload is ever rejected, only defaulted.
    """
    body = payload if isinstance(payload, dict) else {}

    skills: list[schemas.SkillEntry] | None = None
    if isinstance(body.get("skills"), list):
        skills = []
        for item in body["skills"]:
            entry = _skill_entry(item)
            if entry is None:
                logger.warning("replace_skill_ignored value=%r", item)
                continue
            skills.append(entry)

    work = [_work_entry(w) for w in body["work"]] if isinstance(body.get("work"), list) else None
    projects = (
        [_project_entry(p) for p in body["projects"]] if isinstance(body.get("projects"), list) else None
    )

    return schemas.ProfileReplacement(
        profile=schemas.ProfileFields(
            name=_text(body.get("name")),
            email=_text(body.get("email")),
            education=_text(body.get("education")),
            links=_mapping(body.get("links")),
        ),
        skills=skills,
        work=work,
        projects=projects,
    )


async def _apply(store: Store, replacement: schemas.ProfileReplacement) -> None:
    await repository.delete_profile(store)
    await repository.insert_profile(
        store,
        name=replacement.profile.name,
        email=replacement.profile.email,
        education=replacement.profile.education,
        links=replacement.profile.links,
    )

    if replacement.skills is not None:
        await skills_repository.delete_all(store)
        for skill in replacement.skills:
            # Duplicate names in one payload: first occurrence wins.
            await skills_repository.insert_skill(store, skill.name, score=skill.score)

    if replacement.work is not None:
        await work_repository.delete_all(store)
        for entry in replacement.work:
            await work_repository.insert_work(
                store,
                company=entry.company,
                role=entry.role,
                start_date=entry.start_date,
                end_date=entry.end_date,
                description=entry.description,
            )

    if replacement.projects is not None:
        await projects_repository.delete_all(store)
        for project in replacement.projects:
            await projects_repository.insert_project(
                store,
                title=project.title,
                description=project.description,
                skills=project.skills,
                links=project.links,
            )


async def replace_profile(store: Store, payload: Any, *, atomic: bool | None = None) -> dict[str, bool]:
    replacement = normalize_payload(payload)
    use_transaction = settings.replace_atomic() if atomic is None else atomic

    async with (store.transaction() if use_transaction else nullcontext()):
        await _apply(store, replacement)

    logger.info(
        "profile_replaced atomic=%s skills=%s work=%s projects=%s",
        use_transaction,
        "kept" if replacement.skills is None else len(replacement.skills),
        "kept" if replacement.work is None else len(replacement.work),
        "kept" if replacement.projects is None else len(replacement.projects),
    )
    return {"ok": True}
