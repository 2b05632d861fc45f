"""
First-run seeding.

The only idempotency guard is the profile row count: if any profile row
exists the seed is skipped entirely, even when other tables are empty.
A partially seeded database is never repaired.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from meapi.core import settings
from meapi.core.db import Store
from meapi.projects import repository as projects_repository
from meapi.skills import repository as skills_repository
from meapi.work import repository as work_repository

from . import repository
from .schemas import SeedDocument

logger = logging.getLogger(__name__)


class SeedError(RuntimeError):
    """
    Missing or malformed seed document. Fatal at startup.
    """


def load_seed_document(path: str | Path | None = None) -> SeedDocument:
    seed_path = Path(path) if path is not None else settings.seed_path()
    try:
        raw = seed_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SeedError(f"Cannot read seed document {seed_path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise SeedError(f"Seed document {seed_path} is not valid JSON: {exc}") from exc

    try:
        return SeedDocument.model_validate(data)
    except ValidationError as exc:
        raise SeedError(f"Seed document {seed_path} is malformed: {exc}") from exc


async def apply_seed(store: Store, document: SeedDocument) -> None:
    """
    Insert the document in order: profile, skills, work, projects.
    """
    await repository.insert_profile(
        store,
        name=document.profile.name,
        email=document.profile.email,
        education=document.profile.education,
        links=document.profile.links,
    )

    for skill in document.skills:
        score = 1 if skill.score is None else skill.score
        await skills_repository.insert_skill(store, skill.name, score=score)

    for entry in document.work:
        await work_repository.insert_work(
            store,
            company=entry.company,
            role=entry.role,
            start_date=entry.start_date,
            end_date=entry.end_date,
            description=entry.description,
        )

    for project in document.projects:
        await projects_repository.insert_project(
            store,
            title=project.title,
            description=project.description,
            skills=project.skills or [],
            links=project.links or {},
        )


async def seed_if_empty(store: Store, path: str | Path | None = None) -> bool:
    """
    Seed the store when the profile table is empty. Returns True if seeded.
    """
    if await repository.count_profiles(store) > 0:
        logger.info("seed_skipped reason=profile_present")
        return False

    document = load_seed_document(path)
    await apply_seed(store, document)
    logger.info(
        "database_seeded skills=%s work=%s projects=%s",
        len(document.skills),
        len(document.work),
        len(document.projects),
    )
    return True
