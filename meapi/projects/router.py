"""
Project API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from meapi.core import db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/projects")
async def list_projects(
    skill: str = Query(default="", max_length=200),
    store: db.Store = Depends(db.get_store),
) -> dict:
    try:
        projects = await service.list_projects(store, skill=skill)
    except db.StoreError as exc:
        logger.exception("list_projects_failed skill=%s", skill)
        raise HTTPException(status_code=500, detail="Failed to fetch projects") from exc
    return {"count": len(projects), "projects": projects}
