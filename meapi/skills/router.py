"""
Skill API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from meapi.core import db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/skills/top")
async def top_skills(store: db.Store = Depends(db.get_store)) -> dict:
    try:
        skills = await service.list_skills(store)
    except db.StoreError as exc:
        logger.exception("top_skills_failed")
        raise HTTPException(status_code=500, detail="Failed to fetch skills") from exc
    return {"skills": skills}
