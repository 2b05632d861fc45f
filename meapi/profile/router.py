"""
Profile API endpoints.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from meapi.core import db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile")
async def get_profile(store: db.Store = Depends(db.get_store)) -> dict:
    try:
        return await service.get_profile(store)
    except db.StoreError as exc:
        logger.exception("get_profile_failed")
        raise HTTPException(status_code=500, detail="Failed to fetch profile") from exc


@router.put("/profile")
async def replace_profile(
    payload: Any = Body(default=None),
    store: db.Store = Depends(db.get_store),
) -> dict:
    # Any JSON value is accepted; missing or odd fields are defaulted.
    try:
        return await service.replace_profile(store, payload)
    except db.StoreError as exc:
        logger.exception("replace_profile_failed")
        raise HTTPException(status_code=500, detail="Failed to update profile") from exc
