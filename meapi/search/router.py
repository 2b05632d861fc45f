"""
Search API endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from meapi.core import db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search")
async def search(
    q: str = Query(default="", max_length=500),
    store: db.Store = Depends(db.get_store),
) -> dict:
    try:
        return await service.search(store, q)
    except db.StoreError as exc:
        logger.exception("search_failed q=%s", q)
        raise HTTPException(status_code=500, detail="Failed to search") from exc
