"""
JSON-in-text columns.

Project tags/links and profile links are stored as JSON text. The store only
ever sees opaque strings; these helpers are the serialize/deserialize edge.
Reads never fail: unreadable text falls back to an empty value.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def _json_dumps(value: object) -> str:
    return json.dumps(value, ensure_ascii=True)


def dump_list(values: Any) -> str:
    return _json_dumps(list(values) if isinstance(values, (list, tuple)) else [])


def dump_mapping(values: Any) -> str:
    return _json_dumps(dict(values) if isinstance(values, dict) else {})


def _load(raw: str | None, expected: type, *, column: str) -> Any:
    if not raw:
        return expected()
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("json_column_unreadable column=%s", column)
        return expected()
    if not isinstance(value, expected):
        logger.warning("json_column_wrong_shape column=%s got=%s", column, type(value).__name__)
        return expected()
    return value


def load_list(raw: str | None, *, column: str = "") -> list:
    return _load(raw, list, column=column)


def load_mapping(raw: str | None, *, column: str = "") -> dict:
    return _load(raw, dict, column=column)
