"""
Plain-text rendering of API documents.
"""

from __future__ import annotations

import json
from typing import Any


def pretty(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def skill_lines(document: dict[str, Any]) -> list[str]:
    # "Python (9)"
    return [f"{s.get('name')} ({s.get('score')})" for s in document.get("skills") or []]
