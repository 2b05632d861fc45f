"""
Shared fixtures: a real SQLite store on a temp file, plus seed documents.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from meapi.core.db import SqliteStore


class CountingStore(SqliteStore):
    """SqliteStore that counts every statement it runs."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path)
        self.calls = 0

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls += 1
        return await super().fetch_one(sql, *args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls += 1
        return await super().fetch_all(sql, *args)

    async def execute(self, sql: str, *args: Any) -> int:
        self.calls += 1
        return await super().execute(sql, *args)


SEED_DOCUMENT: dict[str, Any] = {
    "profile": {
        "name": "Sam Lee",
        "email": "sam@example.com",
        "education": "BSc Computer Science",
        "links": {"github": "https://github.com/samlee"},
    },
    "skills": [
        {"name": "Python", "score": 9},
        {"name": "Go", "score": 5},
        {"name": "SQL", "score": 5},
    ],
    "work": [
        {
            "company": "Globex",
            "role": "Engineer",
            "start_date": "2021-06",
            "end_date": "2023-01",
            "description": "Payments backend",
        },
        {
            "company": "Initech",
            "role": "Intern",
            "start_date": "2020-01",
            "end_date": "2020-06",
            "description": None,
        },
    ],
    "projects": [
        {
            "title": "Tracker",
            "description": "Habit tracker",
            "skills": ["Go", "SQL"],
            "links": {"repo": "https://example.com/tracker"},
        },
    ],
}


@pytest.fixture
def seed_file(tmp_path: Path) -> Path:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED_DOCUMENT), encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def store(tmp_path: Path):
    s = SqliteStore(tmp_path / "store.db")
    await s.open()
    await s.init_schema()
    try:
        yield s
    finally:
        await s.close()


@pytest_asyncio.fixture
async def counting_store(tmp_path: Path):
    s = CountingStore(tmp_path / "counting.db")
    await s.open()
    await s.init_schema()
    try:
        yield s
    finally:
        await s.close()
