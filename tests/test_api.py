"""
HTTP-level tests: the FastAPI app on a temp SQLite file, seeded on startup.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from meapi.core import db
from meapi.core.db import SqliteStore
from meapi.main import app


@pytest.fixture
def client(tmp_path: Path, seed_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("SEED_PATH", str(seed_file))
    monkeypatch.delenv("SCHEMA_PATH", raising=False)
    monkeypatch.delenv("REPLACE_ATOMIC", raising=False)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["ts"].endswith("Z")


def test_projects_skill_filter(client: TestClient) -> None:
    go = client.get("/projects", params={"skill": "go"}).json()
    java = client.get("/projects", params={"skill": "java"}).json()

    assert go["count"] == 1
    assert go["projects"][0]["title"] == "Tracker"
    assert go["projects"][0]["skills"] == ["Go", "SQL"]
    assert java == {"count": 0, "projects": []}


def test_projects_without_filter(client: TestClient) -> None:
    body = client.get("/projects").json()

    assert body["count"] == 1


def test_get_profile(client: TestClient) -> None:
    body = client.get("/profile").json()

    assert body["name"] == "Sam Lee"
    assert body["email"] == "sam@example.com"
    assert [s["name"] for s in body["skills"]] == ["Python", "Go", "SQL"]
    assert [w["company"] for w in body["work"]] == ["Initech", "Globex"]
    assert body["projects"][0]["links"] == {"repo": "https://example.com/tracker"}


def test_top_skills(client: TestClient) -> None:
    body = client.get("/skills/top").json()

    assert body == {
        "skills": [
            {"name": "Python", "score": 9},
            {"name": "Go", "score": 5},
            {"name": "SQL", "score": 5},
        ]
    }


def test_search(client: TestClient) -> None:
    body = client.get("/search", params={"q": "TRACK"}).json()
    empty = client.get("/search").json()

    assert [p["title"] for p in body["projects"]] == ["Tracker"]
    assert body["skills"] == []
    assert empty == {"projects": [], "skills": [], "work": []}


def test_put_profile_partial_replace(client: TestClient) -> None:
    resp = client.put("/profile", json={"name": "New Name", "skills": [{"name": "Rust", "score": 3}]})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    body = client.get("/profile").json()
    assert body["name"] == "New Name"
    assert body["email"] == ""
    assert body["skills"] == [{"name": "Rust", "score": 3}]
    assert len(body["work"]) == 2
    assert len(body["projects"]) == 1


def test_put_profile_without_body(client: TestClient) -> None:
    resp = client.put("/profile")

    assert resp.status_code == 200
    assert client.get("/profile").json()["name"] == ""


def test_restart_does_not_reseed(tmp_path: Path, seed_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'restart.db'}")
    monkeypatch.setenv("SEED_PATH", str(seed_file))
    monkeypatch.delenv("SCHEMA_PATH", raising=False)

    with TestClient(app) as first:
        first.put("/profile", json={"name": "Edited", "projects": []})
    with TestClient(app) as second:
        body = second.get("/profile").json()

    assert body["name"] == "Edited"
    assert body["projects"] == []


@pytest.mark.parametrize(
    ("method", "path", "detail"),
    [
        ("GET", "/profile", "Failed to fetch profile"),
        ("PUT", "/profile", "Failed to update profile"),
        ("GET", "/projects", "Failed to fetch projects"),
        ("GET", "/skills/top", "Failed to fetch skills"),
        ("GET", "/search?q=x", "Failed to search"),
    ],
)
def test_store_failure_returns_500(
    client: TestClient,
    tmp_path: Path,
    method: str,
    path: str,
    detail: str,
) -> None:
    # Never opened: every statement raises StoreError.
    broken = SqliteStore(tmp_path / "broken.db")
    app.dependency_overrides[db.get_store] = lambda: broken

    resp = client.request(method, path, json={} if method == "PUT" else None)

    assert resp.status_code == 500
    assert resp.json() == {"detail": detail}
