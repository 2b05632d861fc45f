from __future__ import annotations

import json

import httpx
import pytest

from meapi.client import ClientError, ProfileClient, RetryPolicy, ServerError
from meapi.client import __main__ as cli
from meapi.client import render


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _client(handler, sleep: RecordingSleep, *, max_retries: int = 3) -> ProfileClient:
    return ProfileClient(
        "http://meapi.test",
        retry=RetryPolicy(max_retries=max_retries, sleep_fn=sleep),
        transport=httpx.MockTransport(handler),
    )


def test_backoff_is_exponential_and_capped() -> None:
    policy = RetryPolicy()
    assert [policy.backoff_seconds(i) for i in range(6)] == [1, 2, 4, 8, 8, 8]


@pytest.mark.asyncio
async def test_retries_server_errors_then_succeeds() -> None:
    sleep = RecordingSleep()
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if len(calls) < 3:
            return httpx.Response(503, json={"detail": "busy"})
        return httpx.Response(200, json={"skills": [{"name": "Go", "score": 5}]})

    async with _client(handler, sleep) as client:
        body = await client.top_skills()

    assert body == {"skills": [{"name": "Go", "score": 5}]}
    assert calls == ["/skills/top"] * 3
    assert sleep.delays == [1, 2]


@pytest.mark.asyncio
async def test_client_errors_fail_fast() -> None:
    sleep = RecordingSleep()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"detail": "Not Found"})

    async with _client(handler, sleep) as client:
        with pytest.raises(ServerError) as excinfo:
            await client.get_profile()

    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "Not Found"
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_transport_errors_exhaust_retries() -> None:
    sleep = RecordingSleep()

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler, sleep) as client:
        with pytest.raises(ClientError):
            await client.health()

    assert sleep.delays == [1, 2, 4]


@pytest.mark.asyncio
async def test_persistent_500_surfaces_server_error() -> None:
    sleep = RecordingSleep()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Failed to search"})

    async with _client(handler, sleep, max_retries=1) as client:
        with pytest.raises(ServerError) as excinfo:
            await client.search("go")

    assert excinfo.value.detail == "Failed to search"
    assert sleep.delays == [1]


@pytest.mark.asyncio
async def test_query_parameters_and_payloads() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with _client(handler, RecordingSleep()) as client:
        await client.list_projects(skill=" go ")
        await client.list_projects()
        await client.search("tracker")
        await client.replace_profile({"name": "X"})

    assert seen[0].url.params["skill"] == "go"
    assert "skill" not in seen[1].url.params
    assert seen[2].url.params["q"] == "tracker"
    assert seen[3].method == "PUT"
    assert json.loads(seen[3].content) == {"name": "X"}


def test_render_helpers() -> None:
    assert render.skill_lines({"skills": [{"name": "Python", "score": 9}, {"name": "Go", "score": 5}]}) == [
        "Python (9)",
        "Go (5)",
    ]
    assert render.pretty({"a": 1}) == '{\n  "a": 1\n}'


def test_cli_prints_skills(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"skills": [{"name": "Python", "score": 9}]})

    def make_client(base_url: str | None) -> ProfileClient:
        return ProfileClient(base_url or "http://meapi.test", transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "ProfileClient", make_client)

    assert cli.main(["skills"]) == 0
    assert capsys.readouterr().out.strip() == "Python (9)"


def test_cli_reports_errors(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"detail": "bad"})

    def make_client(base_url: str | None) -> ProfileClient:
        return ProfileClient(base_url or "http://meapi.test", transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "ProfileClient", make_client)

    assert cli.main(["projects", "--skill", "go"]) == 1
    assert "bad" in capsys.readouterr().err
