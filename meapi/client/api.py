"""
Async HTTP client for the me-api endpoints.

Usage:

    async with ProfileClient("http://localhost:3000") as client:
        profile = await client.get_profile()
        tracker = await client.list_projects(skill="go")
"""

from __future__ import annotations

from typing import Any

import httpx

from meapi.core import settings

from .retry import RetryPolicy


class ClientError(Exception):
    """Base error for client operations."""


class ServerError(ClientError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:300]
    if isinstance(data, dict):
        detail = data.get("detail") or data.get("error")
        if detail:
            return str(detail)
    return resp.text[:300]


class ProfileClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_s: float | None = None,
        retry: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.client_base_url()).rstrip("/")
        self.retry = retry or RetryPolicy(max_retries=settings.client_retries())
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_s if timeout_s is not None else settings.client_timeout(),
            transport=transport,
        )

    async def __aenter__(self) -> ProfileClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        async def attempt() -> Any:
            resp = await self._http.request(method, path, params=params, json=json)
            if not resp.is_success:
                raise ServerError(resp.status_code, _error_detail(resp))
            try:
                return resp.json()
            except ValueError as exc:
                raise ClientError(f"{method} {path} returned a non-JSON body.") from exc

        try:
            return await self.retry.execute(attempt)
        except httpx.HTTPError as exc:
            raise ClientError(f"{method} {path} failed: {exc}") from exc

    async def health(self) -> dict:
        return await self._request("GET", "/health")

    async def get_profile(self) -> dict:
        return await self._request("GET", "/profile")

    async def replace_profile(self, payload: dict[str, Any]) -> dict:
        return await self._request("PUT", "/profile", json=payload)

    async def list_projects(self, skill: str | None = None) -> dict:
        skill = (skill or "").strip()
        params = {"skill": skill} if skill else None
        return await self._request("GET", "/projects", params=params)

    async def top_skills(self) -> dict:
        return await self._request("GET", "/skills/top")

    async def search(self, q: str) -> dict:
        return await self._request("GET", "/search", params={"q": q})
