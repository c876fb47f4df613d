# src/day_planner/sync/gist_client.py

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


def _make_timeout(seconds: float) -> httpx.Timeout:
    # connect is kept short so an offline machine fails fast
    return httpx.Timeout(seconds, connect=min(seconds, 5.0))


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {resp.status_code}"


class GistClient:
    """
    Thin async client for the gist endpoints the backup flow needs.

    Usage:
        async with GistClient(token) as client:
            gists = await client.list_gists()

    `transport` is forwarded to httpx.AsyncClient (tests pass a MockTransport).
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
            },
            timeout=_make_timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> GistClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Gist API %s %s failed: %s", method, path, exc)
            raise TransportError(None, str(exc) or exc.__class__.__name__) from exc

        if not resp.is_success:
            message = _error_message(resp)
            logger.warning("Gist API %s %s -> %s %s", method, path, resp.status_code, message)
            raise TransportError(resp.status_code, message)

        logger.debug("Gist API %s %s -> %s", method, path, resp.status_code)
        return resp.json()

    async def list_gists(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/gists")
        return data if isinstance(data, list) else []

    async def get_gist(self, gist_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/gists/{gist_id}")

    async def create_gist(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/gists", json=payload)

    async def update_gist(self, gist_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/gists/{gist_id}", json=payload)
