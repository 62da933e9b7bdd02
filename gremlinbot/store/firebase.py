"""Firebase Realtime Database adapter over its REST and streaming API"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx

from ..core.errors import StoreError
from .base import join_path

logger = logging.getLogger("gremlinbot.store.firebase")

STREAM_TIMEOUT = httpx.Timeout(10.0, read=90.0)  # server sends keep-alive every 30s


async def iter_sse(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, Any]]:
    """Group a text/event-stream into ``(event, decoded data)`` pairs"""
    event = "message"
    data: list[str] = []

    async for line in lines:
        if not line:
            if data:
                raw = "\n".join(data)
                try:
                    payload = json.loads(raw)
                except json.JSONDecodeError:
                    payload = raw
                yield event, payload
            event, data = "message", []
            continue

        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)


def tail_children(payload: Any) -> Iterator[tuple[str, Any]]:
    """Children added by a ``put``/``patch`` event on a collection stream.

    The first event carries the whole query window at path ``/``; later
    events carry one child at ``/<key>``. Removals (``null`` data) and
    updates below a child are not appends and are skipped.
    """
    if not isinstance(payload, dict):
        return

    path = payload.get("path", "/")
    data = payload.get("data")
    if data is None:
        return

    if path == "/":
        if isinstance(data, dict):
            for key in sorted(data):
                if data[key] is not None:
                    yield key, data[key]
        return

    segments = [segment for segment in path.split("/") if segment]
    if len(segments) == 1:
        yield segments[0], data


class FirebaseRealtimeStore:
    """``KeyValueStore`` backed by a Firebase Realtime Database"""

    def __init__(
        self,
        database_url: str,
        auth_token: str | None = None,
        client: httpx.AsyncClient | None = None,
        reconnect_delay: float = 5.0,
    ):
        if not database_url:
            raise ValueError("database_url is required")
        self._base_url = database_url.rstrip("/")
        self._auth_token = auth_token or None
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self.reconnect_delay = reconnect_delay

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{join_path(path)}.json"

    def _params(self, **extra: str) -> dict[str, str]:
        params = dict(extra)
        if self._auth_token:
            params["auth"] = self._auth_token
        return params

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict) and "error" in body:
            return str(body["error"])
        return response.text[:200]

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(
                method, self._url(path), params=self._params(), **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = self._error_detail(e.response)
            raise StoreError(
                f"{method} {path} failed with HTTP {e.response.status_code}: {detail}", path
            ) from e
        except httpx.HTTPError as e:
            raise StoreError(f"{method} {path} failed: {e}", path) from e
        return response

    async def get(self, path: str) -> Any:
        response = await self._request("GET", path)
        return response.json()

    async def set(self, path: str, value: Any) -> None:
        await self._request("PUT", path, json=value)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def subscribe_tail(self, path: str, limit: int = 1) -> AsyncIterator[tuple[str, Any]]:
        """Stream the newest ``limit`` children of ``path``, reconnecting on failure"""
        params = self._params(orderBy='"$key"', limitToLast=str(limit))

        while True:
            try:
                async with self._client.stream(
                    "GET",
                    self._url(path),
                    params=params,
                    headers={"Accept": "text/event-stream"},
                    timeout=STREAM_TIMEOUT,
                    follow_redirects=True,
                ) as response:
                    response.raise_for_status()
                    logger.info(f"Subscribed to {path} (limit={limit})")

                    async for event, payload in iter_sse(response.aiter_lines()):
                        if event in ("put", "patch"):
                            for item in tail_children(payload):
                                yield item
                        elif event in ("cancel", "auth_revoked"):
                            raise StoreError(f"Stream {event}: {payload}", path)
                        # keep-alive needs no handling

                logger.warning(f"Stream for {path} closed by server")
            except (httpx.HTTPError, StoreError) as e:
                logger.warning(f"Stream for {path} failed: {e}")

            await asyncio.sleep(self.reconnect_delay)

    async def aclose(self) -> None:
        await self._client.aclose()
