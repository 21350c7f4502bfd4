"""Async HTTP client for small JSON documents such as LNURL endpoints."""

from __future__ import annotations

import json
from typing import Any

import aiohttp

JSON_HEADERS = {"Accept": "application/json"}


class HTTPClient:
    """Lazily opened aiohttp session that fetches JSON documents."""

    def __init__(self, timeout: float = 10.0, headers: dict[str, str] | None = None) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {**JSON_HEADERS, **(headers or {})}
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and decode its body as JSON.

        LNURL services often label JSON as text/plain, so the content type
        is not checked.

        Raises:
            aiohttp.ClientError: On connection failures and non-2xx statuses
            ValueError: If the body is not JSON
        """
        async with self.session.get(url, params=params) as response:
            response.raise_for_status()
            body = await response.text()
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ValueError(f"{url} did not return JSON: {e.msg}") from e

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
