import asyncio
from typing import Any

import httpx
from loguru import logger


class BaseClient:
    """
    Shared httpx.AsyncClient owner for JSON APIs.

    Transport and status failures are retried ``max_retries - 1`` times with exponential backoff.
    ``transport`` replaces the network layer (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.headers = headers or {}
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = await self.get_client()
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                if attempt == self.max_retries:
                    logger.error(f"{method} {url} failed after {attempt} attempt(s): {e}")
                    raise
                wait_time = 0.5 * (2 ** (attempt - 1))
                logger.warning(f"{method} {url} failed: {e}. Retrying in {wait_time}s ({attempt}/{self.max_retries})")
                await asyncio.sleep(wait_time)
        raise httpx.RequestError(f"{method} {url} was never sent")

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and decode the JSON body. Params set to None are left out of the query."""
        query = {k: v for k, v in (params or {}).items() if v is not None}
        response = await self._send("GET", url, params=query)
        return response.json()
