import httpx

from app.core.base_client import BaseClient
from app.core.config import settings
from app.core.version import __version__


class KitsuClient(BaseClient):
    """
    Client for the Kitsu JSON:API.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"Mangashelf/{__version__}",
            "Accept": "application/vnd.api+json",
        }
        super().__init__(
            base_url=base_url or settings.KITSU_BASE_URL,
            timeout=timeout if timeout is not None else settings.KITSU_TIMEOUT,
            max_retries=max_retries if max_retries is not None else settings.KITSU_MAX_RETRIES,
            headers=headers,
            transport=transport,
        )
