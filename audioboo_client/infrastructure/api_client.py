"""HTTP implementation of the ApiTransport port."""

from typing import Dict, Optional

import httpx

from ..application.domain import ApiTransport
from ..application.exceptions import TransportError

from .base_client import BaseClient


class HttpApiTransport(BaseClient, ApiTransport):
    """
    A transport that fetches raw response bodies via HTTP.

    The API reports its own errors inside the response envelope, so the body
    is returned for any status code; only failures to get a response at all
    are raised. Each call performs exactly one request.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        timeout: int,
    ):
        """Initializes the transport adapter."""
        super().__init__(client, base_url)
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return self.base_url + "/" + path.lstrip("/")

    async def _execute(self, method: str, path: str, **kwargs) -> str:
        """Executes the raw HTTP request and returns the body as text."""
        url = self._url(path)
        self.logger.info(f"{method} {url}")

        try:
            response = await self.client.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {url} failed: {type(e).__name__}: {e}"
            ) from e

        if response.is_error:
            self.logger.warning(
                f"{method} {url} returned HTTP {response.status_code}"
            )

        return response.text

    async def get(self, path: str, params: Optional[Dict] = None) -> str:
        return await self._execute("GET", path, params=params)

    async def post(
        self,
        path: str,
        data: Optional[Dict] = None,
        files: Optional[Dict] = None,
    ) -> str:
        return await self._execute("POST", path, data=data, files=files)
