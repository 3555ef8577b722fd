"""
HTTP transport for models

Models never talk to httpx directly: they await a ``Transport`` whose
``get/post/put/delete`` coroutines resolve with the parsed response body
or raise. ``HttpxTransport`` is the default implementation.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from easy_orm.config import TransportConfig, config as default_config

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when an HTTP request fails or returns an error status."""

    def __init__(self, method: str, url: str, status_code: Optional[int] = None, body: Any = None):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "no response"
        super().__init__(f"{method} {url} failed ({status})")


class Transport(Protocol):
    """Transport abstraction consumed by models and the store."""

    async def get(self, url: str, options: Optional[Dict] = None) -> Any:
        """GET with ``options['data']`` sent as query params."""
        ...

    async def post(self, url: str, options: Optional[Dict] = None) -> Any:
        ...

    async def put(self, url: str, options: Optional[Dict] = None) -> Any:
        ...

    async def delete(self, url: str, options: Optional[Dict] = None) -> Any:
        ...


class HttpxTransport:
    """
    ``httpx.AsyncClient`` backed transport.

    GET payloads go out as query params, POST/PUT/DELETE payloads as a
    JSON body. Responses are parsed as JSON, falling back to text.
    """

    def __init__(self,
                 client: Optional[httpx.AsyncClient] = None,
                 config: Optional[TransportConfig] = None):
        """
        Initialize transport.

        Args:
            client: httpx client owned by the caller (if None, the
                config's per-event-loop client is used)
            config: Transport configuration (default: module config)
        """
        self.config = config or default_config
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return self.config.get_client()

    async def get(self, url: str, options: Optional[Dict] = None) -> Any:
        return await self._request("GET", url, options)

    async def post(self, url: str, options: Optional[Dict] = None) -> Any:
        return await self._request("POST", url, options)

    async def put(self, url: str, options: Optional[Dict] = None) -> Any:
        return await self._request("PUT", url, options)

    async def delete(self, url: str, options: Optional[Dict] = None) -> Any:
        return await self._request("DELETE", url, options)

    async def _request(self, method: str, url: str, options: Optional[Dict]) -> Any:
        data = (options or {}).get("data")
        kwargs: Dict[str, Any] = {}
        if data is not None:
            if method == "GET":
                kwargs["params"] = data
            else:
                kwargs["json"] = data

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} transport failure: {e}")
            raise TransportError(method, url) from e

        body = self._parse_body(response)
        if response.is_error:
            logger.warning(f"{method} {url} returned {response.status_code}")
            raise TransportError(method, url, response.status_code, body)

        return body

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        else:
            await self.config.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
