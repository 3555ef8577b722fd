"""
Transport configuration.

Resolved from environment variables, with a ``.env.orm`` file in the
working directory loaded first for local development:

    EASY_ORM_BASE_URL=http://localhost:8000
    EASY_ORM_TIMEOUT=30
    EASY_ORM_AUTH_TOKEN=<token>
"""

import asyncio
import os
import logging
from typing import Dict, Optional

import httpx
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class TransportConfigurationError(Exception):
    """Raised when transport settings in the environment are invalid."""
    pass


class TransportConfig:
    """Configuration for the default HTTP transport."""

    def __init__(self,
                 base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 auth_token: Optional[str] = None,
                 env_file: str = ".env.orm"):
        env_path = os.path.join(os.getcwd(), env_file)
        if os.path.exists(env_path):
            load_dotenv(env_path)
            logger.debug(f"Loaded transport settings from {env_path}")

        self.base_url = base_url if base_url is not None else os.getenv("EASY_ORM_BASE_URL", "")
        self.timeout = timeout if timeout is not None else self._read_timeout()
        self.auth_token = auth_token if auth_token is not None else os.getenv("EASY_ORM_AUTH_TOKEN")
        self._client: Optional[httpx.AsyncClient] = None
        self._client_loop: Optional[asyncio.AbstractEventLoop] = None

    @staticmethod
    def _read_timeout() -> float:
        raw = os.getenv("EASY_ORM_TIMEOUT", "30")
        try:
            timeout = float(raw)
        except ValueError:
            raise TransportConfigurationError(f"EASY_ORM_TIMEOUT must be a number, got {raw!r}")
        if timeout <= 0:
            raise TransportConfigurationError(f"EASY_ORM_TIMEOUT must be positive, got {timeout}")
        return timeout

    def get_headers(self) -> Dict[str, str]:
        """Default request headers."""
        headers = {"Accept": "application/json"}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    def get_client(self) -> httpx.AsyncClient:
        """
        Get the shared async HTTP client.

        A client is bound to the event loop it first ran on, so one is
        cached per running loop and rebuilt when the loop changes.

        Returns:
            Configured httpx.AsyncClient for the current event loop
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if self._client is None or self._client.is_closed or self._client_loop is not loop:
            self._client_loop = loop
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.get_headers()
            )
            logger.info(f"HTTP client created (base_url={self.base_url or '<none>'}, timeout={self.timeout}s)")

        return self._client

    async def aclose(self) -> None:
        """Close the cached client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._client_loop = None


# Global configuration instance
config = TransportConfig()
