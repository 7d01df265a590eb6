"""
Lazily constructed client shared by one part of an application.
"""

from __future__ import annotations

from typing import Optional

from ._async_client import AsyncClient
from ._models import DEFAULT_TIMEOUT
from ._models import ClientConfig


class DefaultClient:
    """
    Holder that builds one ``AsyncClient`` on first use and hands it out after.

    The holder is an ordinary object: keep it wherever the application keeps
    its other shared resources and pass it to the code that needs it. The API
    key and timeout can be changed at any time and apply to the next request
    made through the shared client.

    Args:
        api_key: Initial API key. Empty means unauthenticated.
        timeout: Initial per-request timeout in seconds.
        url: Optional base URL override.

    Examples:
        >>> default = DefaultClient()
        >>> default.set_api_key("your-key")
        >>> voices = await default.get().get_voices()
        >>> await default.close()
    """

    def __init__(self, api_key: str = "", *, timeout: Optional[float] = DEFAULT_TIMEOUT, url: Optional[str] = None):
        self._config = ClientConfig(api_key=api_key, timeout=timeout)
        if url:
            self._config.url = url
        self._client: Optional[AsyncClient] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    def get(self) -> AsyncClient:
        """Return the shared client, creating it on the first call."""
        if self._client is None:
            self._client = AsyncClient(config=self._config)
        return self._client

    def set_api_key(self, api_key: str) -> None:
        """Set the API key used from the next request on."""
        self._config.set_api_key(api_key)

    def set_timeout(self, timeout: Optional[float]) -> None:
        """Set the per-request timeout used from the next request on."""
        self._config.set_timeout(timeout)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
