"""
Transport layer for ElevenLabs HTTP communication.

This module provides the Transport class that performs one HTTP exchange per
call: it builds the request, attaches authentication, bounds the exchange by
the configured timeout and cancellation event, and classifies the response
into a success or one of the error variants.
"""

from __future__ import annotations

import asyncio
import sys
import uuid
from collections.abc import Awaitable
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any
from typing import Optional
from typing import TypeVar
from typing import Union
from typing import cast

import aiohttp
import pydantic

from ._exceptions import APIError
from ._exceptions import ConnectionError
from ._exceptions import DecodingError
from ._exceptions import ServerError
from ._exceptions import TimeoutError
from ._exceptions import TransportError
from ._exceptions import ValidationError
from ._helpers import get_version
from ._helpers import write_chunk
from ._logging import get_logger
from ._models import APIErrorResponse
from ._models import ClientConfig
from ._models import ValidationErrorResponse
from ._query import QueryParam
from ._query import build_query

ACCEPT = "application/json"
CONTENT_TYPE_JSON = "application/json"

_T = TypeVar("_T")


@dataclass
class Success:
    """Successful (HTTP 200) exchange. ``payload`` is empty when streamed to a sink."""

    payload: bytes
    status: int = 200


Outcome = Union[Success, APIError, ValidationError, ServerError, TransportError, DecodingError]


def unwrap(outcome: Outcome) -> bytes:
    """Return the payload of a successful outcome or raise the error variant."""
    if isinstance(outcome, Success):
        return outcome.payload
    raise outcome


class _ScopeCancelled(Exception):
    pass


class Transport:
    """
    HTTP transport layer for ElevenLabs API communication.

    Each call reads ``api_key`` and ``timeout`` from the shared config, so
    changes made between calls apply to the next request.

    Args:
        config: Client configuration (base URL, credential, timeouts and
            cancellation event).
        request_id: Optional identifier used to correlate log records.
            Generated automatically if not provided.

    Examples:
        >>> transport = Transport(ClientConfig(api_key="your-api-key"))
        >>> outcome = await transport.request("GET", "/models")
        >>> if isinstance(outcome, Success):
        ...     print(outcome.payload)
        >>> await transport.close()
    """

    def __init__(self, config: ClientConfig, request_id: Optional[str] = None) -> None:
        self._config = config
        self._request_id = request_id or str(uuid.uuid4())
        self._session: Optional[aiohttp.ClientSession] = None
        self._closed = False
        self._logger = get_logger(__name__)

        self._logger.debug("Transport initialized (request_id=%s, url=%s)", self._request_id, self._config.url)

    async def __aenter__(self) -> Transport:
        """Async context manager entry."""
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup."""
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        content_type: Optional[str] = None,
        queries: Iterable[QueryParam] = (),
    ) -> Outcome:
        """
        Perform one exchange and read the whole response body into memory.

        Args:
            method: HTTP method (GET, POST, DELETE).
            path: Path appended to the configured base URL.
            body: Optional request body (bytes or a multipart payload).
            content_type: Content type of ``body``; ignored when there is no body.
            queries: Query modifiers, applied in order.

        Returns:
            ``Success`` with the raw body for HTTP 200, otherwise the error
            variant describing the failure. Nothing is raised for HTTP or
            transport failures.
        """
        return await self._execute(method, path, body, content_type, queries, None)

    async def stream(
        self,
        sink: Any,
        method: str,
        path: str,
        *,
        body: Any = None,
        content_type: Optional[str] = None,
        queries: Iterable[QueryParam] = (),
    ) -> Outcome:
        """
        Perform one exchange, copying a successful body into ``sink`` as it arrives.

        The configured timeout bounds the whole transfer, not each chunk. If the
        transfer is interrupted, whatever was already written stays in the sink.

        Args:
            sink: Object with a ``write(bytes)`` method, sync or async.
            method: HTTP method.
            path: Path appended to the configured base URL.
            body: Optional request body.
            content_type: Content type of ``body``.
            queries: Query modifiers, applied in order.

        Returns:
            ``Success`` with an empty payload, or the error variant.
        """
        return await self._execute(method, path, body, content_type, queries, sink)

    async def close(self) -> None:
        """
        Close the HTTP session and cleanup resources.

        It's safe to call multiple times.
        """
        if self._session:
            try:
                await self._session.close()
            except Exception:
                pass  # Best effort cleanup
            finally:
                self._session = None
        self._closed = True

    @property
    def is_connected(self) -> bool:
        return self._session is not None and not self._closed

    def _ensure_session(self) -> None:
        """Ensure HTTP session is created."""
        if self._session is None and not self._closed:
            self._logger.debug("Creating HTTP session (connect_timeout=%.1fs)", self._config.connect_timeout)
            timeout = aiohttp.ClientTimeout(total=None, connect=self._config.connect_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def _execute(
        self,
        method: str,
        path: str,
        body: Any,
        content_type: Optional[str],
        queries: Iterable[QueryParam],
        sink: Any,
    ) -> Outcome:
        self._ensure_session()
        if self._session is None:
            return ConnectionError("Transport is closed")

        url = f"{self._config.url.rstrip('/')}{path}"
        headers = self._prepare_headers(content_type if body is not None else None)
        params = build_query(queries)
        timeout = self._config.timeout

        self._logger.debug(
            "Sending HTTP request %s %s (body=%s, params=%s, stream=%s)",
            method,
            url,
            body is not None,
            list(params.keys()),
            sink is not None,
        )

        try:
            status, reason, payload = await self._bounded(
                self._exchange(method, url, params, headers, body, sink), timeout
            )
        except _ScopeCancelled:
            self._logger.error("Request cancelled %s %s", method, path)
            return TimeoutError(f"Request cancelled for {method} {path}", cancelled=True)
        except asyncio.TimeoutError:
            self._logger.error("Request timeout %s %s (timeout=%ss)", method, path, timeout)
            return TimeoutError(f"Request timeout for {method} {path}")
        except aiohttp.ClientError as e:
            self._logger.error("Request failed %s %s: %s", method, path, e)
            return ConnectionError(f"Request failed: {e}")

        self._logger.debug("HTTP response %d %s for %s %s", status, reason, method, path)
        return self._classify(status, reason, payload)

    async def _bounded(self, exchange: Awaitable[_T], timeout: Optional[float]) -> _T:
        """Run ``exchange`` until it finishes, the deadline passes or the cancel event is set."""
        cancel_event = self._config.cancel_event
        if cancel_event is not None and cancel_event.is_set():
            if asyncio.iscoroutine(exchange):
                exchange.close()
            raise _ScopeCancelled()

        task = asyncio.ensure_future(exchange)
        waiters: set[asyncio.Future[Any]] = {task}
        cancel_waiter: Optional[asyncio.Future[Any]] = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        if task in done:
            return task.result()

        # Let the interrupted exchange release its connection before reporting.
        await asyncio.gather(task, return_exceptions=True)
        if cancel_waiter is not None and cancel_waiter in done:
            raise _ScopeCancelled()
        raise asyncio.TimeoutError()

    async def _exchange(
        self,
        method: str,
        url: str,
        params: Any,
        headers: dict[str, str],
        body: Any,
        sink: Any,
    ) -> tuple[int, str, bytes]:
        session = cast(aiohttp.ClientSession, self._session)
        async with session.request(method, url, params=params, headers=headers, data=body) as response:
            reason = response.reason or ""
            if response.status == 200 and sink is not None:
                async for chunk in response.content.iter_chunked(self._config.chunk_size):
                    await write_chunk(sink, chunk)
                return response.status, reason, b""
            return response.status, reason, await response.read()

    def _prepare_headers(self, content_type: Optional[str]) -> dict[str, str]:
        """
        Prepare HTTP headers for a request.

        Returns:
            Headers dictionary; ``xi-api-key`` is only present for a non-empty key.
        """
        headers = {
            "Accept": ACCEPT,
            "User-Agent": f"elevenlabs-tts-v{get_version()} python/{sys.version_info.major}.{sys.version_info.minor}",
        }
        if content_type:
            headers["Content-Type"] = content_type
        if self._config.api_key:
            headers["xi-api-key"] = self._config.api_key
        return headers

    def _classify(self, status: int, reason: str, payload: bytes) -> Outcome:
        """
        Map an HTTP status and body to an outcome.

        - 200: Success
        - 400, 401: APIError
        - 422: ValidationError
        - anything else: ServerError, body ignored
        """
        if status == 200:
            return Success(payload=payload, status=status)

        if status in (400, 401):
            try:
                api_error = APIErrorResponse.model_validate_json(payload)
            except pydantic.ValidationError as e:
                self._logger.error("Failed to decode error response (status=%d): %s", status, e)
                return DecodingError(f"Failed to decode HTTP {status} error response: {e}")
            return APIError(status, api_error.detail)

        if status == 422:
            try:
                validation_error = ValidationErrorResponse.model_validate_json(payload)
            except pydantic.ValidationError as e:
                self._logger.error("Failed to decode error response (status=%d): %s", status, e)
                return DecodingError(f"Failed to decode HTTP {status} error response: {e}")
            return ValidationError(status, validation_error.detail)

        self._logger.error("Unexpected HTTP status %d %s", status, reason)
        return ServerError(status, reason)
