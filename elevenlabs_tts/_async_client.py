"""
Asynchronous client for ElevenLabs text-to-speech.

This module provides the main AsyncClient class with one method per remote
operation of the ElevenLabs API.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator
from typing import Any
from typing import Optional
from typing import TypeVar

import pydantic
from pydantic import BaseModel
from pydantic import TypeAdapter

from ._exceptions import DecodingError
from ._helpers import prepare_voice_form
from ._logging import get_logger
from ._models import AddEditVoiceRequest
from ._models import AddVoiceResponse
from ._models import ClientConfig
from ._models import DEFAULT_URL
from ._models import DownloadHistoryRequest
from ._models import GetVoicesResponse
from ._models import HistoryItem
from ._models import HistoryPage
from ._models import Model
from ._models import Subscription
from ._models import TextToSpeechRequest
from ._models import User
from ._models import Voice
from ._models import VoiceSettings
from ._pagination import HistoryCursor
from ._pagination import iter_pages
from ._pagination import next_cursor
from ._query import QueryParam
from ._transport import CONTENT_TYPE_JSON
from ._transport import Transport
from ._transport import unwrap

_M = TypeVar("_M", bound=BaseModel)

_MODEL_LIST = TypeAdapter(list[Model])


class AsyncClient:
    """
    Asynchronous client for the ElevenLabs voice generation API.

    Every method performs exactly one HTTP request (except ``iter_history``,
    which issues one per page) and raises on failure:

    - ``APIError`` for 400/401 responses,
    - ``ValidationError`` for 422 responses,
    - ``ServerError`` for any other non-200 status,
    - ``TransportError`` (``TimeoutError``, ``ConnectionError``) when no response arrived,
    - ``DecodingError`` when a payload is not the expected JSON.

    Args:
        api_key: ElevenLabs API key. If None, uses the ELEVENLABS_API_KEY
            environment variable. An empty key sends unauthenticated requests.
        url: API base URL. If None, uses ELEVENLABS_URL or the production endpoint.
        timeout: Per-request timeout in seconds.
        config: Complete client configuration. If provided, the other
            arguments are ignored.

    Examples:
        Basic usage:
            >>> async with AsyncClient(api_key="your-key") as client:
            ...     audio = await client.text_to_speech(
            ...         "21m00Tcm4TlvDq8ikWAM", TextToSpeechRequest(text="Hello world")
            ...     )

        Streaming into a file:
            >>> async with aiofiles.open("speech.mp3", "wb") as f:
            ...     await client.text_to_speech_stream(f, voice_id, TextToSpeechRequest(text="Hi"))
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        if config is None:
            config = ClientConfig(
                api_key=api_key if api_key is not None else os.environ.get("ELEVENLABS_API_KEY", ""),
                url=url or os.environ.get("ELEVENLABS_URL") or DEFAULT_URL,
            )
            if timeout is not None:
                config.set_timeout(timeout)
        self._config = config
        self._request_id = str(uuid.uuid4())
        self._transport = Transport(self._config, self._request_id)

        self._logger = get_logger(__name__)
        self._logger.debug("AsyncClient initialized (request_id=%s, url=%s)", self._request_id, self._config.url)

    @property
    def config(self) -> ClientConfig:
        """Configuration read by every request; updates apply to the next call."""
        return self._config

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Text to speech
    # ------------------------------------------------------------------

    async def text_to_speech(self, voice_id: str, tts_req: TextToSpeechRequest, *queries: QueryParam) -> bytes:
        """
        Convert text to speech audio using a voice.

        Args:
            voice_id: ID of the voice to synthesise with.
            tts_req: Text to convert, plus optional model and voice settings.
            *queries: Query modifiers; ``latency_optimizations`` is the relevant one.

        Returns:
            MPEG encoded audio.

        Examples:
            >>> audio = await client.text_to_speech(
            ...     voice_id, TextToSpeechRequest(text="Hello"), latency_optimizations(2)
            ... )
        """
        return unwrap(
            await self._transport.request(
                "POST",
                f"/text-to-speech/{voice_id}",
                body=_encode(tts_req),
                content_type=CONTENT_TYPE_JSON,
                queries=queries,
            )
        )

    async def text_to_speech_stream(
        self, sink: Any, voice_id: str, tts_req: TextToSpeechRequest, *queries: QueryParam
    ) -> None:
        """
        Convert text to speech and copy the audio into ``sink`` as it arrives.

        The client timeout bounds the whole stream, so set it large enough for
        the expected audio length. On failure, audio already written to the
        sink is left there.

        Args:
            sink: Object with a sync or async ``write(bytes)`` method.
            voice_id: ID of the voice to synthesise with.
            tts_req: Text to convert, plus optional model and voice settings.
            *queries: Query modifiers; ``latency_optimizations`` is the relevant one.
        """
        unwrap(
            await self._transport.stream(
                sink,
                "POST",
                f"/text-to-speech/{voice_id}/stream",
                body=_encode(tts_req),
                content_type=CONTENT_TYPE_JSON,
                queries=queries,
            )
        )

    # ------------------------------------------------------------------
    # Models and voices
    # ------------------------------------------------------------------

    async def get_models(self) -> list[Model]:
        """List all available models."""
        payload = unwrap(await self._transport.request("GET", "/models"))
        try:
            return _MODEL_LIST.validate_json(payload)
        except pydantic.ValidationError as e:
            raise DecodingError(f"Failed to decode models: {e}") from e

    async def get_voices(self) -> list[Voice]:
        """List all voices available for use."""
        payload = unwrap(await self._transport.request("GET", "/voices"))
        return _decode(GetVoicesResponse, payload).voices

    async def get_default_voice_settings(self) -> VoiceSettings:
        payload = unwrap(await self._transport.request("GET", "/voices/settings/default"))
        return _decode(VoiceSettings, payload)

    async def get_voice_settings(self, voice_id: str) -> VoiceSettings:
        payload = unwrap(await self._transport.request("GET", f"/voices/{voice_id}/settings"))
        return _decode(VoiceSettings, payload)

    async def get_voice(self, voice_id: str, *queries: QueryParam) -> Voice:
        """
        Get metadata about a voice.

        Args:
            voice_id: ID of the voice.
            *queries: Query modifiers; ``with_settings`` populates ``Voice.settings``.
        """
        payload = unwrap(await self._transport.request("GET", f"/voices/{voice_id}", queries=queries))
        return _decode(Voice, payload)

    async def delete_voice(self, voice_id: str) -> None:
        unwrap(await self._transport.request("DELETE", f"/voices/{voice_id}"))

    async def edit_voice_settings(self, voice_id: str, settings: VoiceSettings) -> None:
        unwrap(
            await self._transport.request(
                "POST",
                f"/voices/{voice_id}/settings/edit",
                body=_encode(settings),
                content_type=CONTENT_TYPE_JSON,
            )
        )

    async def add_voice(self, voice_req: AddEditVoiceRequest) -> str:
        """
        Add a new voice to the user's voice lab.

        Args:
            voice_req: Name, samples and optional description and labels.

        Returns:
            ID of the new voice.

        Raises:
            OSError: If a sample file cannot be read. No request is sent.
        """
        form, content_type = await prepare_voice_form(voice_req)
        payload = unwrap(await self._transport.request("POST", "/voices/add", body=form, content_type=content_type))
        voice_id = _decode(AddVoiceResponse, payload).voice_id
        self._logger.debug("Voice added (voice_id=%s, samples=%d)", voice_id, len(voice_req.file_paths))
        return voice_id

    async def edit_voice(self, voice_id: str, voice_req: AddEditVoiceRequest) -> None:
        """
        Update an existing voice.

        Raises:
            OSError: If a sample file cannot be read. No request is sent.
        """
        form, content_type = await prepare_voice_form(voice_req)
        unwrap(await self._transport.request("POST", f"/voices/{voice_id}/edit", body=form, content_type=content_type))

    async def delete_sample(self, voice_id: str, sample_id: str) -> None:
        unwrap(await self._transport.request("DELETE", f"/voices/{voice_id}/samples/{sample_id}"))

    async def get_sample_audio(self, voice_id: str, sample_id: str) -> bytes:
        return unwrap(await self._transport.request("GET", f"/voices/{voice_id}/samples/{sample_id}/audio"))

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def get_history(self, *queries: QueryParam) -> tuple[HistoryPage, Optional[HistoryCursor]]:
        """
        Get one page of the generation history.

        Args:
            *queries: Query modifiers; ``page_size`` and ``start_after`` are relevant.

        Returns:
            The page and a cursor for the next page, or ``None`` on the last page.

        Examples:
            >>> page, cursor = await client.get_history(page_size(50))
            >>> while cursor is not None:
            ...     page, cursor = await cursor()
        """
        payload = unwrap(await self._transport.request("GET", "/history", queries=queries))
        page = _decode(HistoryPage, payload)
        self._logger.debug("History page retrieved (items=%d, has_more=%s)", len(page.history), page.has_more)
        return page, next_cursor(self.get_history, page, queries)

    def iter_history(self, *queries: QueryParam) -> AsyncIterator[HistoryPage]:
        """
        Iterate over every history page, fetching each one lazily.

        Examples:
            >>> async for page in client.iter_history(page_size(100)):
            ...     for item in page.history:
            ...         print(item.text)
        """
        return iter_pages(self.get_history, *queries)

    async def get_history_item(self, item_id: str) -> HistoryItem:
        payload = unwrap(await self._transport.request("GET", f"/history/{item_id}"))
        return _decode(HistoryItem, payload)

    async def delete_history_item(self, item_id: str) -> None:
        unwrap(await self._transport.request("DELETE", f"/history/{item_id}"))

    async def get_history_item_audio(self, item_id: str) -> bytes:
        return unwrap(await self._transport.request("GET", f"/history/{item_id}/audio"))

    async def download_history_audio(self, dl_req: DownloadHistoryRequest) -> bytes:
        """
        Download the audio of one or more history items.

        Returns:
            MPEG audio for a single item, or a zip archive of the items' audio
            files when several IDs are given.
        """
        return unwrap(
            await self._transport.request(
                "POST", "/history/download", body=_encode(dl_req), content_type=CONTENT_TYPE_JSON
            )
        )

    # ------------------------------------------------------------------
    # User
    # ------------------------------------------------------------------

    async def get_subscription(self) -> Subscription:
        """Get the user's subscription, including invoicing details."""
        payload = unwrap(await self._transport.request("GET", "/user/subscription"))
        return _decode(Subscription, payload)

    async def get_user(self) -> User:
        """
        Get the user's details.

        The embedded subscription has no invoicing details; use
        ``get_subscription`` for those.
        """
        payload = unwrap(await self._transport.request("GET", "/user"))
        return _decode(User, payload)

    async def close(self) -> None:
        """
        Close the client and cleanup all resources.

        This method is safe to call multiple times.
        """
        try:
            await self._transport.close()
        except Exception:
            pass  # Best effort cleanup


def _encode(record: BaseModel) -> bytes:
    return record.model_dump_json(exclude_none=True).encode("utf-8")


def _decode(model: type[_M], payload: bytes) -> _M:
    try:
        return model.model_validate_json(payload)
    except pydantic.ValidationError as e:
        raise DecodingError(f"Failed to decode {model.__name__}: {e}") from e
