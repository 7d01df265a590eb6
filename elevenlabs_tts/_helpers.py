"""
Utility functions for the ElevenLabs TTS client.
"""

from __future__ import annotations

import importlib.metadata
import inspect
import json
import os
from typing import Any

import aiofiles
import aiohttp
from aiohttp.payload import Payload

from ._models import AddEditVoiceRequest


async def prepare_voice_form(voice_req: AddEditVoiceRequest) -> tuple[Payload, str]:
    """
    Build the multipart body used to add or edit a voice.

    Every sample file is read before the form is assembled, so a path that
    cannot be opened raises without producing a partial body.

    Args:
        voice_req: Voice name, optional description and labels, and sample paths.

    Returns:
        Tuple of (encoded multipart payload, content type with boundary).

    Raises:
        OSError: If a sample file cannot be opened or read.

    Examples:
        >>> payload, content_type = await prepare_voice_form(
        ...     AddEditVoiceRequest(name="Narrator", file_paths=["sample.mp3"])
        ... )
        >>> content_type.startswith("multipart/form-data")
        True
    """
    files: list[tuple[str, bytes]] = []
    for path in voice_req.file_paths:
        async with aiofiles.open(path, "rb") as f:
            files.append((os.path.basename(path), await f.read()))

    form = aiohttp.FormData(default_to_multipart=True)
    form.add_field("name", voice_req.name)
    if voice_req.description:
        form.add_field("description", voice_req.description)
    if voice_req.labels:
        form.add_field("labels", json.dumps(voice_req.labels))
    for filename, content in files:
        form.add_field("files", content, filename=filename, content_type="application/octet-stream")

    payload = form()
    return payload, payload.content_type


async def write_chunk(sink: Any, chunk: bytes) -> None:
    """Write to a sync (``io.BytesIO``) or async (``aiofiles``) sink."""
    result = sink.write(chunk)
    if inspect.isawaitable(result):
        await result


def get_version() -> str:
    try:
        return importlib.metadata.version("elevenlabs-tts-client")
    except importlib.metadata.PackageNotFoundError:
        try:
            from . import __version__

            return __version__
        except ImportError:
            return "0.0.0"
