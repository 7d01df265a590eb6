"""
Async example converting text to speech, in one piece and streamed to a file.
"""

import asyncio
import os

import aiofiles

from elevenlabs_tts import AsyncClient
from elevenlabs_tts import ElevenLabsError
from elevenlabs_tts import TextToSpeechRequest
from elevenlabs_tts import VoiceSettings
from elevenlabs_tts import latency_optimizations

TEXT = "Welcome to the future of audio generation from text!"
VOICE_ID = os.getenv("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
OUTPUT_FILE = "output.mp3"
STREAM_FILE = "output_stream.mp3"


async def main() -> None:
    """Run text-to-speech example."""

    # Reads ELEVENLABS_API_KEY from the environment
    async with AsyncClient(timeout=60.0) as client:
        try:
            tts_req = TextToSpeechRequest(
                text=TEXT,
                model_id="eleven_multilingual_v2",
                voice_settings=VoiceSettings(stability=0.5, similarity_boost=0.75),
            )

            print(f"Generating speech from text: {TEXT}")
            audio = await client.text_to_speech(VOICE_ID, tts_req)
            async with aiofiles.open(OUTPUT_FILE, "wb") as f:
                await f.write(audio)
            print(f"Speech saved to {OUTPUT_FILE} ({len(audio)} bytes)")

            # Stream straight to disk with lower first-byte latency
            async with aiofiles.open(STREAM_FILE, "wb") as f:
                await client.text_to_speech_stream(f, VOICE_ID, tts_req, latency_optimizations(3))
            print(f"Streamed speech saved to {STREAM_FILE}")

        except ElevenLabsError as e:
            print(f"Speech generation failed: {e}")


if __name__ == "__main__":
    asyncio.run(main())
