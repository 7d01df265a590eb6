"""
Async example walking the generation history page by page.
"""

import asyncio

from elevenlabs_tts import AsyncClient
from elevenlabs_tts import ElevenLabsError
from elevenlabs_tts import page_size


async def main() -> None:
    """Print every history item, fetching 20 per page."""

    async with AsyncClient() as client:
        try:
            user = await client.get_user()
            print(f"Tier: {user.subscription.tier} ({user.subscription.character_count} characters used)")

            page, cursor = await client.get_history(page_size(20))
            pages = 1
            while True:
                for item in page.history:
                    print(f"{item.history_item_id}  {item.voice_name:<12} {item.text[:60]!r}")
                if cursor is None:
                    break
                page, cursor = await cursor()
                pages += 1

            print(f"Read {pages} page(s)")

        except ElevenLabsError as e:
            print(f"Listing history failed: {e}")


if __name__ == "__main__":
    asyncio.run(main())
