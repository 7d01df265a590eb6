import json

import pytest
from _utils import MOCK_API_KEY
from _utils import MockResponse
from _utils import get_client
from _utils import mock_api

from elevenlabs_tts import APIError
from elevenlabs_tts import AsyncClient
from elevenlabs_tts import DecodingError
from elevenlabs_tts import DownloadHistoryRequest
from elevenlabs_tts import ServerError
from elevenlabs_tts import TextToSpeechRequest
from elevenlabs_tts import TimeoutError
from elevenlabs_tts import ValidationError
from elevenlabs_tts import VoiceSettings
from elevenlabs_tts import latency_optimizations
from elevenlabs_tts import with_settings

SETTINGS_JSON = {"similarity_boost": 0.75, "stability": 0.5}


@pytest.mark.asyncio
async def test_text_to_speech():
    async with mock_api(MockResponse(body=b"mp3-bytes", content_type="audio/mpeg")) as api:
        async with get_client(api.url) as client:
            audio = await client.text_to_speech(
                "voice-1", TextToSpeechRequest(text="Test text", model_id="model1"), latency_optimizations(2)
            )

    assert audio == b"mp3-bytes"
    assert api.last.method == "POST"
    assert api.last.path == "/v1/text-to-speech/voice-1"
    assert api.last.query_string == "optimize_streaming_latency=2"
    assert api.last.headers["Content-Type"] == "application/json"
    assert json.loads(api.last.body) == {"text": "Test text", "model_id": "model1"}


@pytest.mark.asyncio
async def test_text_to_speech_validation_error():
    body = {"detail": [{"loc": ["body", "text"], "msg": "field required", "type": "value_error"}]}
    async with mock_api(MockResponse(status=422, body=body)) as api:
        async with get_client(api.url) as client:
            with pytest.raises(ValidationError, match="validation error: field required"):
                await client.text_to_speech("voice-1", TextToSpeechRequest(text=""))


@pytest.mark.asyncio
async def test_text_to_speech_timeout():
    async with mock_api(MockResponse(body=b"late", delay=1.0)) as api:
        async with get_client(api.url, timeout=0.1) as client:
            with pytest.raises(TimeoutError) as exc_info:
                await client.text_to_speech("voice-1", TextToSpeechRequest(text="hi"))

    assert exc_info.value.is_timeout


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401])
async def test_get_models_api_error(status):
    body = {"detail": {"status": "needs_authorization", "message": "Invalid API key"}}
    async with mock_api(MockResponse(status=status, body=body)) as api:
        async with get_client(api.url) as client:
            with pytest.raises(APIError) as exc_info:
                await client.get_models()

    assert str(exc_info.value) == "api error - Invalid API key"
    assert exc_info.value.status_code == status


@pytest.mark.asyncio
async def test_get_models():
    models = [
        {"model_id": "eleven_monolingual_v1", "name": "Eleven English v1", "languages": [{"language_id": "en", "name": "English"}]},
        {"model_id": "eleven_multilingual_v2", "can_use_style": True},
    ]
    async with mock_api(MockResponse(body=models)) as api:
        async with get_client(api.url) as client:
            result = await client.get_models()

    assert [m.model_id for m in result] == ["eleven_monolingual_v1", "eleven_multilingual_v2"]
    assert result[0].languages[0].name == "English"
    assert result[1].can_use_style is True
    assert api.last.path == "/v1/models"


@pytest.mark.asyncio
async def test_get_models_malformed_payload():
    async with mock_api(MockResponse(body=b'{"not": "a list"')) as api:
        async with get_client(api.url) as client:
            with pytest.raises(DecodingError):
                await client.get_models()


@pytest.mark.asyncio
async def test_get_voices():
    async with mock_api(MockResponse(body={"voices": [{"voice_id": "a", "name": "A"}, {"voice_id": "b"}]})) as api:
        async with get_client(api.url) as client:
            voices = await client.get_voices()

    assert [v.voice_id for v in voices] == ["a", "b"]
    assert api.last.path == "/v1/voices"


@pytest.mark.asyncio
async def test_get_voice_with_settings():
    async with mock_api(MockResponse(body={"voice_id": "a", "settings": SETTINGS_JSON})) as api:
        async with get_client(api.url) as client:
            voice = await client.get_voice("a", with_settings())

    assert voice.settings == VoiceSettings(similarity_boost=0.75, stability=0.5)
    assert api.last.path == "/v1/voices/a"
    assert api.last.query_string == "with_settings=true"


@pytest.mark.asyncio
async def test_voice_settings_endpoints():
    async with mock_api(MockResponse(body=SETTINGS_JSON)) as api:
        async with get_client(api.url) as client:
            default = await client.get_default_voice_settings()
            settings = await client.get_voice_settings("a")
            await client.edit_voice_settings("a", VoiceSettings(similarity_boost=0.1, stability=0.2, style=0.3))

    assert default == settings == VoiceSettings(similarity_boost=0.75, stability=0.5)
    assert [(r.method, r.path) for r in api.requests] == [
        ("GET", "/v1/voices/settings/default"),
        ("GET", "/v1/voices/a/settings"),
        ("POST", "/v1/voices/a/settings/edit"),
    ]
    assert json.loads(api.last.body) == {"similarity_boost": 0.1, "stability": 0.2, "style": 0.3}


@pytest.mark.asyncio
async def test_delete_endpoints():
    async with mock_api(MockResponse(body={})) as api:
        async with get_client(api.url) as client:
            await client.delete_voice("v")
            await client.delete_sample("v", "s")
            await client.delete_history_item("h")

    assert [(r.method, r.path) for r in api.requests] == [
        ("DELETE", "/v1/voices/v"),
        ("DELETE", "/v1/voices/v/samples/s"),
        ("DELETE", "/v1/history/h"),
    ]


@pytest.mark.asyncio
async def test_delete_voice_server_error():
    async with mock_api(MockResponse(status=502)) as api:
        async with get_client(api.url) as client:
            with pytest.raises(ServerError, match="502"):
                await client.delete_voice("v")


@pytest.mark.asyncio
async def test_audio_endpoints():
    async with mock_api(MockResponse(body=b"audio", content_type="audio/mpeg")) as api:
        async with get_client(api.url) as client:
            sample = await client.get_sample_audio("v", "s")
            item = await client.get_history_item_audio("h")
            archive = await client.download_history_audio(DownloadHistoryRequest(history_item_ids=["h1", "h2"]))

    assert sample == item == archive == b"audio"
    assert [(r.method, r.path) for r in api.requests] == [
        ("GET", "/v1/voices/v/samples/s/audio"),
        ("GET", "/v1/history/h/audio"),
        ("POST", "/v1/history/download"),
    ]
    assert json.loads(api.last.body) == {"history_item_ids": ["h1", "h2"]}


@pytest.mark.asyncio
async def test_get_history_item():
    item = {"history_item_id": "h", "text": "Hello", "settings": SETTINGS_JSON, "feedback": {"thumbs_up": True}}
    async with mock_api(MockResponse(body=item)) as api:
        async with get_client(api.url) as client:
            result = await client.get_history_item("h")

    assert result.text == "Hello"
    assert result.feedback.thumbs_up is True
    assert result.feedback.review_status is None
    assert api.last.path == "/v1/history/h"


@pytest.mark.asyncio
async def test_user_and_subscription():
    subscription = {"tier": "creator", "has_open_invoices": False, "next_invoice": {"amount_due_cents": 2200}}
    async with mock_api(
        MockResponse(body=subscription),
        MockResponse(body={"subscription": {"tier": "creator"}, "is_new_user": True}),
    ) as api:
        async with get_client(api.url) as client:
            sub = await client.get_subscription()
            user = await client.get_user()

    assert sub.next_invoice is not None
    assert sub.next_invoice.amount_due_cents == 2200
    assert user.subscription.tier == "creator"
    assert user.is_new_user is True
    assert [r.path for r in api.requests] == ["/v1/user/subscription", "/v1/user"]


@pytest.mark.asyncio
async def test_client_reads_environment(monkeypatch):
    monkeypatch.setenv("ELEVENLABS_API_KEY", MOCK_API_KEY)
    async with mock_api(MockResponse(body=[])) as api:
        monkeypatch.setenv("ELEVENLABS_URL", api.url)
        async with AsyncClient(timeout=2.0) as client:
            await client.get_models()

    assert client.config.timeout == 2.0
    assert api.last.headers["xi-api-key"] == MOCK_API_KEY


@pytest.mark.asyncio
async def test_explicit_empty_key_overrides_environment(monkeypatch):
    monkeypatch.setenv("ELEVENLABS_API_KEY", MOCK_API_KEY)
    async with mock_api(MockResponse(body=[])) as api:
        async with AsyncClient("", url=api.url) as client:
            await client.get_models()

    assert "xi-api-key" not in api.last.headers
