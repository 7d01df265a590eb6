"""
Models for the ElevenLabs text-to-speech client.

This module contains the client configuration and the data models mirroring
the JSON documents exchanged with the ElevenLabs API. Response models default
every field so partially populated documents still decode.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any
from typing import Optional
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from ._exceptions import ConfigurationError

DEFAULT_URL = "https://api.elevenlabs.io/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass
class ClientConfig:
    """
    Configuration shared by every request a client makes.

    ``api_key`` and ``timeout`` are read at the start of each call, so updating
    them on a live config affects the next request. Nothing is locked while a
    request runs; concurrent updates are last-writer-wins.

    Attributes:
        api_key: ElevenLabs API key. An empty key sends unauthenticated requests.
        url: Base address every request path is appended to.
        timeout: Upper bound in seconds for one whole exchange, including
            streaming the body. ``None`` disables the bound.
        connect_timeout: Timeout in seconds for connection establishment.
        chunk_size: Bytes read per chunk when streaming into a sink.
        cancel_event: Optional event acting as the parent cancellation scope.
            Once set, in-flight and future requests fail with TimeoutError.
    """

    api_key: str = ""
    url: str = DEFAULT_URL
    timeout: Optional[float] = DEFAULT_TIMEOUT
    connect_timeout: float = 10.0
    chunk_size: int = 4096
    cancel_event: Optional[asyncio.Event] = None

    def __post_init__(self) -> None:
        self.set_timeout(self.timeout)
        if self.chunk_size <= 0:
            raise ConfigurationError("chunk_size must be positive")

    def set_timeout(self, timeout: Optional[float]) -> None:
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout

    def set_api_key(self, api_key: Optional[str]) -> None:
        self.api_key = api_key or ""


_R = TypeVar("_R", bound="_Record")


class _Record(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls: type[_R], data: dict[str, Any]) -> _R:
        return cls.model_validate(data)


# ==============================================================================
# ERROR PAYLOADS
# ==============================================================================


class APIErrorDetail(_Record):
    """Body of ``detail`` in 400 and 401 responses."""

    status: str = ""
    message: str = ""
    additional_info: Optional[str] = None


class APIErrorResponse(_Record):
    detail: APIErrorDetail = Field(default_factory=APIErrorDetail)


class ValidationErrorItem(_Record):
    """
    One field-level problem from a 422 response.

    Attributes:
        loc: Path to the offending field, e.g. ``["body", "text"]``. Integer
            segments are kept as strings and a bare string is wrapped in a list.
        msg: Human readable message.
        type: Error type tag, e.g. ``"value_error"``.
    """

    loc: list[str] = Field(default_factory=list)
    msg: str = ""
    type: str = ""

    @field_validator("loc", mode="before")
    @classmethod
    def _normalise_loc(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        if isinstance(value, list):
            return [str(segment) for segment in value]
        return value


class ValidationErrorResponse(_Record):
    detail: list[ValidationErrorItem] = Field(default_factory=list)


# ==============================================================================
# MODELS AND VOICES
# ==============================================================================


class Language(_Record):
    language_id: str = ""
    name: str = ""


class Model(_Record):
    """A synthesis model and its capabilities."""

    can_be_finetuned: bool = False
    can_do_text_to_speech: bool = False
    can_do_voice_conversion: bool = False
    can_use_speaker_boost: bool = False
    can_use_style: bool = False
    description: str = ""
    languages: list[Language] = Field(default_factory=list)
    max_characters_request_free_user: int = 0
    max_characters_request_subscribed_user: int = 0
    model_id: str = ""
    name: str = ""
    requires_alpha_access: bool = False
    serves_pro_voices: bool = False
    token_cost_factor: float = 0.0


class VoiceSettings(_Record):
    """
    Voice tuning parameters.

    ``style`` and ``use_speaker_boost`` are only sent when set.
    """

    similarity_boost: float = 0.0
    stability: float = 0.0
    style: Optional[float] = None
    use_speaker_boost: Optional[bool] = None


class VoiceSharing(_Record):
    cloned_by_count: int = 0
    date_unix: int = 0
    description: str = ""
    disable_at_unix: bool = False
    enabled_in_library: bool = False
    financial_reward_enabled: bool = False
    free_users_allowed: bool = False
    history_item_sample_id: str = ""
    labels: dict[str, str] = Field(default_factory=dict)
    liked_by_count: int = 0
    live_moderation_enabled: bool = False
    name: str = ""
    notice_period: int = 0
    original_voice_id: str = ""
    public_owner_id: str = ""
    rate: float = 0.0
    review_message: str = ""
    review_status: str = ""
    status: str = ""
    voice_mixing_allowed: bool = False
    whitelisted_emails: list[str] = Field(default_factory=list)


class VoiceSample(_Record):
    file_name: str = ""
    hash: str = ""
    mime_type: str = ""
    sample_id: str = ""
    size_bytes: int = 0


class File(_Record):
    file_id: str = ""
    file_name: str = ""
    mime_type: str = ""
    size_bytes: int = 0
    upload_date_unix: int = 0


class ManualVerification(_Record):
    extra_text: str = ""
    files: list[File] = Field(default_factory=list)
    request_time_unix: int = 0


class Recording(_Record):
    mime_type: str = ""
    recording_id: str = ""
    size_bytes: int = 0
    transcription: str = ""
    upload_date_unix: int = 0


class VerificationAttempt(_Record):
    accepted: bool = False
    date_unix: int = 0
    levenshtein_distance: float = 0.0
    recording: Recording = Field(default_factory=Recording)
    similarity: float = 0.0
    text: str = ""


class FineTuning(_Record):
    fine_tuning_requested: bool = False
    finetuning_state: str = ""
    is_allowed_to_fine_tune: bool = False
    language: str = ""
    manual_verification: ManualVerification = Field(default_factory=ManualVerification)
    manual_verification_requested: bool = False
    slice_ids: list[str] = Field(default_factory=list)
    verification_attempts: list[VerificationAttempt] = Field(default_factory=list)
    verification_attempts_count: int = 0
    verification_failures: list[str] = Field(default_factory=list)


class Voice(_Record):
    """
    Voice metadata.

    ``settings`` is only populated when the voice is fetched with the
    ``with_settings()`` query modifier.
    """

    available_for_tiers: list[str] = Field(default_factory=list)
    category: str = ""
    description: str = ""
    fine_tuning: FineTuning = Field(default_factory=FineTuning)
    high_quality_base_model_ids: list[str] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    name: str = ""
    preview_url: str = ""
    samples: list[VoiceSample] = Field(default_factory=list)
    settings: Optional[VoiceSettings] = None
    sharing: VoiceSharing = Field(default_factory=VoiceSharing)
    voice_id: str = ""


class GetVoicesResponse(_Record):
    voices: list[Voice] = Field(default_factory=list)


class AddVoiceResponse(_Record):
    voice_id: str = ""


# ==============================================================================
# REQUEST BODIES
# ==============================================================================


class TextToSpeechRequest(_Record):
    """
    Body of a synthesis request.

    Attributes:
        text: Text to convert to speech.
        model_id: Optional model identifier; the API default is used when unset.
        voice_settings: Optional settings overriding the voice's stored ones.

    Examples:
        >>> request = TextToSpeechRequest(text="Hello world", model_id="eleven_multilingual_v2")
        >>> request.to_dict()
        {'text': 'Hello world', 'model_id': 'eleven_multilingual_v2'}
    """

    text: str
    model_id: Optional[str] = None
    voice_settings: Optional[VoiceSettings] = None


class AddEditVoiceRequest(_Record):
    """
    Voice to add to (or update in) the user's voice lab.

    Sent as a multipart form, see ``prepare_voice_form``.

    Attributes:
        name: Display name of the voice.
        file_paths: Paths of audio samples to upload.
        description: Optional description.
        labels: Optional labels, sent as a JSON object.
    """

    name: str
    file_paths: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    labels: dict[str, str] = Field(default_factory=dict)


class DownloadHistoryRequest(_Record):
    history_item_ids: list[str] = Field(default_factory=list)


# ==============================================================================
# HISTORY
# ==============================================================================


class Feedback(_Record):
    audio_quality: bool = False
    emotions: bool = False
    feedback: str = ""
    glitches: bool = False
    inaccurate_clone: bool = False
    other: bool = False
    review_status: Optional[str] = None
    thumbs_up: bool = False


class HistoryItem(_Record):
    character_count_change_from: int = 0
    character_count_change_to: int = 0
    content_type: str = ""
    date_unix: int = 0
    feedback: Feedback = Field(default_factory=Feedback)
    history_item_id: str = ""
    model_id: str = ""
    request_id: str = ""
    settings: VoiceSettings = Field(default_factory=VoiceSettings)
    share_link_id: str = ""
    state: str = ""
    text: str = ""
    voice_category: str = ""
    voice_id: str = ""
    voice_name: str = ""


class HistoryPage(_Record):
    """
    One page of the generation history.

    Attributes:
        history: Items on this page.
        last_history_item_id: ID to continue after when fetching the next page.
        has_more: Whether another page exists.
    """

    history: list[HistoryItem] = Field(default_factory=list)
    last_history_item_id: str = ""
    has_more: bool = False


# ==============================================================================
# USER AND SUBSCRIPTION
# ==============================================================================


class Invoice(_Record):
    amount_due_cents: int = 0
    next_payment_attempt_unix: int = 0


class UserSubscription(_Record):
    """
    Subscription as embedded in the ``User`` document.

    The API omits invoicing details here; use ``AsyncClient.get_subscription``
    to read them.
    """

    allowed_to_extend_character_limit: bool = False
    can_extend_character_limit: bool = False
    can_extend_voice_limit: bool = False
    can_use_instant_voice_cloning: bool = False
    can_use_professional_voice_cloning: bool = False
    character_count: int = 0
    character_limit: int = 0
    currency: str = ""
    next_character_count_reset_unix: int = 0
    voice_limit: int = 0
    professional_voice_limit: int = 0
    status: str = ""
    tier: str = ""
    max_voice_add_edits: int = 0
    voice_add_edit_counter: int = 0


class Subscription(UserSubscription):
    """Standalone subscription resource, including invoicing details."""

    has_open_invoices: bool = False
    next_invoice: Optional[Invoice] = None


class User(_Record):
    subscription: UserSubscription = Field(default_factory=UserSubscription)
    first_name: Optional[str] = None
    is_new_user: bool = False
    is_onboarding_complete: bool = False
    xi_api_key: str = ""
    can_use_delayed_payment_methods: bool = False
