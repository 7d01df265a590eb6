__version__ = "0.0.0"

from ._async_client import AsyncClient
from ._defaults import DefaultClient
from ._exceptions import APIError
from ._exceptions import ClientError
from ._exceptions import ConfigurationError
from ._exceptions import ConnectionError
from ._exceptions import DecodingError
from ._exceptions import ElevenLabsError
from ._exceptions import ServerError
from ._exceptions import TimeoutError
from ._exceptions import TransportError
from ._exceptions import ValidationError
from ._helpers import prepare_voice_form
from ._models import AddEditVoiceRequest
from ._models import APIErrorDetail
from ._models import ClientConfig
from ._models import DownloadHistoryRequest
from ._models import Feedback
from ._models import FineTuning
from ._models import HistoryItem
from ._models import HistoryPage
from ._models import Invoice
from ._models import Language
from ._models import Model
from ._models import Subscription
from ._models import TextToSpeechRequest
from ._models import User
from ._models import UserSubscription
from ._models import ValidationErrorItem
from ._models import Voice
from ._models import VoiceSample
from ._models import VoiceSettings
from ._models import VoiceSharing
from ._pagination import HistoryCursor
from ._query import QueryParam
from ._query import latency_optimizations
from ._query import page_size
from ._query import start_after
from ._query import with_settings
from ._transport import Outcome
from ._transport import Success
from ._transport import Transport
from ._transport import unwrap

__all__ = [
    "AddEditVoiceRequest",
    "APIError",
    "APIErrorDetail",
    "AsyncClient",
    "ClientConfig",
    "ClientError",
    "ConfigurationError",
    "ConnectionError",
    "DecodingError",
    "DefaultClient",
    "DownloadHistoryRequest",
    "ElevenLabsError",
    "Feedback",
    "FineTuning",
    "HistoryCursor",
    "HistoryItem",
    "HistoryPage",
    "Invoice",
    "Language",
    "Model",
    "Outcome",
    "QueryParam",
    "ServerError",
    "Subscription",
    "Success",
    "TextToSpeechRequest",
    "TimeoutError",
    "Transport",
    "TransportError",
    "User",
    "UserSubscription",
    "ValidationError",
    "ValidationErrorItem",
    "Voice",
    "VoiceSample",
    "VoiceSettings",
    "VoiceSharing",
    "latency_optimizations",
    "page_size",
    "prepare_voice_form",
    "start_after",
    "unwrap",
    "with_settings",
]
