from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING
from typing import Optional

if TYPE_CHECKING:
    from ._models import APIErrorDetail
    from ._models import ValidationErrorItem


class ElevenLabsError(Exception):
    """Base class for every error raised or returned by the client."""

    pass


class ConfigurationError(ElevenLabsError):
    """Raised when there's an error in configuration."""

    pass


class TransportError(ElevenLabsError):
    """Raised when the request never produced an HTTP response."""

    is_timeout = False


class ConnectionError(TransportError):
    """Raised when connection to the service fails."""

    pass


class TimeoutError(TransportError):
    """
    Raised when a request's bounded scope ends before the exchange completes.

    This covers both the per-call deadline expiring and the client's
    cancellation event being set; ``cancelled`` tells them apart.
    """

    is_timeout = True

    def __init__(self, message: str, *, cancelled: bool = False) -> None:
        super().__init__(message)
        self.cancelled = cancelled


class DecodingError(ElevenLabsError):
    """Raised when a response payload is not the JSON shape it should be."""

    pass


class ClientError(ElevenLabsError):
    """Base for 4xx responses that carry a structured error payload."""

    def __init__(self, status_code: int) -> None:
        super().__init__(status_code)
        self.status_code = status_code


class APIError(ClientError):
    """
    Error payload returned with 400 and 401 responses.

    Attributes:
        status_code: HTTP status of the response.
        detail: Decoded ``detail`` object with a semantic ``status`` (for
            example ``"needs_authorization"``), a human readable ``message``
            and optional ``additional_info``.
    """

    def __init__(self, status_code: int, detail: APIErrorDetail) -> None:
        super().__init__(status_code)
        self.detail = detail

    @property
    def status(self) -> str:
        return self.detail.status

    @property
    def message(self) -> str:
        return self.detail.message

    def __str__(self) -> str:
        return f"api error - {self.detail.message}"


class ValidationError(ClientError):
    """
    Error payload returned with 422 responses.

    Every reported issue is kept in ``detail`` but the string form only
    surfaces the first one.
    """

    def __init__(self, status_code: int, detail: list[ValidationErrorItem]) -> None:
        super().__init__(status_code)
        self.detail = detail

    @property
    def message(self) -> str:
        return self.detail[0].msg if self.detail else ""

    def __str__(self) -> str:
        return f"validation error: {self.message}"


class ServerError(ElevenLabsError):
    """Any other non-200 response. The body is not inspected."""

    def __init__(self, status_code: int, reason: Optional[str] = None) -> None:
        super().__init__(status_code, reason)
        self.status_code = status_code
        self.reason = _status_text(status_code) or reason or ""

    def __str__(self) -> str:
        return f'unexpected HTTP status "{self.status_code} {self.reason}"'


def _status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""
