"""Error taxonomy for content-assist.

Every failure that leaves the core is a ProviderError carrying one of a
closed set of kinds, so callers can branch on ``error.kind`` and show
``str(error)`` to the user.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds. Values are stable string codes."""

    NO_API_KEY = "no_api_key"
    REQUEST_FAILED = "api_request_failed"
    API_ERROR = "api_error"
    INVALID_RESPONSE = "invalid_response"
    INVALID_TRANSLATION = "invalid_translation"
    EMPTY_CONTENT = "empty_content"
    MISSING_TARGET_LANGUAGE = "missing_target_lang"
    UNSUPPORTED_LANGUAGE = "invalid_language"
    FILE_NOT_FOUND = "file_not_found"
    FILE_READ_ERROR = "file_read_error"
    MISSING_REQUIRED_FIELD = "missing_required_field"


class ProviderError(Exception):
    """Raised for any failure in building, sending, or parsing a request.

    Attributes:
        kind: Failure kind
        message: Human-readable description
        status: HTTP status code (API errors only)
    """

    def __init__(self, kind: ErrorKind, message: str, status: int | None = None):
        self.kind = kind
        self.message = message
        self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.kind is ErrorKind.API_ERROR:
            return f"OpenAI API error ({self.status}): {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"ProviderError({self.kind.value!r}, {self.message!r}, status={self.status!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON callers.

        Returns:
            Dict with 'code', 'message' and 'status'
        """
        return {
            "code": self.kind.value,
            "message": str(self),
            "status": self.status,
        }


def no_api_key(message: str = "OpenAI API key is not configured.") -> ProviderError:
    return ProviderError(ErrorKind.NO_API_KEY, message)


def missing_field(field_name: str) -> ProviderError:
    return ProviderError(
        ErrorKind.MISSING_REQUIRED_FIELD,
        f"{field_name.replace('_', ' ').capitalize()} is required.",
    )
