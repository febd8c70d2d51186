"""HTTP transport for the OpenAI API.

Sends one blocking request per call with bearer auth and a fixed timeout,
and maps every failure onto a ProviderError.
"""

import json
import time
from typing import Any

import httpx

from .credentials import CredentialStore
from .errors import ErrorKind, ProviderError, no_api_key
from .logging import get_logger
from .models import ClientConfig


logger = get_logger("transport")

UNKNOWN_API_ERROR = "Unknown API error"


def extract_error_message(data: Any) -> str:
    """Pull error.message out of an error envelope.

    Args:
        data: Decoded response body (any JSON value, or None)

    Returns:
        The provider's message, or a generic fallback
    """
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return UNKNOWN_API_ERROR


class Transport:
    """Blocking JSON client bound to one API base URL."""

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        base_url: str = ClientConfig.base_url,
        timeout: float = ClientConfig.timeout,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the transport.

        Args:
            credentials: Source of the API key, read on every request
            base_url: API base URL
            timeout: Request timeout in seconds
            http_client: Client to send with; one is created if omitted
        """
        self.credentials = credentials
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def send(
        self,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        method: str = "POST",
    ) -> dict[str, Any]:
        """Make a request to the API.

        Args:
            endpoint: Path below the base URL (e.g. '/chat/completions')
            payload: JSON body, sent for POST requests only
            method: HTTP method

        Returns:
            Decoded JSON object

        Raises:
            ProviderError: NO_API_KEY, REQUEST_FAILED, API_ERROR or INVALID_RESPONSE
        """
        api_key = self.credentials.get()
        if not api_key:
            raise no_api_key()

        method = method.upper()
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        body = json.dumps(payload) if method == "POST" and payload else None

        started = time.monotonic()
        try:
            response = self._client.request(
                method,
                url,
                headers=headers,
                content=body,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise ProviderError(
                ErrorKind.REQUEST_FAILED,
                f"API request failed: {str(e) or type(e).__name__}",
            ) from e

        elapsed = time.monotonic() - started
        logger.debug("%s %s -> %d (%.2fs)", method, endpoint, response.status_code, elapsed)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not 200 <= response.status_code < 300:
            message = extract_error_message(data)
            logger.warning("%s %s returned %d: %s", method, endpoint, response.status_code, message)
            raise ProviderError(ErrorKind.API_ERROR, message, status=response.status_code)

        if not isinstance(data, dict):
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "Invalid JSON response from OpenAI API.")

        return data
