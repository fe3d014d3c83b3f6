"""Gemini text-generation client.

Thin REST adapter over the Gemini ``generateContent`` endpoint. Each call
makes exactly one HTTP request; failures are reported as ServiceError with
a message that is safe to show to the user.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config.constants import (
    API_CONNECT_TIMEOUT,
    API_MAX_RETRY_ATTEMPTS,
    API_READ_TIMEOUT_DEFAULT,
    GEMINI_API_BASE_URL,
    GEMINI_API_KEY_HEADER,
    GEMINI_DEFAULT_MODEL,
)
from domain.exceptions import MissingCredentialError, ServiceError

logger = logging.getLogger(__name__)

MSG_INVALID_KEY = "Gemini API 요청이 거부되었습니다. API Key를 확인해주세요."
MSG_QUOTA = "Gemini API 사용 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
MSG_UNAVAILABLE = "Gemini 서비스를 일시적으로 사용할 수 없습니다."
MSG_TIMEOUT = "Gemini API 응답 시간이 초과되었습니다."
MSG_NETWORK = "Gemini API에 연결할 수 없습니다. 네트워크를 확인해주세요."
MSG_MALFORMED = "Gemini API 응답을 해석할 수 없습니다."


def extract_text(payload: Any) -> str:
    """Pull the generated text out of a generateContent response.

    Returns an empty string when the response is well formed but carries
    no text (for example a blocked prompt).

    Raises:
        ServiceError: If the payload does not look like a Gemini response
    """
    if not isinstance(payload, dict):
        raise ServiceError(MSG_MALFORMED)

    candidates = payload.get("candidates")
    if not candidates:
        if "promptFeedback" in payload or candidates == []:
            return ""
        raise ServiceError(MSG_MALFORMED)

    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise ServiceError(MSG_MALFORMED)

    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        raise ServiceError(MSG_MALFORMED)

    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise ServiceError(MSG_MALFORMED)

    texts = [part.get("text", "") for part in parts if isinstance(part, dict)]
    return "".join(text for text in texts if isinstance(text, str))


def _message_for_status(status: Optional[int]) -> str:
    if status in (400, 401, 403):
        return MSG_INVALID_KEY
    if status == 429:
        return MSG_QUOTA
    if status is not None and status >= 500:
        return MSG_UNAVAILABLE
    return f"Gemini API 요청에 실패했습니다. (HTTP {status})"


class TextGenerationClient(ABC):
    """Abstract text-generation service."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        api_key: str,
        timeout: Optional[tuple[float, float]] = None,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Prompt text
            api_key: Credential for the service
            timeout: Optional (connect, read) timeout tuple

        Returns:
            Generated text (may be empty)

        Raises:
            ServiceError: On transport or service failure
        """


class GeminiTextClient(TextGenerationClient):
    """Gemini REST API implementation."""

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: str = GEMINI_API_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize client.

        Args:
            model: Model identifier (default gemini-2.5-flash)
            base_url: API base URL
            session: HTTP session (created when not given)
        """
        self._model = model or GEMINI_DEFAULT_MODEL
        self._base_url = base_url.rstrip("/")
        self._session = session if session is not None else self._create_session()

    @property
    def model(self) -> str:
        return self._model

    def _create_session(self) -> requests.Session:
        """Create HTTP session without automatic retries."""
        session = requests.Session()

        retries = Retry(
            total=API_MAX_RETRY_ATTEMPTS,
            connect=API_MAX_RETRY_ATTEMPTS,
            read=API_MAX_RETRY_ATTEMPTS,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retries)

        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def generate(
        self,
        prompt: str,
        api_key: str,
        timeout: Optional[tuple[float, float]] = None,
    ) -> str:
        """Send one generateContent request and return its text."""
        if not api_key:
            raise MissingCredentialError("API key is required")

        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
        }
        payload = self._request(
            f"{self._base_url}/models/{self._model}:generateContent",
            api_key=api_key,
            json_body=body,
            timeout=timeout,
        )
        return extract_text(payload)

    def _request(
        self,
        url: str,
        api_key: str,
        json_body: Dict[str, Any],
        timeout: Optional[tuple[float, float]] = None,
    ) -> Any:
        """POST to the Gemini API and return the parsed JSON body."""
        if timeout is None:
            timeout = (API_CONNECT_TIMEOUT, API_READ_TIMEOUT_DEFAULT)

        # The key travels in a header so it never shows up in URLs or error text
        headers = {
            "Content-Type": "application/json",
            GEMINI_API_KEY_HEADER: api_key,
        }

        try:
            response = self._session.request(
                method="POST",
                url=url,
                headers=headers,
                json=json_body,
                timeout=timeout,
            )
            response.raise_for_status()

        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.warning("Gemini API returned HTTP %s for model %s", status, self._model)
            raise ServiceError(_message_for_status(status), status_code=status) from exc

        except requests.Timeout as exc:
            logger.warning("Gemini API request timed out")
            raise ServiceError(MSG_TIMEOUT) from exc

        except requests.RequestException as exc:
            logger.warning("Network error calling Gemini API: %s", type(exc).__name__)
            raise ServiceError(MSG_NETWORK) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ServiceError(MSG_MALFORMED) from exc
