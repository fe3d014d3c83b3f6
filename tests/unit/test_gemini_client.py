"""Tests for the Gemini REST client (HTTP mocked)."""

from unittest.mock import Mock

import pytest
import requests

from domain.exceptions import MissingCredentialError, ServiceError
from infrastructure.api.gemini_client import (
    MSG_INVALID_KEY,
    MSG_MALFORMED,
    MSG_NETWORK,
    MSG_QUOTA,
    MSG_TIMEOUT,
    MSG_UNAVAILABLE,
    GeminiTextClient,
    extract_text,
)

API_KEY = "AIzaSy-test-key"


def ok_response(payload) -> Mock:
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


def error_response(status: int) -> Mock:
    response = Mock()
    response.status_code = status
    response.raise_for_status.side_effect = requests.HTTPError(
        f"{status} Error for url", response=response
    )
    return response


def text_payload(*texts: str) -> dict:
    return {
        "candidates": [
            {"content": {"parts": [{"text": text} for text in texts], "role": "model"}}
        ]
    }


@pytest.fixture
def session() -> Mock:
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session) -> GeminiTextClient:
    return GeminiTextClient(model="gemini-test", session=session)


class TestGenerate:
    def test_returns_text(self, client, session) -> None:
        session.request.return_value = ok_response(text_payload("## 분석", " 결과"))

        assert client.generate("prompt", API_KEY) == "## 분석 결과"

    def test_request_shape(self, client, session) -> None:
        session.request.return_value = ok_response(text_payload("ok"))

        client.generate("hello", API_KEY, timeout=(1.0, 2.0))

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/models/gemini-test:generateContent")
        assert API_KEY not in kwargs["url"]
        assert kwargs["headers"]["x-goog-api-key"] == API_KEY
        assert kwargs["json"] == {"contents": [{"parts": [{"text": "hello"}]}]}
        assert kwargs["timeout"] == (1.0, 2.0)

    def test_single_attempt(self, client, session) -> None:
        session.request.return_value = error_response(500)

        with pytest.raises(ServiceError):
            client.generate("prompt", API_KEY)

        assert session.request.call_count == 1

    def test_missing_key(self, client, session) -> None:
        with pytest.raises(MissingCredentialError):
            client.generate("prompt", "")
        session.request.assert_not_called()

    @pytest.mark.parametrize(
        "status, message",
        [
            (400, MSG_INVALID_KEY),
            (401, MSG_INVALID_KEY),
            (403, MSG_INVALID_KEY),
            (429, MSG_QUOTA),
            (500, MSG_UNAVAILABLE),
            (503, MSG_UNAVAILABLE),
        ],
    )
    def test_http_errors(self, client, session, status, message) -> None:
        session.request.return_value = error_response(status)

        with pytest.raises(ServiceError) as exc_info:
            client.generate("prompt", API_KEY)

        assert str(exc_info.value) == message
        assert exc_info.value.status_code == status
        assert API_KEY not in str(exc_info.value)

    def test_timeout(self, client, session) -> None:
        session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(ServiceError, match=MSG_TIMEOUT):
            client.generate("prompt", API_KEY)

    def test_connection_error(self, client, session) -> None:
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ServiceError, match=MSG_NETWORK):
            client.generate("prompt", API_KEY)

    def test_invalid_json(self, client, session) -> None:
        response = ok_response(None)
        response.json.side_effect = ValueError("no json")
        session.request.return_value = response

        with pytest.raises(ServiceError, match=MSG_MALFORMED):
            client.generate("prompt", API_KEY)

    def test_default_model(self, session) -> None:
        assert GeminiTextClient(session=session).model == "gemini-2.5-flash"


class TestExtractText:
    def test_blocked_prompt_gives_empty_text(self) -> None:
        assert extract_text({"promptFeedback": {"blockReason": "SAFETY"}}) == ""

    def test_empty_candidates(self) -> None:
        assert extract_text({"candidates": []}) == ""

    def test_candidate_without_parts(self) -> None:
        assert extract_text({"candidates": [{"finishReason": "MAX_TOKENS"}]}) == ""

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "text",
            {"unexpected": 1},
            {"candidates": {"first": {}}},
            {"candidates": ["text"]},
            {"candidates": [{"content": ["x"]}]},
            {"candidates": [{"content": {"parts": "x"}}]},
        ],
    )
    def test_malformed(self, payload) -> None:
        with pytest.raises(ServiceError):
            extract_text(payload)

    def test_malformed_reply_surfaces_as_service_error(self, client, session) -> None:
        session.request.return_value = ok_response({"candidates": [{"content": ["x"]}]})

        with pytest.raises(ServiceError, match=MSG_MALFORMED):
            client.generate("prompt", API_KEY)
