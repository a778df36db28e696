from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from intake.analysis.exceptions import AnalysisError, AnalysisNetworkError
from intake.analysis.openai_client_adapter import OpenAIClientAdapter

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _complete(adapter: OpenAIClientAdapter) -> str:
    return adapter.create_chat_completion(
        model="m",
        temperature=0.3,
        max_tokens=2000,
        system_prompt="system",
        user_prompt="user",
    )


def _make_adapter(mock_client: MagicMock) -> OpenAIClientAdapter:
    with patch(
        "intake.analysis.openai_client_adapter.openai.OpenAI",
        return_value=mock_client,
    ):
        return OpenAIClientAdapter(api_key="k", timeout_seconds=30, base_url=None)


class TestOpenAIClientAdapter:
    def test_returns_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("Summary")

        assert _complete(_make_adapter(mock_client)) == "Summary"

    def test_sends_system_and_user_messages(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response("Summary")

        _complete(_make_adapter(mock_client))

        mock_client.chat.completions.create.assert_called_once_with(
            model="m",
            temperature=0.3,
            max_tokens=2000,
            messages=[
                {"role": "system", "content": "system"},
                {"role": "user", "content": "user"},
            ],
        )

    def test_disables_sdk_retries(self) -> None:
        with patch("intake.analysis.openai_client_adapter.openai.OpenAI") as mock_openai:
            OpenAIClientAdapter(api_key="k", timeout_seconds=12, base_url="https://x/v1")

        mock_openai.assert_called_once_with(
            api_key="k",
            timeout=12,
            base_url="https://x/v1",
            max_retries=0,
        )

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = _make_mock_response(None)

        with pytest.raises(AnalysisError, match="empty response"):
            _complete(_make_adapter(mock_client))

    def test_raises_error_for_no_choices(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(choices=[])

        with pytest.raises(AnalysisError, match="no choices"):
            _complete(_make_adapter(mock_client))

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )

        with pytest.raises(AnalysisNetworkError, match="network error"):
            _complete(_make_adapter(mock_client))

    def test_raises_network_error_on_timeout(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = httpx.TimeoutException("timeout")

        with pytest.raises(AnalysisNetworkError, match="network error"):
            _complete(_make_adapter(mock_client))

    def test_raises_network_error_on_rate_limit(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.RateLimitError(
            "slow down",
            response=httpx.Response(429, request=_REQUEST),
            body=None,
        )

        with pytest.raises(AnalysisNetworkError):
            _complete(_make_adapter(mock_client))

    def test_raises_permanent_error_on_api_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIError(
            message="invalid model",
            request=MagicMock(),
            body=None,
        )

        with pytest.raises(AnalysisError, match="API error") as exc_info:
            _complete(_make_adapter(mock_client))
        assert not isinstance(exc_info.value, AnalysisNetworkError)
