"""Tests for the OpenAI and Anthropic backends."""

from unittest.mock import MagicMock, patch

import anthropic
import httpx
import openai
import pytest

from knowledgebot.core.conversation import Role
from knowledgebot.llm.anthropic_provider import AnthropicBackend
from knowledgebot.llm.openai_provider import OpenAIBackend
from knowledgebot.llm.provider import (
    CredentialRejectedError,
    GenerationError,
    Turn,
    get_backend_factory,
)

TURNS = [Turn(Role.USER, "A"), Turn(Role.MODEL, "B"), Turn(Role.USER, "C")]


def _response(status: int, url: str) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", url))


class TestOpenAIBackend:
    URL = "https://api.openai.com/v1/chat/completions"

    def _backend(self, mock_client):
        with patch("knowledgebot.llm.openai_provider.openai.OpenAI", return_value=mock_client) as ctor:
            backend = OpenAIBackend(api_key="sk-test", model="gpt-test")
        ctor.assert_called_once_with(api_key="sk-test", max_retries=0)
        return backend

    def test_request_shape(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(
            choices=[MagicMock(message=MagicMock(content="answer"))]
        )
        backend = self._backend(mock_client)

        assert backend.submit(TURNS, "INSTRUCTION", 0.7) == "answer"

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["temperature"] == 0.7
        assert kwargs["messages"] == [
            {"role": "system", "content": "INSTRUCTION"},
            {"role": "user", "content": "A"},
            {"role": "assistant", "content": "B"},
            {"role": "user", "content": "C"},
        ]

    def test_no_choices(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(choices=[])
        assert self._backend(mock_client).submit(TURNS, "I", 0.7) is None

    def test_authentication_error(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.AuthenticationError(
            "Incorrect API key provided", response=_response(401, self.URL), body=None
        )
        with pytest.raises(CredentialRejectedError) as exc_info:
            self._backend(mock_client).submit(TURNS, "I", 0.7)
        assert exc_info.value.status_code == 401
        assert "Incorrect API key" in exc_info.value.message

    def test_connection_error(self):
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", self.URL)
        )
        with pytest.raises(GenerationError) as exc_info:
            self._backend(mock_client).submit(TURNS, "I", 0.7)
        assert not isinstance(exc_info.value, CredentialRejectedError)
        assert exc_info.value.message


class TestAnthropicBackend:
    URL = "https://api.anthropic.com/v1/messages"

    def _backend(self, mock_client):
        with patch("knowledgebot.llm.anthropic_provider.anthropic.Anthropic", return_value=mock_client) as ctor:
            backend = AnthropicBackend(api_key="sk-ant-test", model="claude-test")
        ctor.assert_called_once_with(api_key="sk-ant-test", max_retries=0)
        return backend

    def test_request_shape(self):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(
            content=[MagicMock(type="text", text="ans"), MagicMock(type="text", text="wer")]
        )
        backend = self._backend(mock_client)

        assert backend.submit(TURNS, "INSTRUCTION", 0.7) == "answer"

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["system"] == "INSTRUCTION"
        assert kwargs["temperature"] == 0.7
        assert kwargs["messages"] == [
            {"role": "user", "content": "A"},
            {"role": "assistant", "content": "B"},
            {"role": "user", "content": "C"},
        ]

    def test_empty_content(self):
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[])
        assert self._backend(mock_client).submit(TURNS, "I", 0.7) == ""

    def test_permission_denied(self):
        mock_client = MagicMock()
        mock_client.messages.create.side_effect = anthropic.PermissionDeniedError(
            "key revoked", response=_response(403, self.URL), body=None
        )
        with pytest.raises(CredentialRejectedError) as exc_info:
            self._backend(mock_client).submit(TURNS, "I", 0.7)
        assert exc_info.value.status_code == 403

    def test_rate_limit(self):
        mock_client = MagicMock()
        mock_client.messages.create.side_effect = anthropic.RateLimitError(
            "slow down", response=_response(429, self.URL), body=None
        )
        with pytest.raises(GenerationError) as exc_info:
            self._backend(mock_client).submit(TURNS, "I", 0.7)
        assert not isinstance(exc_info.value, CredentialRejectedError)
        assert exc_info.value.status_code == 429
        assert exc_info.value.message == "slow down"


class TestBackendFactory:
    def test_openai(self):
        with patch("knowledgebot.llm.openai_provider.openai.OpenAI"):
            backend = get_backend_factory("OpenAI", "gpt-test")("sk-test")
        assert isinstance(backend, OpenAIBackend)

    def test_anthropic(self):
        with patch("knowledgebot.llm.anthropic_provider.anthropic.Anthropic"):
            backend = get_backend_factory("anthropic", "claude-test")("sk-test")
        assert isinstance(backend, AnthropicBackend)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            get_backend_factory("ollama", "llama3.1")
