"""
Chat providers: Ollama adapter and scripted offline provider.
"""

import pytest
from unittest.mock import Mock

import ollama

from ragwriter.agents.chat_provider import IChatProvider, OllamaChatProvider, ScriptedChatProvider, check_ollama_health
from ragwriter.core.errors import GenerationFailure


class TestOllamaChatProvider:
    """Ollama adapter with a mocked client."""

    @pytest.fixture
    def client(self):
        client = Mock()
        client.chat.return_value = {"message": {"role": "assistant", "content": "Hello there"}}
        return client

    def test_generate_sends_system_and_user_messages(self, client):
        provider = OllamaChatProvider("llama3.1:8b", temperature=0.2, client=client)

        reply = provider.generate("Be helpful.", "Hi")

        assert reply == "Hello there"
        kwargs = client.chat.call_args.kwargs
        assert kwargs["model"] == "llama3.1:8b"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be helpful."},
            {"role": "user", "content": "Hi"},
        ]
        assert kwargs["options"]["temperature"] == 0.2

    def test_generate_without_system_instruction(self, client):
        provider = OllamaChatProvider("llama3.1:8b", client=client)

        provider.generate(None, "Hi")

        assert client.chat.call_args.kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    def test_response_error_becomes_generation_failure(self, client):
        client.chat.side_effect = ollama.ResponseError("model not found")
        provider = OllamaChatProvider("missing", client=client)

        with pytest.raises(GenerationFailure) as exc_info:
            provider.generate(None, "Hi")

        assert "missing" in exc_info.value.detail

    def test_empty_reply_becomes_generation_failure(self, client):
        client.chat.return_value = {"message": {"role": "assistant", "content": ""}}
        provider = OllamaChatProvider("llama3.1:8b", client=client)

        with pytest.raises(GenerationFailure):
            provider.generate(None, "Hi")

    def test_status_reports_availability(self, client):
        provider = OllamaChatProvider("llama3.1:8b", client=client)
        assert provider.get_status()["status"] == "ready"

        client.list.side_effect = ConnectionError("refused")
        assert provider.get_status()["status"] == "unavailable"
        assert not check_ollama_health(client)


class TestScriptedChatProvider:
    """Offline provider used in development and tests."""

    def test_replies_in_order_then_fallback(self):
        provider = ScriptedChatProvider(["one", "two"])

        assert isinstance(provider, IChatProvider)
        assert provider.generate(None, "a") == "one"
        assert provider.generate(None, "b") == "two"
        assert provider.generate(None, "c") == ScriptedChatProvider.FALLBACK_REPLIES["general"]
        assert provider.call_count == 3

    def test_editor_prompts_are_approved_by_default(self):
        provider = ScriptedChatProvider()

        reply = provider.generate(None, "You are a critical blog editor. Evaluate ...")

        assert "PASS" in reply

    def test_queued_exception_is_raised_as_generation_failure(self):
        provider = ScriptedChatProvider()
        provider.queue(RuntimeError("boom"))

        with pytest.raises(GenerationFailure):
            provider.generate(None, "x")

    def test_calls_are_recorded(self):
        provider = ScriptedChatProvider(["ok"])

        provider.generate("system", "user")

        assert provider.calls[0].system_instruction == "system"
        assert provider.calls[0].user_instruction == "user"
