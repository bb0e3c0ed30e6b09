"""
Tests for LLM provider selection and response mapping.
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from funnel.providers import (
    AnthropicProvider,
    OpenAIProvider,
    ProviderType,
    create_provider,
    get_provider_from_env,
)


class TestProviderFactory:
    """Tests for choosing a provider from configuration."""

    def test_no_keys(self):
        assert get_provider_from_env() is None

    def test_openai_first_by_default(self):
        provider = get_provider_from_env(openai_key="sk-a", anthropic_key="sk-b")
        assert isinstance(provider, OpenAIProvider)

    def test_anthropic_when_only_key(self):
        provider = get_provider_from_env(anthropic_key="sk-b")
        assert isinstance(provider, AnthropicProvider)
        assert provider.default_model == "claude-haiku-4-5"

    def test_preferred_provider(self):
        provider = get_provider_from_env(openai_key="sk-a", anthropic_key="sk-b", preferred_provider="Anthropic")
        assert provider.name == "anthropic"

    def test_preferred_provider_without_key_falls_back(self):
        provider = get_provider_from_env(openai_key="sk-a", preferred_provider="anthropic")
        assert provider.name == "openai"

    def test_unknown_preferred_provider_falls_back(self):
        provider = get_provider_from_env(openai_key="sk-a", preferred_provider="mystery")
        assert provider.name == "openai"

    def test_model_override(self):
        provider = create_provider(ProviderType.OPENAI, "sk-a", default_model="mini")
        assert provider.default_model == "gpt-4o-mini"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            create_provider("mystery", "key")


class TestOpenAIProvider:
    """Tests for request building and response mapping."""

    def test_json_mode_and_messages(self):
        provider = OpenAIProvider(api_key="sk-test")
        provider.client = Mock()
        provider.client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"a": 1}'), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
        )

        response = provider.complete("Prompt", system_prompt="System", temperature=0.3, json_mode=True)

        kwargs = provider.client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "System"}
        assert kwargs["temperature"] == 0.3
        assert response.text == '{"a": 1}'
        assert response.input_tokens == 10


class TestAnthropicProvider:
    """Tests for text block handling."""

    def test_concatenates_text_blocks(self):
        provider = AnthropicProvider(api_key="sk-test")
        provider.client = Mock()
        provider.client.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"summary":'),
                SimpleNamespace(type="text", text=' "x"}'),
            ],
            usage=SimpleNamespace(input_tokens=3, output_tokens=4),
            stop_reason="end_turn",
        )

        response = provider.complete("Prompt", system_prompt="System")

        assert response.text == '{"summary": "x"}'
        assert provider.client.messages.create.call_args.kwargs["system"] == "System"
