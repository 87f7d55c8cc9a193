"""Unit tests for model providers and the component factory."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core.config import Settings
from app.core.factory import ComponentFactory
from app.interfaces.model_provider import BaseModelProvider, CompletionResult, ModelProviderError
from app.strategies.providers import OpenAIChatProvider, SimulatedModelProvider
from app.strategies.template_engine import PlaceholderRenderer


def _completion(content: str, model: str = "gpt-4o-mini") -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.model = model
    return response


# =============================================================================
# OpenAI Provider Tests
# =============================================================================


class TestOpenAIChatProvider:
    """Test suite for OpenAIChatProvider."""

    @pytest.fixture
    def client(self):
        """Patch AsyncOpenAI and return the mocked client instance."""
        with patch("app.strategies.providers.openai.AsyncOpenAI") as mock_openai:
            mock_client = MagicMock()
            mock_client.chat.completions.create = AsyncMock(return_value=_completion("Hi there"))
            mock_openai.return_value = mock_client
            yield mock_client

    def test_generate_with_system_prompt(self, client):
        """Test that the system prompt is sent before the user message."""
        provider = OpenAIChatProvider(api_key="test-key", model="gpt-4o-mini", temperature=0.2)

        result = asyncio.run(provider.generate("Hello", system_prompt="Be brief"))

        assert result == CompletionResult(text="Hi there", model="gpt-4o-mini", provider="openai")
        client.chat.completions.create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=[
                {"role": "system", "content": "Be brief"},
                {"role": "user", "content": "Hello"},
            ],
            temperature=0.2,
        )

    def test_generate_without_system_prompt(self, client):
        provider = OpenAIChatProvider(api_key="test-key")

        asyncio.run(provider.generate("Hello"))

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages == [{"role": "user", "content": "Hello"}]

    def test_model_override(self, client):
        client.chat.completions.create.return_value = _completion("ok", model="gpt-4o")
        provider = OpenAIChatProvider(api_key="test-key")

        result = asyncio.run(provider.generate("Hello", model="gpt-4o"))

        assert client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"
        assert result.model == "gpt-4o"

    def test_null_content_becomes_empty_text(self, client):
        client.chat.completions.create.return_value = _completion(None)
        provider = OpenAIChatProvider(api_key="test-key")

        result = asyncio.run(provider.generate("Hello"))

        assert result.text == ""

    def test_api_failure_wrapped(self, client):
        """Test that client errors surface as ModelProviderError."""
        client.chat.completions.create.side_effect = RuntimeError("connection reset")
        provider = OpenAIChatProvider(api_key="test-key")

        with pytest.raises(ModelProviderError, match="connection reset"):
            asyncio.run(provider.generate("Hello"))

    def test_empty_prompt_rejected(self, client):
        provider = OpenAIChatProvider(api_key="test-key")

        with pytest.raises(ValueError):
            asyncio.run(provider.generate("   "))

        client.chat.completions.create.assert_not_called()

    def test_properties(self, client):
        provider = OpenAIChatProvider(api_key="test-key", model="gpt-4.1")

        assert provider.name == "openai"
        assert provider.model == "gpt-4.1"
        assert isinstance(provider, BaseModelProvider)


# =============================================================================
# Simulated Provider Tests
# =============================================================================


class TestSimulatedModelProvider:
    """Test suite for SimulatedModelProvider."""

    def test_generate(self):
        provider = SimulatedModelProvider(model="sim-1")

        result = asyncio.run(provider.generate("Twelve chars"))

        assert result.provider == "simulated"
        assert result.model == "sim-1"
        assert "simulated AI response" in result.text
        assert "(12 characters)" in result.text

    def test_model_override(self):
        result = asyncio.run(SimulatedModelProvider().generate("x", model="other"))

        assert result.model == "other"


# =============================================================================
# Component Factory Tests
# =============================================================================


class TestComponentFactory:
    """Test suite for ComponentFactory."""

    def test_simulated_provider(self):
        factory = ComponentFactory(Settings(llm_provider_type="simulated", llm_chat_model="sim-2"))

        provider = factory.get_model_provider()

        assert isinstance(provider, SimulatedModelProvider)
        assert factory.get_model_provider() is provider

    def test_provider_type_normalized(self):
        factory = ComponentFactory(Settings(llm_provider_type="  Simulated "))

        assert isinstance(factory.get_model_provider(), SimulatedModelProvider)

    def test_openai_provider(self):
        settings = Settings(
            llm_provider_type="openai",
            openai_api_key="test-key",
            llm_chat_model="gpt-4o",
        )

        with patch("app.strategies.providers.openai.AsyncOpenAI") as mock_openai:
            provider = ComponentFactory(settings).get_model_provider()

        assert isinstance(provider, OpenAIChatProvider)
        assert provider.model == "gpt-4o"
        assert mock_openai.call_args.kwargs["api_key"] == "test-key"

    def test_openai_requires_api_key(self):
        factory = ComponentFactory(Settings(llm_provider_type="openai", openai_api_key=""))

        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            factory.get_model_provider()

    def test_unknown_provider(self):
        factory = ComponentFactory(Settings(llm_provider_type="carrier-pigeon"))

        with pytest.raises(ValueError, match="Unknown model provider type"):
            factory.get_model_provider()

    def test_template_renderer_cached(self):
        factory = ComponentFactory(Settings())

        renderer = factory.get_template_renderer()

        assert isinstance(renderer, PlaceholderRenderer)
        assert factory.get_template_renderer() is renderer

        factory.clear_cache()
        assert factory.get_template_renderer() is not renderer
