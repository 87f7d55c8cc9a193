"""OpenAI-compatible chat completion provider.

Uses the OpenAI chat completions API. Any OpenAI-compatible endpoint
(OpenRouter, Groq, Mistral, local gateways) works through ``base_url``.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

from app.interfaces.model_provider import BaseModelProvider, CompletionResult, ModelProviderError

logger = logging.getLogger(__name__)


class OpenAIChatProvider(BaseModelProvider):
    """Model provider backed by the OpenAI chat completions API.

    Attributes:
        client: The async OpenAI client instance.
        model: The default chat model.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        organization: str | None = None,
        temperature: float = 0.7,
    ) -> None:
        """Initialize the OpenAI provider.

        Args:
            api_key: Your OpenAI API key.
            model: The chat model used when a call does not name one.
            base_url: Optional custom base URL for the API.
            organization: Optional OpenAI organization ID.
            temperature: Sampling temperature.
        """
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
        )
        self._model = model
        self._temperature = temperature

    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        system_prompt: str | None = None,
    ) -> CompletionResult:
        """Send the rendered prompt as a chat completion.

        Args:
            prompt: The fully rendered user prompt.
            model: Optional model overriding the default.
            system_prompt: Optional system message.

        Returns:
            CompletionResult with the first choice's content.

        Raises:
            ModelProviderError: If the API call fails.
            ValueError: If the prompt is empty.
        """
        if not prompt.strip():
            raise ValueError("Cannot send an empty prompt")

        model = model or self._model

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        logger.debug(f"Requesting chat completion from {model} ({len(prompt)} chars)")

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=self._temperature,
            )

            text = response.choices[0].message.content or ""
            logger.info(f"Received chat completion from {model}")

            return CompletionResult(text=text, model=response.model or model, provider=self.name)

        except OpenAIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise ModelProviderError(f"OpenAI request failed: {e}") from e
        except Exception as e:
            logger.error(f"Unexpected error during chat completion: {e}")
            raise ModelProviderError(f"Chat completion failed: {e}") from e

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        """Return the default model name."""
        return self._model
