"""Simulated model provider.

Returns a canned response without any network access. Used for local
development and tests.
"""

import logging

from app.interfaces.model_provider import BaseModelProvider, CompletionResult

logger = logging.getLogger(__name__)


class SimulatedModelProvider(BaseModelProvider):
    """Provider that answers every prompt with a deterministic message."""

    def __init__(self, model: str = "simulated-model") -> None:
        self._model = model

    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        system_prompt: str | None = None,
    ) -> CompletionResult:
        model = model or self._model
        logger.info(f"Simulating response for model {model}")

        text = (
            "This is a simulated AI response for testing. In production, "
            f"this would use the actual AI model ({model}) to generate a response "
            f"based on the rendered template ({len(prompt)} characters)."
        )
        return CompletionResult(text=text, model=model, provider=self.name)

    @property
    def name(self) -> str:
        return "simulated"
