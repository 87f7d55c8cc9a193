"""Abstract base class for AI model provider strategies.

The Strategy Pattern allows a rendered prompt to be sent to different
model backends interchangeably.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionResult:
    """Response returned by a model provider.

    Attributes:
        text: The generated response text.
        model: Identifier of the model that produced it.
        provider: Name of the provider strategy.
    """

    text: str
    model: str
    provider: str


class BaseModelProvider(ABC):
    """Abstract base class for model provider strategies.

    Example:
        ```python
        class EchoProvider(BaseModelProvider):
            async def generate(self, prompt, model=None, system_prompt=None):
                return CompletionResult(text=prompt, model="echo", provider=self.name)

            @property
            def name(self) -> str:
                return "echo"
        ```
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model: str | None = None,
        system_prompt: str | None = None,
    ) -> CompletionResult:
        """Generate a response for a rendered prompt.

        Args:
            prompt: The fully rendered user prompt.
            model: Optional model identifier overriding the provider default.
            system_prompt: Optional system instructions.

        Returns:
            The provider's CompletionResult.

        Raises:
            ModelProviderError: If the provider call fails.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name."""
        ...


class ModelProviderError(Exception):
    """Exception raised when a model provider call fails."""

    pass
