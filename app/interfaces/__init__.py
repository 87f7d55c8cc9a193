"""Abstract base classes for prompt console strategies."""

from app.interfaces.model_provider import BaseModelProvider, CompletionResult, ModelProviderError
from app.interfaces.template import BaseTemplateRenderer

__all__ = [
    "BaseTemplateRenderer",
    "BaseModelProvider",
    "CompletionResult",
    "ModelProviderError",
]
