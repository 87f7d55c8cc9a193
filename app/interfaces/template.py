"""Prompt template rendering interfaces.

Defines the abstract base class for turning a template and its variable
registry into the final prompt text.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class BaseTemplateRenderer(ABC):
    """Abstract base class for template rendering strategies.

    Implementations must be total: missing values degrade to a visible
    marker instead of raising.
    """

    @abstractmethod
    def scan(self, content: str) -> list[str]:
        """Return the distinct placeholder names found in ``content``.

        Args:
            content: Template text.

        Returns:
            Names in first-occurrence order.
        """

    @abstractmethod
    def render(
        self,
        content: str,
        variables: list[Any],
        values: Mapping[str, str],
    ) -> str:
        """Substitute values into the template placeholders.

        Args:
            content: Template text.
            variables: The template's PromptVariable registry.
            values: Concrete values keyed by variable name.

        Returns:
            The rendered text.
        """
