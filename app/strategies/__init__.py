"""Concrete strategy implementations."""

from app.strategies.providers import (
    OpenAIChatProvider,
    SimulatedModelProvider,
)
from app.strategies.template_engine import (
    PlaceholderRenderer,
)

__all__ = [
    "OpenAIChatProvider",
    "SimulatedModelProvider",
    "PlaceholderRenderer",
]
