"""Concrete model provider implementations."""

from app.strategies.providers.openai import OpenAIChatProvider
from app.strategies.providers.simulated import SimulatedModelProvider

__all__ = [
    "OpenAIChatProvider",
    "SimulatedModelProvider",
]
