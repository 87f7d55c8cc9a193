"""Strategy selection for renderers and model providers.

Routes ask the factory for a component instead of constructing one, so
the provider behind template tests is chosen by configuration alone.
"""

import logging

from app.core.config import Settings, get_settings
from app.interfaces.model_provider import BaseModelProvider
from app.interfaces.template import BaseTemplateRenderer
from app.strategies.providers import OpenAIChatProvider, SimulatedModelProvider
from app.strategies.template_engine import PlaceholderRenderer

logger = logging.getLogger(__name__)

PROVIDER_TYPES = ("openai", "simulated")


class ComponentFactory:
    """Builds and caches strategy instances for one Settings object.

    Example:
        ```python
        factory = ComponentFactory(get_settings())
        rendered = factory.get_template_renderer().render(content, variables, values)
        result = await factory.get_model_provider().generate(rendered)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._provider: BaseModelProvider | None = None
        self._renderer: BaseTemplateRenderer | None = None

    def _build_provider(self, provider_type: str) -> BaseModelProvider:
        settings = self._settings

        match provider_type:
            case "openai":
                if not settings.openai_api_key:
                    raise ValueError("OPENAI_API_KEY is required for the openai provider")
                return OpenAIChatProvider(
                    api_key=settings.openai_api_key,
                    model=settings.llm_chat_model,
                    base_url=settings.openai_base_url,
                    organization=settings.openai_organization,
                )
            case "simulated":
                return SimulatedModelProvider(model=settings.llm_chat_model)
            case _:
                raise ValueError(
                    f"Unknown model provider type: {provider_type}. "
                    f"Valid options: {', '.join(PROVIDER_TYPES)}"
                )

    def get_model_provider(self, provider_type: str | None = None) -> BaseModelProvider:
        """Return the model provider named by ``provider_type`` or the settings.

        The configured provider is cached; an explicit ``provider_type``
        always builds a fresh instance and replaces the cache.

        Raises:
            ValueError: If the type is unknown or its credentials are missing.
        """
        if self._provider is None or provider_type is not None:
            provider_type = provider_type or self._settings.llm_provider_type
            logger.info(f"Instantiating model provider: {provider_type}")
            self._provider = self._build_provider(provider_type)

        return self._provider

    def get_template_renderer(self) -> BaseTemplateRenderer:
        """Return the placeholder renderer."""
        if self._renderer is None:
            self._renderer = PlaceholderRenderer()
        return self._renderer

    def clear_cache(self) -> None:
        """Forget cached instances so the next call rebuilds them."""
        self._provider = None
        self._renderer = None
