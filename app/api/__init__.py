"""FastAPI routers and dependencies."""

from app.api.deps import get_component_factory, get_db
from app.api.system_prompt import router as system_prompt_router
from app.api.templates import router as templates_router

__all__ = [
    "get_db",
    "get_component_factory",
    "system_prompt_router",
    "templates_router",
]
