"""Database models and session management."""

from app.db.models import (
    PromptTemplate,
    PromptTemplateRead,
    SystemPrompt,
    SystemPromptRead,
)
from app.db.session import (
    close_db,
    get_session_maker,
    init_db,
)

__all__ = [
    "PromptTemplate",
    "PromptTemplateRead",
    "SystemPrompt",
    "SystemPromptRead",
    "get_session_maker",
    "init_db",
    "close_db",
]
