"""Database models using SQLModel.

Defines the persisted entities of the prompt console:
- PromptTemplate: Reusable prompt text with its variable registry
- SystemPrompt: The global system instructions sent with every test call
"""

import datetime
import uuid
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel

from app.strategies.template_engine import PromptVariable


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# =============================================================================
# Shared Models (for API responses, not database tables)
# =============================================================================


class PromptTemplateBase(SQLModel):
    """Base prompt template fields."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None)
    category: str = Field(default="general", max_length=255, index=True)
    is_default: bool = Field(default=False)
    is_active: bool = Field(default=True)


# =============================================================================
# Database Models
# =============================================================================


class PromptTemplate(PromptTemplateBase, table=True):
    """Prompt template model.

    ``variables`` holds the serialized PromptVariable registry. It is
    reconciled against ``content`` on every write, so each placeholder in
    the content has an entry.
    """

    __tablename__ = "prompt_templates"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    variables: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    usage_count: int = Field(default=0, ge=0)
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    def get_variables(self) -> list[PromptVariable]:
        """Return the registry as PromptVariable models."""
        return [PromptVariable.model_validate(v) for v in self.variables or []]

    def set_variables(self, variables: list[PromptVariable]) -> None:
        """Store a PromptVariable registry."""
        self.variables = [v.model_dump(mode="json") for v in variables]


class SystemPrompt(SQLModel, table=True):
    """Global system prompt.

    Only the first row is used; every update bumps ``version``.
    """

    __tablename__ = "system_prompts"

    id: int | None = Field(default=None, primary_key=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    version: int = Field(default=1, ge=1)
    is_active: bool = Field(default=True)
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


# =============================================================================
# Response Models
# =============================================================================


class PromptTemplateRead(PromptTemplateBase):
    """Prompt template response model."""

    id: uuid.UUID
    content: str
    variables: list[PromptVariable]
    usage_count: int
    created_at: datetime.datetime
    updated_at: datetime.datetime


class SystemPromptRead(SQLModel):
    """System prompt response model."""

    content: str
    version: int
    is_active: bool
    updated_at: datetime.datetime
