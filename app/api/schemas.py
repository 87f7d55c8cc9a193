"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.db.models import PromptTemplateRead
from app.strategies.template_engine import (
    LibraryTemplate,
    PromptVariable,
    VariableType,
    find_duplicate_names,
)


def _ensure_unique_names(variables: list[PromptVariable] | None) -> list[PromptVariable] | None:
    if variables:
        duplicates = find_duplicate_names(variables)
        if duplicates:
            raise ValueError(f"Duplicate variable names: {', '.join(duplicates)}")
    return variables


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateCreate(BaseModel):
    """Request schema for creating a prompt template."""

    name: str = Field(min_length=1, max_length=255, description="Template name")
    description: str | None = Field(default=None, description="Template description")
    category: str = Field(default="general", max_length=255, description="Template category")
    content: str = Field(default="", description="Template text with {{placeholders}}")
    variables: list[PromptVariable] = Field(
        default_factory=list,
        description="Variable registry; missing placeholders are added automatically",
    )
    is_default: bool = Field(default=False)
    is_active: bool = Field(default=True)

    @field_validator("variables")
    @classmethod
    def validate_variables(cls, v):
        """Reject registries with duplicate variable names."""
        return _ensure_unique_names(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Greeting",
                "description": "Friendly greeting for new users",
                "category": "Onboarding",
                "content": "Hello {{name}}, welcome to {{company}}!",
                "variables": [
                    {"name": "name", "description": "User's first name", "type": "string"},
                ],
            }
        }


class TemplateUpdate(BaseModel):
    """Request schema for a partial template update."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, max_length=255)
    content: str | None = None
    variables: list[PromptVariable] | None = None
    is_default: bool | None = None
    is_active: bool | None = None

    @field_validator("variables")
    @classmethod
    def validate_variables(cls, v):
        """Reject registries with duplicate variable names."""
        return _ensure_unique_names(v)


class TemplateListResponse(BaseModel):
    """Response for listing templates."""

    templates: list[PromptTemplateRead]
    total: int
    page: int
    page_size: int


class CategoryResponse(BaseModel):
    """A template category."""

    name: str


class CategoryListResponse(BaseModel):
    """Response for listing categories."""

    categories: list[CategoryResponse]


class LibraryListResponse(BaseModel):
    """Response for the built-in template library."""

    templates: list[LibraryTemplate]


# =============================================================================
# Pipeline Schemas
# =============================================================================


class PreviewRequest(BaseModel):
    """Request to render template text without persisting it."""

    content: str
    variables: list[PromptVariable] = Field(default_factory=list)
    values: dict[str, str] = Field(default_factory=dict)


class PreviewResponse(BaseModel):
    """Rendered preview."""

    rendered: str
    placeholders: list[str]


class ReconcileRequest(BaseModel):
    """Request to sync a variable registry with template text."""

    content: str
    variables: list[PromptVariable] = Field(default_factory=list)


class ReconcileResponse(BaseModel):
    """Reconciled variable registry."""

    placeholders: list[str]
    variables: list[PromptVariable]


class VariableUpdate(BaseModel):
    """Partial update of one variable, including an optional rename."""

    name: str | None = Field(default=None, description="New name for the variable")
    description: str | None = None
    type: VariableType | None = None
    default_value: str | None = Field(
        default=None,
        validation_alias=AliasChoices("default_value", "defaultValue"),
    )
    required: bool | None = None


class TemplateTestRequest(BaseModel):
    """Request to render a stored template and send it to a model."""

    values: dict[str, str] = Field(default_factory=dict, description="Variable values by name")
    model: str | None = Field(default=None, description="Model identifier; provider default if omitted")


class TemplateTestResponse(BaseModel):
    """Result of testing a template against a model."""

    rendered_template: str
    response: str
    model: str
    provider: str


# =============================================================================
# System Prompt Schemas
# =============================================================================


class SystemPromptUpdate(BaseModel):
    """Request schema for replacing the system prompt."""

    content: str = Field(description="New system prompt text")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("System prompt content is required")
        return v


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
