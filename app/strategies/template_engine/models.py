"""Template engine domain models.

Pydantic models for prompt variables. Kept here rather than in the API
layer so the pure template pipeline has no web or database imports.
"""

import enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class VariableType(str, enum.Enum):
    """Expected kind of value for a prompt variable."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    DATE = "date"
    EMAIL = "email"
    URL = "url"


class PromptVariable(BaseModel):
    """Typed metadata describing one placeholder of a template."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Placeholder name, unique within a template")
    description: str = Field(default="", description="What the value is used for")
    type: VariableType = Field(default=VariableType.STRING)
    default_value: str | None = Field(
        default=None,
        validation_alias=AliasChoices("default_value", "defaultValue"),
        description="Value used when none is supplied",
    )
    required: bool = Field(default=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim the name and reject anything the scanner could never produce."""
        v = v.strip()
        if not v:
            raise ValueError("Variable name cannot be empty")
        if "}" in v:
            raise ValueError("Variable name cannot contain '}'")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: str | None) -> str:
        return v or ""
