"""Unit tests for variable registry edits and the PromptVariable model."""

import pytest
from pydantic import ValidationError

from app.strategies.template_engine import (
    PromptVariable,
    VariableNameConflictError,
    VariableNotFoundError,
    VariableRegistryError,
    VariableType,
    add_variable,
    find_duplicate_names,
    remove_variable,
    rename_variable,
    update_variable,
)


@pytest.fixture
def registry():
    """A small registry of three variables."""
    return [
        PromptVariable(name="first", description="First"),
        PromptVariable(name="second", type=VariableType.NUMBER),
        PromptVariable(name="third", default_value="3", required=False),
    ]


# =============================================================================
# PromptVariable Tests
# =============================================================================


class TestPromptVariable:
    """Test suite for the PromptVariable model."""

    def test_defaults(self):
        variable = PromptVariable(name="x")

        assert variable.description == ""
        assert variable.type == VariableType.STRING
        assert variable.default_value is None
        assert variable.required is True

    def test_name_is_trimmed(self):
        assert PromptVariable(name="  spaced  ").name == "spaced"

    @pytest.mark.parametrize("name", ["", "   ", "bad}name"])
    def test_invalid_names_rejected(self, name):
        with pytest.raises(ValidationError):
            PromptVariable(name=name)

    def test_camel_case_default_value_accepted(self):
        """Test that defaultValue is accepted as an input alias."""
        variable = PromptVariable.model_validate({"name": "x", "defaultValue": "fallback"})

        assert variable.default_value == "fallback"

    def test_null_description_coerced(self):
        variable = PromptVariable.model_validate({"name": "x", "description": None})

        assert variable.description == ""

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            PromptVariable.model_validate({"name": "x", "type": "color"})


# =============================================================================
# Registry Edit Tests
# =============================================================================


class TestRegistryEdits:
    """Test suite for add, update, rename and remove."""

    def test_add_appends(self, registry):
        result = add_variable(registry, PromptVariable(name="fourth"))

        assert [v.name for v in result] == ["first", "second", "third", "fourth"]
        assert len(registry) == 3

    def test_add_conflict(self, registry):
        with pytest.raises(VariableNameConflictError) as exc_info:
            add_variable(registry, PromptVariable(name="second"))

        assert exc_info.value.name == "second"
        assert "already exists" in str(exc_info.value)

    def test_update_keeps_position(self, registry):
        result = update_variable(registry, "second", description="Count", required=False)

        assert result[1].name == "second"
        assert result[1].description == "Count"
        assert result[1].required is False
        assert result[1].type == VariableType.NUMBER

    def test_update_does_not_mutate_input(self, registry):
        update_variable(registry, "first", description="Changed")

        assert registry[0].description == "First"

    def test_update_unknown_variable(self, registry):
        with pytest.raises(VariableNotFoundError):
            update_variable(registry, "missing", description="x")

    def test_update_invalid_value(self, registry):
        with pytest.raises(ValidationError):
            update_variable(registry, "first", type="color")

    def test_rename(self, registry):
        result = rename_variable(registry, "first", "primary")

        assert [v.name for v in result] == ["primary", "second", "third"]
        assert result[0].description == "First"

    def test_rename_to_same_name(self, registry):
        result = rename_variable(registry, "first", "first")

        assert result == registry

    def test_rename_collision_rejected(self, registry):
        with pytest.raises(VariableNameConflictError):
            rename_variable(registry, "first", "third")

    def test_rename_collision_after_trim(self, registry):
        with pytest.raises(VariableNameConflictError):
            rename_variable(registry, "first", "  third ")

    def test_remove(self, registry):
        result = remove_variable(registry, "second")

        assert [v.name for v in result] == ["first", "third"]

    def test_remove_unknown_variable(self, registry):
        with pytest.raises(VariableNotFoundError):
            remove_variable(registry, "missing")

    def test_errors_share_base_class(self):
        assert issubclass(VariableNameConflictError, VariableRegistryError)
        assert issubclass(VariableNotFoundError, VariableRegistryError)
        assert issubclass(VariableRegistryError, ValueError)

    def test_find_duplicate_names(self):
        variables = [PromptVariable(name=n) for n in ["a", "b", "a", "c", "b", "a"]]

        assert find_duplicate_names(variables) == ["a", "b"]
        assert find_duplicate_names(variables[:2]) == []
