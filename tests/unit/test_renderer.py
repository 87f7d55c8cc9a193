"""Unit tests for the template renderer."""

import pytest

from app.interfaces.template import BaseTemplateRenderer
from app.strategies.template_engine import PlaceholderRenderer, PromptVariable, render_template


@pytest.fixture
def variables():
    """Registry with one plain and one defaulted variable."""
    return [
        PromptVariable(name="name"),
        PromptVariable(name="company", default_value="Acme"),
    ]


class TestRenderTemplate:
    """Test suite for render_template."""

    def test_values_substituted(self, variables):
        """Test that supplied values replace their placeholders."""
        result = render_template(
            "Hello {{name}}, welcome to {{company}}!",
            variables,
            {"name": "Ada", "company": "Initech"},
        )

        assert result == "Hello Ada, welcome to Initech!"

    def test_default_used_when_value_missing(self, variables):
        """Test fallback to the variable's default value."""
        result = render_template("{{company}}", variables, {})

        assert result == "Acme"

    def test_empty_value_falls_back_to_default(self, variables):
        """Test that an empty string counts as no value."""
        result = render_template("{{company}}", variables, {"company": ""})

        assert result == "Acme"

    def test_missing_marker(self, variables):
        """Test that a variable with no value or default renders as [name]."""
        result = render_template("Hello {{name}}!", variables, {})

        assert result == "Hello [name]!"

    def test_every_occurrence_replaced(self, variables):
        """Test that repeated placeholders are all substituted."""
        result = render_template("{{name}} and {{name}}", variables, {"name": "Bo"})

        assert result == "Bo and Bo"

    def test_padded_placeholder_substituted(self, variables):
        """Test that {{ name }} resolves like {{name}}."""
        result = render_template("Hi {{ name }}", variables, {"name": "Ada"})

        assert result == "Hi Ada"

    def test_unregistered_placeholder_left_verbatim(self, variables):
        """Test that placeholders without a registry entry are untouched."""
        result = render_template("{{name}} {{unknown}}", variables, {"name": "Ada"})

        assert result == "Ada {{unknown}}"

    def test_no_recursive_expansion(self, variables):
        """Test that placeholder syntax inside a value is not expanded."""
        result = render_template(
            "Hello {{name}}",
            variables,
            {"name": "{{company}}"},
        )

        assert result == "Hello {{company}}"

    def test_values_with_regex_specials(self, variables):
        """Test that backslashes and group references are inserted literally."""
        result = render_template("{{name}}", variables, {"name": r"\1 \g<0> $&"})

        assert result == r"\1 \g<0> $&"

    def test_extra_values_ignored(self, variables):
        """Test that values with no matching variable have no effect."""
        result = render_template("{{name}}", variables, {"name": "Ada", "other": "x"})

        assert result == "Ada"

    def test_no_placeholders(self, variables):
        """Test that plain text is returned unchanged."""
        assert render_template("Plain text", variables, {}) == "Plain text"


class TestPlaceholderRenderer:
    """Test suite for the PlaceholderRenderer strategy."""

    @pytest.fixture
    def renderer(self):
        return PlaceholderRenderer()

    def test_is_template_renderer(self, renderer):
        """Test that the strategy implements the renderer interface."""
        assert isinstance(renderer, BaseTemplateRenderer)

    def test_scan(self, renderer):
        assert renderer.scan("{{a}} {{b}} {{a}}") == ["a", "b"]

    def test_render(self, renderer, variables):
        result = renderer.render("{{name}} at {{company}}", variables, {"name": "Ada"})

        assert result == "Ada at Acme"
