"""Unit tests for the starter template library."""

import pytest

from app.strategies.template_engine import (
    TEMPLATE_LIBRARY,
    get_library_template,
    scan_placeholders,
)


class TestTemplateLibrary:
    """Test suite for the built-in library templates."""

    def test_library_ids(self):
        assert [t.id for t in TEMPLATE_LIBRARY] == ["lib-1", "lib-2", "lib-3"]

    @pytest.mark.parametrize("template", TEMPLATE_LIBRARY, ids=lambda t: t.id)
    def test_registry_matches_placeholders(self, template):
        """Test that each library registry covers exactly its placeholders."""
        assert [v.name for v in template.variables] == scan_placeholders(template.content)

    def test_optional_variables(self):
        optional = {
            t.id: [v.name for v in t.variables if not v.required] for t in TEMPLATE_LIBRARY
        }

        assert optional == {
            "lib-1": [],
            "lib-2": ["disclaimer"],
            "lib-3": ["next_steps", "next_meeting_date"],
        }

    def test_get_library_template(self):
        assert get_library_template("lib-2").name == "Product Description"
        assert get_library_template("lib-99") is None
