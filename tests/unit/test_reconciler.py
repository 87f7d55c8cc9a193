"""Unit tests for the variable registry reconciler."""

from app.strategies.template_engine import PromptVariable, VariableType, reconcile_variables


class TestReconcileVariables:
    """Test suite for reconcile_variables."""

    def test_adds_default_variables(self):
        """Test that every new placeholder gets a default string variable."""
        result = reconcile_variables("Hi {{name}} from {{city}}", [])

        assert [v.name for v in result] == ["name", "city"]
        for variable in result:
            assert variable.type == VariableType.STRING
            assert variable.description == ""
            assert variable.default_value is None
            assert variable.required is True

    def test_existing_metadata_is_preserved(self):
        """Test that known variables keep their metadata and position."""
        existing = [
            PromptVariable(
                name="city",
                description="Home town",
                type=VariableType.STRING,
                default_value="Paris",
                required=False,
            ),
        ]

        result = reconcile_variables("Hi {{name}} from {{city}}", existing)

        assert [v.name for v in result] == ["city", "name"]
        assert result[0] == existing[0]

    def test_never_removes(self):
        """Test that variables without a placeholder survive."""
        existing = [PromptVariable(name="old", description="Still needed later")]

        result = reconcile_variables("Nothing to see", existing)

        assert result == existing

    def test_does_not_mutate_input(self):
        """Test that the existing registry list is left untouched."""
        existing = [PromptVariable(name="a")]

        reconcile_variables("{{a}} {{b}}", existing)

        assert [v.name for v in existing] == ["a"]

    def test_idempotent(self):
        """Test that reconciling twice changes nothing the second time."""
        content = "{{x}} {{y}} {{x}}"
        once = reconcile_variables(content, [])
        twice = reconcile_variables(content, once)

        assert twice == once

    def test_trimmed_placeholder_matches_registry(self):
        """Test that a padded placeholder matches an existing variable."""
        existing = [PromptVariable(name="name", type=VariableType.EMAIL)]

        result = reconcile_variables("{{ name }}", existing)

        assert len(result) == 1
        assert result[0].type == VariableType.EMAIL

    def test_renamed_variable_is_readded(self):
        """Test that a placeholder whose variable was renamed comes back."""
        existing = [PromptVariable(name="customer")]

        result = reconcile_variables("Hello {{client}}", existing)

        assert [v.name for v in result] == ["customer", "client"]
