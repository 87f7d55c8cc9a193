"""Template renderer strategy.

Substitutes concrete values into ``{{name}}`` placeholders for the live
preview and for prompt assembly before a model call.
"""

import logging
import re
from collections.abc import Mapping

from app.interfaces.template import BaseTemplateRenderer
from app.strategies.template_engine.models import PromptVariable
from app.strategies.template_engine.scanner import PLACEHOLDER_PATTERN, scan_placeholders

logger = logging.getLogger(__name__)


def missing_marker(name: str) -> str:
    """Return the preview marker shown for a variable without a value."""
    return f"[{name}]"


def resolve_value(variable: PromptVariable, values: Mapping[str, str]) -> str:
    """Pick the supplied value, then the default, then the missing marker."""
    value = values.get(variable.name)
    if value:
        return value
    if variable.default_value:
        return variable.default_value
    return missing_marker(variable.name)


def render_template(
    content: str,
    variables: list[PromptVariable],
    values: Mapping[str, str],
) -> str:
    """Render ``content`` against a variable registry.

    The text is walked once. Each placeholder naming a registered variable
    is replaced; inserted text is never re-scanned, so a value that itself
    contains ``{{other}}`` stays literal. Placeholders with no registry
    entry are left untouched.

    Args:
        content: Template text.
        variables: Variable registry of the template.
        values: Concrete values keyed by variable name.

    Returns:
        The fully substituted text.
    """
    registry = {variable.name: variable for variable in variables}

    def substitute(match: re.Match[str]) -> str:
        variable = registry.get(match.group(1).strip())
        if variable is None:
            return match.group(0)
        return resolve_value(variable, values)

    return PLACEHOLDER_PATTERN.sub(substitute, content)


class PlaceholderRenderer(BaseTemplateRenderer):
    """Renderer for the double-brace placeholder syntax."""

    def scan(self, content: str) -> list[str]:
        return scan_placeholders(content)

    def render(
        self,
        content: str,
        variables: list[PromptVariable],
        values: Mapping[str, str],
    ) -> str:
        rendered = render_template(content, variables, values)
        logger.debug(
            f"Rendered template: {len(variables)} variables, {len(rendered)} chars"
        )
        return rendered
