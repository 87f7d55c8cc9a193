"""Placeholder scanner.

Extracts ``{{name}}`` placeholders from free-text prompt templates.
"""

import re

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def scan_placeholders(content: str) -> list[str]:
    """Return the distinct placeholder names in first-occurrence order.

    The inner text of each ``{{...}}`` is trimmed; no further grammar is
    enforced, so ``{{ user name }}`` yields ``"user name"``. Unterminated
    or stray braces simply do not match.

    Args:
        content: Template text.

    Returns:
        Ordered list of unique names.

    Example:
        >>> scan_placeholders("Hello {{name}}, welcome to {{company}}!")
        ['name', 'company']
    """
    seen: set[str] = set()
    names: list[str] = []

    for match in PLACEHOLDER_PATTERN.finditer(content):
        name = match.group(1).strip()
        if name and name not in seen:
            seen.add(name)
            names.append(name)

    return names
