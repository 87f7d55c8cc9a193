"""Value checks for rendering a template against real input.

Preview rendering never validates; these checks guard the paths that
send the rendered prompt to a model.
"""

import json
import math
import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from urllib.parse import urlparse

from app.strategies.template_engine.models import PromptVariable, VariableType

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
BOOLEAN_VALUES = {"true", "false", "yes", "no", "1", "0"}


def _is_number(value: str) -> bool:
    # float() also takes "nan", "inf" and digit separators like "1_000".
    if "_" in value:
        return False
    try:
        return math.isfinite(float(value))
    except ValueError:
        return False


def _is_date(value: str) -> bool:
    for parse in (date.fromisoformat, datetime.fromisoformat):
        try:
            parse(value)
        except ValueError:
            continue
        return True
    return False


def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_array(value: str) -> bool:
    # Bracketed input must be a JSON array; anything else is a comma list.
    if not value.lstrip().startswith("["):
        return True
    try:
        return isinstance(json.loads(value), list)
    except json.JSONDecodeError:
        return False


TYPE_CHECKS: dict[VariableType, Callable[[str], bool]] = {
    VariableType.NUMBER: _is_number,
    VariableType.BOOLEAN: lambda v: v.strip().lower() in BOOLEAN_VALUES,
    VariableType.DATE: _is_date,
    VariableType.EMAIL: lambda v: bool(EMAIL_PATTERN.match(v.strip())),
    VariableType.URL: _is_url,
    VariableType.ARRAY: _is_array,
}


def validate_values(
    variables: list[PromptVariable],
    values: Mapping[str, str],
) -> dict[str, str]:
    """Check supplied values against the variable registry.

    Args:
        variables: Variable registry of the template.
        values: Concrete values keyed by variable name.

    Returns:
        Mapping of variable name to problem description. Empty when the
        values are acceptable.
    """
    problems: dict[str, str] = {}

    for variable in variables:
        value = values.get(variable.name)

        if not value:
            if variable.required and not variable.default_value:
                problems[variable.name] = "value is required"
            continue

        check = TYPE_CHECKS.get(variable.type)
        if check is not None and not check(value):
            problems[variable.name] = f"expected a {variable.type.value} value"

    return problems
