"""Explicit edits to a template's variable registry.

These are the user-driven operations of the variables panel. Unlike
reconciliation they can remove or rename entries, and they enforce
unique names within a template.
"""

import logging
from typing import Any

from app.strategies.template_engine.models import PromptVariable

logger = logging.getLogger(__name__)


class VariableRegistryError(ValueError):
    """Base error for rejected registry edits."""


class VariableNameConflictError(VariableRegistryError):
    """Raised when an edit would give two variables the same name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A variable named '{name}' already exists")
        self.name = name


class VariableNotFoundError(VariableRegistryError):
    """Raised when an edit targets a variable that is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Variable '{name}' not found")
        self.name = name


def _index_of(variables: list[PromptVariable], name: str) -> int:
    for idx, variable in enumerate(variables):
        if variable.name == name:
            return idx
    raise VariableNotFoundError(name)


def find_duplicate_names(variables: list[PromptVariable]) -> list[str]:
    """Return names that occur more than once, in first-occurrence order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for variable in variables:
        if variable.name in seen and variable.name not in duplicates:
            duplicates.append(variable.name)
        seen.add(variable.name)
    return duplicates


def add_variable(
    variables: list[PromptVariable],
    variable: PromptVariable,
) -> list[PromptVariable]:
    """Append ``variable`` to the registry.

    Raises:
        VariableNameConflictError: If the name is already registered.
    """
    if any(v.name == variable.name for v in variables):
        raise VariableNameConflictError(variable.name)
    return [*variables, variable]


def rename_variable(
    variables: list[PromptVariable],
    old_name: str,
    new_name: str,
) -> list[PromptVariable]:
    """Rename a variable, keeping its position and metadata.

    Only the registry changes; placeholders in the template text are not
    rewritten.

    Raises:
        VariableNotFoundError: If ``old_name`` is not registered.
        VariableNameConflictError: If ``new_name`` belongs to another variable.
    """
    return update_variable(variables, old_name, name=new_name)


def update_variable(
    variables: list[PromptVariable],
    name: str,
    /,
    **changes: Any,
) -> list[PromptVariable]:
    """Replace metadata of the variable called ``name``.

    Args:
        variables: Current registry.
        name: Variable to edit.
        **changes: Any PromptVariable fields, including ``name`` for a rename.

    Returns:
        A new registry with the edited variable in the same position.

    Raises:
        VariableNotFoundError: If ``name`` is not registered.
        VariableNameConflictError: If a rename collides with another variable.
        pydantic.ValidationError: If the changes produce an invalid variable.
    """
    idx = _index_of(variables, name)
    current = variables[idx]

    updated = PromptVariable.model_validate({**current.model_dump(), **changes})

    if updated.name != current.name:
        if any(i != idx and v.name == updated.name for i, v in enumerate(variables)):
            raise VariableNameConflictError(updated.name)
        logger.info(f"Renamed variable '{current.name}' -> '{updated.name}'")

    result = list(variables)
    result[idx] = updated
    return result


def remove_variable(
    variables: list[PromptVariable],
    name: str,
) -> list[PromptVariable]:
    """Drop the variable called ``name``.

    Raises:
        VariableNotFoundError: If ``name`` is not registered.
    """
    idx = _index_of(variables, name)
    return variables[:idx] + variables[idx + 1:]
