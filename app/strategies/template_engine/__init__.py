"""Template engine strategies.

Implements placeholder scanning, variable reconciliation and rendering
for prompt templates.
"""

from app.strategies.template_engine.library import TEMPLATE_LIBRARY, LibraryTemplate, get_library_template
from app.strategies.template_engine.models import PromptVariable, VariableType
from app.strategies.template_engine.reconciler import reconcile_variables
from app.strategies.template_engine.registry import (
    VariableNameConflictError,
    VariableNotFoundError,
    VariableRegistryError,
    add_variable,
    find_duplicate_names,
    remove_variable,
    rename_variable,
    update_variable,
)
from app.strategies.template_engine.renderer import PlaceholderRenderer, render_template
from app.strategies.template_engine.scanner import scan_placeholders
from app.strategies.template_engine.validation import validate_values

__all__ = [
    "PromptVariable",
    "VariableType",
    "scan_placeholders",
    "reconcile_variables",
    "render_template",
    "PlaceholderRenderer",
    "validate_values",
    "add_variable",
    "rename_variable",
    "update_variable",
    "remove_variable",
    "find_duplicate_names",
    "VariableRegistryError",
    "VariableNameConflictError",
    "VariableNotFoundError",
    "TEMPLATE_LIBRARY",
    "LibraryTemplate",
    "get_library_template",
]
