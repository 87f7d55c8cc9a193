"""Variable registry reconciler.

Keeps a template's variable registry in step with the placeholders in
its content. The merge only ever adds: variables whose placeholder has
disappeared are kept so their metadata survives while the user edits.
"""

import logging

from app.strategies.template_engine.models import PromptVariable, VariableType
from app.strategies.template_engine.scanner import scan_placeholders

logger = logging.getLogger(__name__)


def reconcile_variables(
    content: str,
    existing: list[PromptVariable],
) -> list[PromptVariable]:
    """Merge the placeholders found in ``content`` into ``existing``.

    Args:
        content: Template text.
        existing: Current variable registry. Not modified.

    Returns:
        A new list: the existing variables in their original order,
        followed by a default variable for each newly scanned name.
    """
    known = {variable.name for variable in existing}
    reconciled = list(existing)

    for name in scan_placeholders(content):
        if name in known:
            continue
        known.add(name)
        reconciled.append(
            PromptVariable(
                name=name,
                description="",
                type=VariableType.STRING,
                default_value=None,
                required=True,
            )
        )

    added = len(reconciled) - len(existing)
    if added:
        logger.debug(f"Reconciled registry: {added} new variable(s)")

    return reconciled
