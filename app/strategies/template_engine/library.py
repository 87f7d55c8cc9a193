"""Built-in template library.

Starter templates offered in the console. Importing one creates a
regular, editable template.
"""

from pydantic import BaseModel, Field

from app.strategies.template_engine.models import PromptVariable


class LibraryTemplate(BaseModel):
    """A predefined template that can be imported."""

    id: str
    name: str
    description: str
    category: str
    content: str
    variables: list[PromptVariable] = Field(default_factory=list)


def _var(name: str, description: str, required: bool = True) -> PromptVariable:
    return PromptVariable(name=name, description=description, required=required)


TEMPLATE_LIBRARY: list[LibraryTemplate] = [
    LibraryTemplate(
        id="lib-1",
        name="Customer Support Response",
        description="Template for responding to customer inquiries",
        category="Customer Support",
        content=(
            "Hello {{customer_name}},\n\n"
            "Thank you for reaching out to our support team about your {{issue_type}}.\n\n"
            "{{response_content}}\n\n"
            "If you have any further questions, please don't hesitate to ask.\n\n"
            "Best regards,\n{{agent_name}}\nCustomer Support Team"
        ),
        variables=[
            _var("customer_name", "Customer's name"),
            _var("issue_type", "Type of customer issue"),
            _var("response_content", "Main response content"),
            _var("agent_name", "Support agent's name"),
        ],
    ),
    LibraryTemplate(
        id="lib-2",
        name="Product Description",
        description="Template for generating product descriptions",
        category="Marketing",
        content=(
            "# {{product_name}}\n\n"
            "## Description\n{{product_description}}\n\n"
            "## Key Features\n- {{feature_1}}\n- {{feature_2}}\n- {{feature_3}}\n\n"
            "## Specifications\n{{specifications}}\n\n"
            "## Price\n{{price}}\n\n"
            "*{{disclaimer}}*"
        ),
        variables=[
            _var("product_name", "Name of the product"),
            _var("product_description", "Brief description of the product"),
            _var("feature_1", "First key feature"),
            _var("feature_2", "Second key feature"),
            _var("feature_3", "Third key feature"),
            _var("specifications", "Technical specifications"),
            _var("price", "Product price"),
            _var("disclaimer", "Legal disclaimer", required=False),
        ],
    ),
    LibraryTemplate(
        id="lib-3",
        name="Meeting Summary",
        description="Template for summarizing meeting notes",
        category="Business",
        content=(
            "# Meeting Summary: {{meeting_title}}\n\n"
            "**Date**: {{meeting_date}}\n"
            "**Participants**: {{participants}}\n\n"
            "## Agenda\n{{agenda}}\n\n"
            "## Key Discussion Points\n{{discussion_points}}\n\n"
            "## Action Items\n{{action_items}}\n\n"
            "## Next Steps\n{{next_steps}}\n\n"
            "## Next Meeting\n{{next_meeting_date}}"
        ),
        variables=[
            _var("meeting_title", "Title of the meeting"),
            _var("meeting_date", "Date of the meeting"),
            _var("participants", "List of participants"),
            _var("agenda", "Meeting agenda items"),
            _var("discussion_points", "Key points discussed"),
            _var("action_items", "Tasks assigned during meeting"),
            _var("next_steps", "Follow-up actions", required=False),
            _var("next_meeting_date", "Date of the next meeting", required=False),
        ],
    ),
]


def get_library_template(library_id: str) -> LibraryTemplate | None:
    """Look up a library template by id."""
    for template in TEMPLATE_LIBRARY:
        if template.id == library_id:
            return template
    return None
