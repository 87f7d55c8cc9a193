"""Streamlit frontend for Prompt Console.

Provides a UI for browsing prompt templates, editing template text with a
live preview, managing the variable registry, and testing a template
against the configured model.
"""

import logging
import os
from typing import Any

import httpx
import streamlit as st
from pydantic import ValidationError

from app.strategies.template_engine import (
    PromptVariable,
    VariableRegistryError,
    VariableType,
    add_variable,
    reconcile_variables,
    remove_variable,
    render_template,
    scan_placeholders,
    update_variable,
    validate_values,
)

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

# Page config
st.set_page_config(
    page_title="Prompt Console",
    page_icon="🧩",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EMPTY_DRAFT: dict[str, Any] = {
    "name": "",
    "description": "",
    "category": "general",
    "content": "",
    "variables": [],
    "is_default": False,
    "is_active": True,
}


# =============================================================================
# API Client
# =============================================================================


class PromptConsoleClient:
    """API client for the prompt console endpoints."""

    def __init__(self, base_url: str):
        """Initialize the API client.

        Args:
            base_url: Base URL of the API.
        """
        self.base_url = base_url.rstrip("/")

    def _request(
        self,
        method: str,
        path: str,
        action: str,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> Any | None:
        """Send a request and report failures in the UI.

        Args:
            method: HTTP method.
            path: Path below the base URL.
            action: Human readable action used in error messages.
            timeout: Request timeout in seconds.
            **kwargs: Passed through to httpx.

        Returns:
            Decoded JSON body, ``{}`` for empty responses, or None if failed.
        """
        try:
            response = httpx.request(method, f"{self.base_url}{path}", timeout=timeout, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else {}
        except httpx.HTTPStatusError as e:
            logger.error(f"{action} failed: {e.response.status_code} - {e.response.text}")
            st.error(f"{action} failed: {e.response.status_code}")
            st.error(e.response.text)
            return None
        except Exception as e:
            logger.error(f"{action} error: {e}")
            st.error(f"{action} error: {e}")
            return None

    def health_check(self) -> bool:
        """Check if the API is healthy.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = httpx.get(f"{self.base_url}/health", timeout=5.0)
            return response.status_code == 200
        except Exception:
            return False

    def list_templates(self, search: str = "", category: str = "") -> list[dict[str, Any]]:
        params = {"page_size": 100}
        if search:
            params["search"] = search
        if category:
            params["category"] = category
        result = self._request("GET", "/templates", "Loading templates", params=params)
        return result["templates"] if result else []

    def list_categories(self) -> list[str]:
        result = self._request("GET", "/templates/categories", "Loading categories")
        return [c["name"] for c in result["categories"]] if result else []

    def list_library(self) -> list[dict[str, Any]]:
        result = self._request("GET", "/templates/library", "Loading library")
        return result["templates"] if result else []

    def import_library_template(self, library_id: str) -> dict[str, Any] | None:
        return self._request("POST", f"/templates/library/{library_id}/import", "Import")

    def create_template(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        return self._request("POST", "/templates", "Save", json=payload)

    def update_template(self, template_id: str, payload: dict[str, Any]) -> dict[str, Any] | None:
        return self._request("PUT", f"/templates/{template_id}", "Save", json=payload)

    def delete_template(self, template_id: str) -> bool:
        return self._request("DELETE", f"/templates/{template_id}", "Delete") is not None

    def record_usage(self, template_id: str) -> dict[str, Any] | None:
        return self._request("POST", f"/templates/{template_id}/usage", "Recording usage")

    def test_template(
        self,
        template_id: str,
        values: dict[str, str],
        model: str | None = None,
    ) -> dict[str, Any] | None:
        """Render a stored template on the server and send it to the model.

        Args:
            template_id: The template to test.
            values: Variable values by name.
            model: Optional model identifier.

        Returns:
            Dict with the rendered prompt and the model response, or None if failed.
        """
        payload = {"values": values, "model": model or None}
        with st.spinner("Waiting for the model..."):
            return self._request(
                "POST",
                f"/templates/{template_id}/test",
                "Test",
                timeout=120.0,
                json=payload,
            )

    def get_system_prompt(self) -> dict[str, Any] | None:
        return self._request("GET", "/system-prompt", "Loading system prompt")

    def update_system_prompt(self, content: str) -> dict[str, Any] | None:
        return self._request("PUT", "/system-prompt", "Saving system prompt", json={"content": content})


# =============================================================================
# Draft Helpers
# =============================================================================


def draft_variables() -> list[PromptVariable]:
    """Return the variable registry of the current draft."""
    return [PromptVariable.model_validate(v) for v in st.session_state.draft["variables"]]


def store_variables(variables: list[PromptVariable]) -> None:
    st.session_state.draft["variables"] = [v.model_dump(mode="json") for v in variables]


def load_draft(template: dict[str, Any] | None) -> None:
    """Replace the editor state with ``template`` or an empty draft."""
    if template is None:
        st.session_state.selected_template_id = None
        st.session_state.draft = dict(EMPTY_DRAFT, variables=[])
    else:
        st.session_state.selected_template_id = template["id"]
        st.session_state.draft = {key: template.get(key, default) for key, default in EMPTY_DRAFT.items()}
        st.session_state.draft["description"] = template.get("description") or ""
    st.session_state.values = {}
    st.session_state.test_result = None
    st.session_state.editor_revision += 1


# =============================================================================
# UI Components
# =============================================================================


def render_sidebar(client: PromptConsoleClient) -> None:
    """Render the sidebar with connection status and the system prompt.

    Args:
        client: The API client instance.
    """
    with st.sidebar:
        st.title("🧩 Prompt Console")

        st.divider()

        is_healthy = client.health_check()
        if is_healthy:
            st.success("✅ API Connected")
        else:
            st.error("❌ API Disconnected")
            st.info(f"API URL: {API_BASE_URL}")
            return

        st.divider()

        st.subheader("System Prompt")
        system_prompt = client.get_system_prompt()
        if system_prompt:
            content = st.text_area(
                "Instructions sent with every test",
                value=system_prompt["content"],
                height=160,
            )
            st.caption(f"Version {system_prompt['version']}")
            if st.button("Save System Prompt"):
                if not content.strip():
                    st.error("System prompt content is required")
                elif client.update_system_prompt(content):
                    st.success("System prompt saved")

        st.divider()

        st.caption(f"API: `{API_BASE_URL}`")


def render_template_browser(client: PromptConsoleClient) -> None:
    """Render the template list, filters and the starter library."""
    st.subheader("📚 Templates")

    col1, col2 = st.columns([3, 2])
    with col1:
        search = st.text_input("Search", placeholder="Name or description")
    with col2:
        categories = client.list_categories()
        category = st.selectbox("Category", [""] + categories, format_func=lambda c: c or "All")

    templates = client.list_templates(search=search, category=category)

    if st.button("➕ New Template"):
        load_draft(None)
        st.rerun()

    if not templates:
        st.info("No templates yet. Create one or import a starter from the library.")

    for template in templates:
        label = template["name"] + (" ⭐" if template["is_default"] else "")
        with st.container(border=True):
            st.markdown(f"**{label}**")
            st.caption(
                f"{template['category']} · used {template['usage_count']} times"
                + ("" if template["is_active"] else " · inactive")
            )
            if template.get("description"):
                st.write(template["description"])
            if st.button("Open", key=f"open_{template['id']}"):
                load_draft(template)
                st.rerun()

    with st.expander("Starter library"):
        for entry in client.list_library():
            st.markdown(f"**{entry['name']}** ({entry['category']})")
            st.caption(entry["description"])
            if st.button("Import", key=f"import_{entry['id']}"):
                created = client.import_library_template(entry["id"])
                if created:
                    load_draft(created)
                    st.rerun()


def render_editor() -> None:
    """Render the template text editor and keep the registry reconciled."""
    draft = st.session_state.draft
    revision = st.session_state.editor_revision

    st.subheader("✏️ Editor")

    col1, col2 = st.columns([2, 1])
    with col1:
        draft["name"] = st.text_input("Name", value=draft["name"], key=f"name_{revision}")
        draft["description"] = st.text_input(
            "Description", value=draft["description"], key=f"description_{revision}"
        )
    with col2:
        draft["category"] = st.text_input("Category", value=draft["category"], key=f"category_{revision}")
        draft["is_default"] = st.checkbox("Default template", value=draft["is_default"], key=f"default_{revision}")
        draft["is_active"] = st.checkbox("Active", value=draft["is_active"], key=f"active_{revision}")

    draft["content"] = st.text_area(
        "Template",
        value=draft["content"],
        height=260,
        key=f"content_{revision}",
        help="Use {{variable_name}} for placeholders",
    )

    store_variables(reconcile_variables(draft["content"], draft_variables()))

    placeholders = scan_placeholders(draft["content"])
    if placeholders:
        st.caption("Placeholders: " + ", ".join(f"`{name}`" for name in placeholders))


def render_variables_panel() -> None:
    """Render the variable registry with add, edit and remove controls."""
    st.subheader("🔧 Variables")

    variables = draft_variables()
    placeholders = set(scan_placeholders(st.session_state.draft["content"]))
    type_options = [t.value for t in VariableType]
    revision = st.session_state.editor_revision

    for variable in variables:
        title = variable.name + ("" if variable.name in placeholders else " (unused)")
        with st.expander(title):
            key = f"{revision}_{variable.name}"
            new_name = st.text_input("Name", value=variable.name, key=f"var_name_{key}")
            description = st.text_input("Description", value=variable.description, key=f"var_desc_{key}")
            var_type = st.selectbox(
                "Type",
                type_options,
                index=type_options.index(variable.type.value),
                key=f"var_type_{key}",
            )
            default_value = st.text_input(
                "Default value", value=variable.default_value or "", key=f"var_default_{key}"
            )
            required = st.checkbox("Required", value=variable.required, key=f"var_required_{key}")

            col1, col2 = st.columns(2)
            with col1:
                if st.button("Apply", key=f"var_apply_{key}"):
                    try:
                        updated = update_variable(
                            variables,
                            variable.name,
                            name=new_name,
                            description=description,
                            type=var_type,
                            default_value=default_value or None,
                            required=required,
                        )
                    except (VariableRegistryError, ValidationError) as e:
                        st.error(str(e))
                    else:
                        store_variables(updated)
                        st.rerun()
            with col2:
                if st.button("Remove", key=f"var_remove_{key}"):
                    store_variables(remove_variable(variables, variable.name))
                    st.rerun()

    with st.form("add_variable", clear_on_submit=True):
        st.markdown("**Add variable**")
        name = st.text_input("Name")
        var_type = st.selectbox("Type", type_options)
        if st.form_submit_button("Add"):
            try:
                store_variables(add_variable(variables, PromptVariable(name=name, type=var_type)))
            except (VariableRegistryError, ValidationError) as e:
                st.error(str(e))
            else:
                st.rerun()


def render_preview() -> dict[str, str]:
    """Render value inputs and the live preview.

    Returns:
        The entered values by variable name.
    """
    st.subheader("👁️ Preview")

    variables = draft_variables()
    values: dict[str, str] = st.session_state.values

    for variable in variables:
        label = variable.name + (" *" if variable.required else "")
        values[variable.name] = st.text_input(
            label,
            value=values.get(variable.name, ""),
            placeholder=variable.default_value or "",
            help=variable.description or None,
            key=f"value_{st.session_state.editor_revision}_{variable.name}",
        )

    st.code(render_template(st.session_state.draft["content"], variables, values), language=None)
    return values


def render_actions(client: PromptConsoleClient, values: dict[str, str]) -> None:
    """Render save, delete and test controls for the current draft."""
    draft = st.session_state.draft
    template_id = st.session_state.selected_template_id

    col1, col2, col3 = st.columns(3)

    with col1:
        if st.button("💾 Save", type="primary", disabled=not draft["name"].strip()):
            payload = dict(draft, description=draft["description"] or None)
            saved = (
                client.update_template(template_id, payload)
                if template_id
                else client.create_template(payload)
            )
            if saved:
                load_draft(saved)
                st.success("Template saved")
                st.rerun()

    with col2:
        if template_id and st.button("🗑️ Delete"):
            if client.delete_template(template_id):
                load_draft(None)
                st.rerun()

    with col3:
        model = st.text_input("Model", placeholder="Provider default", label_visibility="collapsed")

    if not template_id:
        st.caption("Save the template to test it against the model.")
        return

    if st.button("🚀 Test Template"):
        placeholders = set(scan_placeholders(draft["content"]))
        problems = validate_values(
            [v for v in draft_variables() if v.name in placeholders], values
        )
        if problems:
            for name, problem in problems.items():
                st.error(f"{name}: {problem}")
        else:
            result = client.test_template(template_id, values, model)
            if result:
                st.session_state.test_result = result
                client.record_usage(template_id)

    result = st.session_state.test_result
    if result:
        st.markdown(f"**Response** from `{result['provider']}` / `{result['model']}`")
        st.write(result["response"])
        with st.expander("Rendered prompt"):
            st.code(result["rendered_template"], language=None)


# =============================================================================
# Main App
# =============================================================================


def init_session_state() -> None:
    """Initialize session state variables."""
    if "selected_template_id" not in st.session_state:
        st.session_state.selected_template_id = None
    if "draft" not in st.session_state:
        st.session_state.draft = dict(EMPTY_DRAFT, variables=[])
    if "values" not in st.session_state:
        st.session_state.values = {}
    if "test_result" not in st.session_state:
        st.session_state.test_result = None
    if "editor_revision" not in st.session_state:
        st.session_state.editor_revision = 0


def main() -> None:
    """Main application entry point."""
    init_session_state()

    client = PromptConsoleClient(API_BASE_URL)

    render_sidebar(client)

    st.title("Prompt Console")
    st.markdown("Write prompt templates with `{{placeholders}}`, preview them and test them")

    st.divider()

    browser_col, editor_col = st.columns([1, 2])

    with browser_col:
        render_template_browser(client)

    with editor_col:
        render_editor()
        render_variables_panel()
        values = render_preview()
        st.divider()
        render_actions(client, values)


if __name__ == "__main__":
    main()
