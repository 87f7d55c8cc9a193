"""Prompt template API routes.

Handles template CRUD, the built-in library, stateless preview and
reconciliation, variable registry edits, and testing a template
against a model provider.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError
from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_component_factory, get_db
from app.api.schemas import (
    CategoryListResponse,
    CategoryResponse,
    LibraryListResponse,
    PreviewRequest,
    PreviewResponse,
    ReconcileRequest,
    ReconcileResponse,
    TemplateCreate,
    TemplateListResponse,
    TemplateTestRequest,
    TemplateTestResponse,
    TemplateUpdate,
    VariableUpdate,
)
from app.api.system_prompt import load_system_prompt
from app.core.config import Settings, get_settings
from app.core.factory import ComponentFactory
from app.db.models import PromptTemplate, PromptTemplateRead, utcnow
from app.interfaces.model_provider import ModelProviderError
from app.strategies.template_engine import (
    TEMPLATE_LIBRARY,
    PromptVariable,
    VariableNameConflictError,
    VariableNotFoundError,
    add_variable,
    get_library_template,
    reconcile_variables,
    remove_variable,
    scan_placeholders,
    update_variable,
    validate_values,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


async def _get_template_or_404(session: AsyncSession, template_id: uuid.UUID) -> PromptTemplate:
    template = await session.get(PromptTemplate, template_id)
    if template is None:
        logger.warning(f"Template not found: {template_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt template not found",
        )
    return template


async def _reset_default_templates(
    session: AsyncSession,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Clear ``is_default`` on every template except ``exclude_id``."""
    stmt = update(PromptTemplate).where(PromptTemplate.is_default.is_(True))
    if exclude_id is not None:
        stmt = stmt.where(PromptTemplate.id != exclude_id)
    await session.execute(stmt.values(is_default=False))


async def _save(session: AsyncSession, template: PromptTemplate, action: str) -> PromptTemplateRead:
    """Commit ``template`` and return its read model, rolling back on failure."""
    try:
        session.add(template)
        await session.commit()
        await session.refresh(template)
    except SQLAlchemyError as e:
        logger.error(f"Database error while trying to {action} template: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action} prompt template",
        ) from e

    return PromptTemplateRead.model_validate(template)


async def _create_template(session: AsyncSession, data: TemplateCreate) -> PromptTemplateRead:
    if data.is_default:
        await _reset_default_templates(session)

    template = PromptTemplate(
        name=data.name,
        description=data.description,
        category=data.category,
        content=data.content,
        is_default=data.is_default,
        is_active=data.is_active,
    )
    template.set_variables(reconcile_variables(data.content, data.variables))

    created = await _save(session, template, "create")
    logger.info(f"Created template {created.id} with {len(created.variables)} variables")
    return created


# =============================================================================
# Collection Endpoints
# =============================================================================


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    search: str | None = Query(default=None, description="Substring of name or description"),
    category: str | None = Query(default=None, description="Exact category"),
    is_active: bool | None = Query(default=None, description="Filter by active flag"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=15, ge=1, le=100),
    session: AsyncSession = Depends(get_db),
) -> TemplateListResponse:
    """List prompt templates, newest first.

    Args:
        search: Case-insensitive substring matched against name and description.
        category: Only templates in this category.
        is_active: Only active or only inactive templates.
        page: 1-based page number.
        page_size: Templates per page.
        session: Database session.

    Returns:
        A page of templates with the total count.
    """
    try:
        logger.info(
            f"Listing templates: search={search!r}, category={category!r}, "
            f"is_active={is_active}, page={page}, page_size={page_size}"
        )

        filters = []
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(
                    PromptTemplate.name.ilike(pattern),
                    PromptTemplate.description.ilike(pattern),
                )
            )
        if category:
            filters.append(PromptTemplate.category == category)
        if is_active is not None:
            filters.append(PromptTemplate.is_active.is_(is_active))

        count_query = select(func.count()).select_from(PromptTemplate).where(*filters)
        total = (await session.execute(count_query)).scalar_one() or 0

        query = (
            select(PromptTemplate)
            .where(*filters)
            .order_by(PromptTemplate.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        templates = (await session.execute(query)).scalars().all()

        logger.info(f"Found {len(templates)} templates (total {total})")

        return TemplateListResponse(
            templates=[PromptTemplateRead.model_validate(t) for t in templates],
            total=total,
            page=page,
            page_size=page_size,
        )

    except SQLAlchemyError as e:
        logger.error(f"Database error listing templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list prompt templates",
        ) from e


@router.post("", response_model=PromptTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    data: TemplateCreate,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Create a prompt template.

    Placeholders in ``content`` without a registry entry get a default
    string variable. Marking the template as default clears the flag
    on every other template.

    Args:
        data: Template creation data.
        session: Database session.

    Returns:
        The created template.
    """
    logger.info(f"Creating template: {data.name}")
    return await _create_template(session, data)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    session: AsyncSession = Depends(get_db),
) -> CategoryListResponse:
    """List the distinct non-empty template categories."""
    try:
        query = (
            select(PromptTemplate.category)
            .distinct()
            .where(PromptTemplate.category.is_not(None), PromptTemplate.category != "")
            .order_by(PromptTemplate.category)
        )
        categories = (await session.execute(query)).scalars().all()

        return CategoryListResponse(
            categories=[CategoryResponse(name=name) for name in categories]
        )

    except SQLAlchemyError as e:
        logger.error(f"Database error listing categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list categories",
        ) from e


@router.get("/library", response_model=LibraryListResponse)
async def list_library() -> LibraryListResponse:
    """List the built-in starter templates."""
    return LibraryListResponse(templates=TEMPLATE_LIBRARY)


@router.post(
    "/library/{library_id}/import",
    response_model=PromptTemplateRead,
    status_code=status.HTTP_201_CREATED,
)
async def import_library_template(
    library_id: str,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Create an editable template from a library entry.

    Args:
        library_id: Library template id, e.g. ``lib-1``.
        session: Database session.

    Returns:
        The created template.
    """
    entry = get_library_template(library_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Library template '{library_id}' not found",
        )

    logger.info(f"Importing library template {library_id}")

    return await _create_template(
        session,
        TemplateCreate(
            name=entry.name,
            description=entry.description,
            category=entry.category,
            content=entry.content,
            variables=[v.model_copy() for v in entry.variables],
        ),
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_template(
    data: PreviewRequest,
    factory: ComponentFactory = Depends(get_component_factory),
) -> PreviewResponse:
    """Render unsaved template text.

    Missing values fall back to defaults and then to ``[name]`` markers;
    this endpoint never rejects a value map.
    """
    renderer = factory.get_template_renderer()
    return PreviewResponse(
        rendered=renderer.render(data.content, data.variables, data.values),
        placeholders=renderer.scan(data.content),
    )


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_template_variables(data: ReconcileRequest) -> ReconcileResponse:
    """Sync a variable registry with unsaved template text.

    New placeholders are appended with default metadata; variables whose
    placeholder is gone are kept.
    """
    return ReconcileResponse(
        placeholders=scan_placeholders(data.content),
        variables=reconcile_variables(data.content, data.variables),
    )


# =============================================================================
# Item Endpoints
# =============================================================================


@router.get("/{template_id}", response_model=PromptTemplateRead)
async def get_template(
    template_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Get a prompt template by id."""
    template = await _get_template_or_404(session, template_id)
    return PromptTemplateRead.model_validate(template)


@router.put("/{template_id}", response_model=PromptTemplateRead)
async def update_template(
    template_id: uuid.UUID,
    data: TemplateUpdate,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Partially update a prompt template.

    When ``content`` or ``variables`` change the registry is reconciled
    against the resulting content; variables are never dropped by this.

    Args:
        template_id: Template to update.
        data: Fields to change.
        session: Database session.

    Returns:
        The updated template.
    """
    template = await _get_template_or_404(session, template_id)
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True, exclude={"variables"}).items()
        if value is not None or field == "description"
    }

    logger.info(f"Updating template {template_id}: fields={sorted(changes)}")

    if changes.get("is_default"):
        await _reset_default_templates(session, exclude_id=template.id)

    for field, value in changes.items():
        setattr(template, field, value)

    if "content" in changes or data.variables is not None:
        existing = data.variables if data.variables is not None else template.get_variables()
        template.set_variables(reconcile_variables(template.content, existing))

    template.updated_at = utcnow()
    return await _save(session, template, "update")


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a prompt template. The default template cannot be deleted."""
    template = await _get_template_or_404(session, template_id)

    if template.is_default:
        logger.warning(f"Refusing to delete default template {template_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="The default template cannot be deleted",
        )

    try:
        await session.delete(template)
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error deleting template: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete prompt template",
        ) from e

    logger.info(f"Deleted template {template_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/usage", response_model=PromptTemplateRead)
async def increment_usage(
    template_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Increment the usage counter of a template.

    The counter is bumped in a single UPDATE so concurrent calls never
    overwrite each other.
    """
    stmt = (
        update(PromptTemplate)
        .where(PromptTemplate.id == template_id)
        .values(usage_count=PromptTemplate.usage_count + 1)
    )
    try:
        result = await session.execute(stmt)
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error recording usage of template {template_id}: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record template usage",
        ) from e

    if result.rowcount == 0:
        logger.warning(f"Template not found: {template_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt template not found",
        )

    template = await _get_template_or_404(session, template_id)
    return PromptTemplateRead.model_validate(template)


# =============================================================================
# Variable Registry Endpoints
# =============================================================================


@router.post(
    "/{template_id}/variables",
    response_model=PromptTemplateRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_template_variable(
    template_id: uuid.UUID,
    variable: PromptVariable,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Register a new variable on a template.

    Raises:
        HTTPException: 404 if the template is missing, 409 if the name is taken.
    """
    template = await _get_template_or_404(session, template_id)

    try:
        variables = add_variable(template.get_variables(), variable)
    except VariableNameConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    template.set_variables(variables)
    template.updated_at = utcnow()
    return await _save(session, template, "update")


@router.patch("/{template_id}/variables/{name}", response_model=PromptTemplateRead)
async def update_template_variable(
    template_id: uuid.UUID,
    name: str,
    data: VariableUpdate,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Edit or rename a variable.

    Renaming only touches the registry; placeholders in the content keep
    their old text.

    Raises:
        HTTPException: 404 for an unknown template or variable, 409 when a
            rename collides, 422 for invalid values.
    """
    template = await _get_template_or_404(session, template_id)
    changes = data.model_dump(exclude_unset=True)

    try:
        variables = update_variable(template.get_variables(), name, **changes)
    except VariableNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except VariableNameConflictError as e:
        logger.warning(f"Rename rejected on template {template_id}: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"loc": err["loc"], "msg": err["msg"]} for err in e.errors()],
        ) from e

    template.set_variables(variables)
    template.updated_at = utcnow()
    return await _save(session, template, "update")


@router.delete("/{template_id}/variables/{name}", response_model=PromptTemplateRead)
async def delete_template_variable(
    template_id: uuid.UUID,
    name: str,
    session: AsyncSession = Depends(get_db),
) -> PromptTemplateRead:
    """Remove a variable from the registry.

    A placeholder still present in the content is registered again with
    default metadata on the next content change.
    """
    template = await _get_template_or_404(session, template_id)

    try:
        variables = remove_variable(template.get_variables(), name)
    except VariableNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    template.set_variables(variables)
    template.updated_at = utcnow()
    return await _save(session, template, "update")


# =============================================================================
# Testing Endpoint
# =============================================================================


@router.post("/{template_id}/test", response_model=TemplateTestResponse)
async def test_template(
    template_id: uuid.UUID,
    request: TemplateTestRequest,
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    factory: ComponentFactory = Depends(get_component_factory),
) -> TemplateTestResponse:
    """Render a stored template and send it to the configured model.

    The registry is reconciled against the content first, so placeholders
    left without a variable by a rename or removal are rendered like any
    other. Only variables whose placeholder is in the content are validated,
    so that no ``[name]`` markers or mistyped values reach the model. The
    active system prompt is sent as system instructions.

    Args:
        template_id: Template to test.
        request: Variable values and optional model id.
        session: Database session.
        settings: Application settings.
        factory: Component factory providing renderer and model provider.

    Returns:
        The rendered prompt and the model response.

    Raises:
        HTTPException: 404 for an unknown template, 422 for invalid values,
            502 if the provider call fails.
    """
    template = await _get_template_or_404(session, template_id)
    variables = reconcile_variables(template.content, template.get_variables())
    placeholders = set(scan_placeholders(template.content))

    problems = validate_values([v for v in variables if v.name in placeholders], request.values)
    if problems:
        logger.warning(f"Template test rejected for {template_id}: {problems}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Invalid template variable values", "problems": problems},
        )

    renderer = factory.get_template_renderer()
    rendered = renderer.render(template.content, variables, request.values)

    try:
        provider = factory.get_model_provider()
    except ValueError as e:
        logger.error(f"Model provider misconfigured: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e

    system_prompt = await load_system_prompt(session, settings)

    logger.info(f"Testing template {template_id} with provider {provider.name}")

    try:
        result = await provider.generate(
            rendered,
            model=request.model,
            system_prompt=system_prompt.content if system_prompt.is_active else None,
        )
    except ModelProviderError as e:
        logger.error(f"Model provider failed for template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Model provider error: {e}",
        ) from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return TemplateTestResponse(
        rendered_template=rendered,
        response=result.text,
        model=result.model,
        provider=result.provider,
    )
