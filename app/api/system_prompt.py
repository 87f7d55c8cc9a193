"""System prompt API routes.

Reads and replaces the global system prompt sent alongside every
template test.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.api.schemas import SystemPromptUpdate
from app.core.config import Settings, get_settings
from app.db.models import SystemPrompt, SystemPromptRead, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/system-prompt", tags=["system-prompt"])


async def load_system_prompt(session: AsyncSession, settings: Settings) -> SystemPrompt:
    """Return the stored system prompt, creating the default one if absent.

    Args:
        session: Database session.
        settings: Application settings providing the default text.

    Returns:
        The SystemPrompt row.
    """
    result = await session.execute(select(SystemPrompt).order_by(SystemPrompt.id).limit(1))
    system_prompt = result.scalars().first()

    if system_prompt is None:
        logger.info("No system prompt stored, creating default")
        system_prompt = SystemPrompt(
            content=settings.default_system_prompt,
            version=1,
            is_active=True,
        )
        session.add(system_prompt)
        await session.commit()
        await session.refresh(system_prompt)

    return system_prompt


@router.get("", response_model=SystemPromptRead)
async def get_system_prompt(
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SystemPromptRead:
    """Get the current system prompt.

    Args:
        session: Database session.
        settings: Application settings.

    Returns:
        The system prompt with its version.
    """
    try:
        system_prompt = await load_system_prompt(session, settings)
        return SystemPromptRead.model_validate(system_prompt)

    except SQLAlchemyError as e:
        logger.error(f"Database error loading system prompt: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load system prompt",
        ) from e


@router.put("", response_model=SystemPromptRead)
async def update_system_prompt(
    data: SystemPromptUpdate,
    session: AsyncSession = Depends(get_db),
) -> SystemPromptRead:
    """Replace the system prompt text and bump its version.

    With no stored prompt the new text is saved as version 1.

    Args:
        data: The new content.
        session: Database session.

    Returns:
        The updated system prompt.
    """
    try:
        result = await session.execute(select(SystemPrompt).order_by(SystemPrompt.id).limit(1))
        system_prompt = result.scalars().first()

        if system_prompt is None:
            system_prompt = SystemPrompt(content=data.content, version=1, is_active=True)
        else:
            system_prompt.content = data.content
            system_prompt.version += 1
            system_prompt.updated_at = utcnow()

        session.add(system_prompt)
        await session.commit()
        await session.refresh(system_prompt)

        logger.info(f"System prompt updated to version {system_prompt.version}")

        return SystemPromptRead.model_validate(system_prompt)

    except SQLAlchemyError as e:
        logger.error(f"Database error updating system prompt: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update system prompt",
        ) from e
