"""Shared route dependencies."""

import logging
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.factory import ComponentFactory
from app.db.session import get_session_maker

logger = logging.getLogger(__name__)


async def get_db(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for one request.

    The session is rolled back if the route raises and always closed
    afterwards. A database that cannot be reached becomes a 503.
    """
    async with get_session_maker(settings)() as session:
        try:
            yield session
        except OperationalError as e:
            logger.error(f"Database unavailable: {e}", exc_info=True)
            await session.rollback()
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database unavailable",
            ) from e
        except Exception:
            await session.rollback()
            raise


def get_component_factory(
    settings: Settings = Depends(get_settings),
) -> ComponentFactory:
    """Return a ComponentFactory bound to the request settings."""
    return ComponentFactory(settings)
