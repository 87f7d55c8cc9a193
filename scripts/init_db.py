"""Database initialization script.

Creates the prompt console tables and seeds the default system prompt.
Pass ``--with-library`` to also import the starter templates.

Usage:
    python -m scripts.init_db [--with-library]
    or
    python scripts/init_db.py (after pip install -e .)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select

from app.core.config import get_settings
from app.db.models import PromptTemplate
from app.db.session import close_db, get_session_maker, init_db
from app.strategies.template_engine import TEMPLATE_LIBRARY, reconcile_variables


async def seed_library() -> int:
    """Import library templates whose name is not taken yet.

    Returns:
        Number of templates created.
    """
    session_maker = get_session_maker()
    created = 0

    async with session_maker() as session:
        result = await session.execute(select(PromptTemplate.name))
        existing = set(result.scalars().all())

        for entry in TEMPLATE_LIBRARY:
            if entry.name in existing:
                continue
            template = PromptTemplate(
                name=entry.name,
                description=entry.description,
                category=entry.category,
                content=entry.content,
            )
            template.set_variables(reconcile_variables(entry.content, entry.variables))
            session.add(template)
            created += 1

        await session.commit()

    return created


async def main(with_library: bool = False) -> None:
    """Initialize the database."""
    settings = get_settings()
    await init_db(settings)
    print("Database initialized successfully!")

    if with_library:
        created = await seed_library()
        print(f"Imported {created} library templates")

    await close_db(settings)


if __name__ == "__main__":
    asyncio.run(main(with_library="--with-library" in sys.argv[1:]))
