"""Drop and recreate the prompt console database.

Every template is deleted and the system prompt returns to the configured
default. Add ``--with-library`` to import the starter templates afterwards.

Usage:
    python -m scripts.reset_db [--with-library]
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import get_settings
from app.db.session import close_db, drop_all_tables, init_db
from scripts.init_db import seed_library


async def reset(with_library: bool = False) -> None:
    settings = get_settings()

    await drop_all_tables(settings)
    print("Dropped all tables")

    await init_db(settings)
    print("Recreated tables and default system prompt")

    if with_library:
        print(f"Imported {await seed_library()} library templates")

    await close_db(settings)


if __name__ == "__main__":
    asyncio.run(reset(with_library="--with-library" in sys.argv[1:]))
