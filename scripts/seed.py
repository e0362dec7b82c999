"""Seed the database with the default asset types and the sample floors.

Usage:
    python scripts/seed.py
"""

import asyncio
import sys

from floorplan.database import async_session
from floorplan.main import app, lifespan
from floorplan.seed import seed


async def main() -> int:
    async with lifespan(app):
        async with async_session() as session:
            counts = await seed(session)
    print(f"Created {counts['asset_types']} asset types and {counts['floor_items']} floor items")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
