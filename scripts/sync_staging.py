"""Rebuild the offline staging files from the database.

Run after setting up the database, or whenever the staged copy should be
thrown away and refreshed. Unsynced staged edits are overwritten.

Usage:
    python scripts/sync_staging.py
"""

import asyncio
import sys

from floorplan.database import async_session
from floorplan.main import app, lifespan
from floorplan.services.cache_gateway import CacheGateway
from floorplan.services.staging_store import get_staging_store


async def main() -> int:
    print("Starting staging sync ...")
    async with lifespan(app):
        async with async_session() as session:
            try:
                counts = await CacheGateway(session, get_staging_store()).refresh_all()
            except Exception as exc:
                print(f"Staging sync failed: {exc}")
                return 1
    for key, count in counts.items():
        print(f"  synced {count} {key}")
    print("Staging sync completed")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
