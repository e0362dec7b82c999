import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from floorplan.config import settings
from floorplan.database import engine
from floorplan.models import Base
from floorplan.routers import asset_types, assets, floor_map, floors, resources

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ensure data directories exist before sqlite opens its file
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.staging_dir.mkdir(parents=True, exist_ok=True)

    # create tables on startup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started, staging directory %s", settings.app_name, settings.staging_dir)

    yield

    await engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# routers
app.include_router(asset_types.router)
app.include_router(assets.router)
app.include_router(resources.router)
app.include_router(floors.router)
app.include_router(floors.items_router)
app.include_router(floor_map.router)
app.include_router(floor_map.staging_router)
