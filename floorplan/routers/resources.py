from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.database import get_session
from floorplan.routers.responses import encode
from floorplan.services.cache_gateway import CacheGateway
from floorplan.services.staging_store import StagingStore, get_staging_store

router = APIRouter(prefix="/resources")


@router.get("/")
async def list_resources(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    return encode(await CacheGateway(session, store).get_resources())
