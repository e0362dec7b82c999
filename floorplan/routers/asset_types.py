from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.database import get_session
from floorplan.routers.responses import encode, result_response
from floorplan.services.staging_store import StagingStore, get_staging_store
from floorplan.viewmodels.asset_vm import AssetTypeListViewModel

router = APIRouter(prefix="/asset-types")


@router.get("/")
async def list_asset_types(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    vm = await AssetTypeListViewModel.load(session, store)
    return encode(vm.asset_types)


@router.post("/")
async def create_asset_type(
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await AssetTypeListViewModel.create_asset_type(session, store, data)
    return result_response(result, status_code=201)
