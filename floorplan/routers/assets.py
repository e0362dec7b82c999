from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.database import get_session
from floorplan.routers.responses import encode, result_response
from floorplan.services.staging_store import StagingStore, get_staging_store
from floorplan.viewmodels.asset_vm import AssetListViewModel

router = APIRouter(prefix="/assets")


@router.get("/")
async def list_assets(
    asset_type_id: str | None = None,
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    vm = await AssetListViewModel.load(session, store, asset_type_id=asset_type_id)
    return encode(vm.assets)


@router.post("/")
async def create_asset(
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await AssetListViewModel.create_asset(session, store, data)
    return result_response(result, status_code=201)


@router.put("/{asset_id}")
async def update_asset(
    asset_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await AssetListViewModel.update_asset(session, store, asset_id, data)
    return result_response(result)
