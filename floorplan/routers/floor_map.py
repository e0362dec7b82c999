from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.database import get_session
from floorplan.routers.responses import encode, result_response
from floorplan.services.staging_store import StagingStore, get_staging_store
from floorplan.viewmodels.floor_map_vm import FloorMapViewModel

router = APIRouter(prefix="/floor-map")
staging_router = APIRouter(prefix="/staging")


@router.get("/")
async def floor_map(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    vm = await FloorMapViewModel.load(session, store)
    return {
        "floors": encode(vm.floors),
        "assetTypes": encode(vm.asset_types),
        "resources": encode(vm.resources),
        "itemIcons": encode(vm.item_icons),
    }


@router.put("/items/{item_id}/position")
async def update_position(
    item_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorMapViewModel.update_position(session, store, item_id, data)
    return result_response(result)


@router.post("/floors/{floor_id}/assets")
async def create_asset_on_floor(
    floor_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorMapViewModel.create_asset_on_floor(session, store, floor_id, data)
    return result_response(result, status_code=201)


@router.post("/floors/{floor_id}/assets/{asset_id}")
async def place_existing_asset(
    floor_id: str,
    asset_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorMapViewModel.place_existing_asset(session, store, floor_id, asset_id, data)
    return result_response(result, status_code=201)


@router.post("/commit")
async def commit_staged_floors(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorMapViewModel.commit_staged_floors(session, store)
    return result_response(result)


@staging_router.post("/sync")
async def sync_staging(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorMapViewModel.sync_staging(session, store)
    return result_response(result)
