from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.database import get_session
from floorplan.routers.responses import encode, result_response
from floorplan.services.staging_store import StagingStore, get_staging_store
from floorplan.viewmodels.floor_vm import FloorListViewModel, FloorViewModel

router = APIRouter(prefix="/floors")
items_router = APIRouter(prefix="/floor-items")


@router.get("/")
async def list_floors(
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    vm = await FloorListViewModel.load(session, store)
    return encode(vm.floors)


@router.post("/")
async def create_floor(
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorViewModel.create_floor(session, store, data)
    return result_response(result, status_code=201)


@router.put("/{floor_id}")
async def update_floor(
    floor_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorViewModel.update_floor(session, store, floor_id, data)
    return result_response(result)


@router.post("/{floor_id}/items")
async def add_floor_item(
    floor_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorViewModel.add_floor_item(session, store, floor_id, data)
    return result_response(result, status_code=201)


@items_router.put("/{item_id}")
async def update_floor_item(
    item_id: str,
    data: dict = Body(...),
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorViewModel.update_floor_item(session, store, item_id, data)
    return result_response(result)


@items_router.delete("/{item_id}")
async def delete_floor_item(
    item_id: str,
    session: AsyncSession = Depends(get_session),
    store: StagingStore = Depends(get_staging_store),
):
    result = await FloorViewModel.delete_floor_item(session, store, item_id)
    return result_response(result)
