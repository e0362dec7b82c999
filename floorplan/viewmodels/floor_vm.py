from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.errors import NotFoundError, run_action
from floorplan.repositories.asset_repo import AssetRepository
from floorplan.repositories.floor_repo import FloorItemRepository, FloorRepository
from floorplan.schemas.common import ActionResult
from floorplan.schemas.floor import (
    FloorCreate,
    FloorItemCreate,
    FloorItemUpdate,
    FloorUpdate,
    Position,
    StagedFloor,
    StagedFloorItem,
)
from floorplan.services.cache_gateway import CacheGateway, floor_item_to_staged, floor_to_staged
from floorplan.services.staging_store import Collection, StagingKey, StagingStore

# FloorItemUpdate field -> staged record key
_STAGED_ITEM_FIELDS = {"label": "label", "assigned_to": "assignedTo", "rotation": "rotation"}


def _patch(patch: dict[str, Any]):
    return lambda record: {**record, **patch}


@dataclass
class FloorListViewModel:
    floors: list[StagedFloor] = field(default_factory=list)
    total_items: int = 0

    @classmethod
    async def load(cls, session: AsyncSession, store: StagingStore) -> "FloorListViewModel":
        floors = await CacheGateway(session, store).get_floors()
        return cls(floors=floors, total_items=sum(len(f.items) for f in floors))


class FloorViewModel:
    """Direct floor and floor-item edits.

    These go to the durable store first and are then mirrored into any
    staged copy; they never start a staged collection that was absent.
    """

    @classmethod
    async def create_floor(cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]) -> ActionResult:
        return await run_action(cls._create_floor(session, store, data), "create floor", session)

    @classmethod
    async def update_floor(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        return await run_action(cls._update_floor(session, store, floor_id, data), "update floor", session)

    @classmethod
    async def add_floor_item(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        return await run_action(cls._add_floor_item(session, store, floor_id, data), "add floor item", session)

    @classmethod
    async def update_floor_item(
        cls, session: AsyncSession, store: StagingStore, item_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        return await run_action(cls._update_floor_item(session, store, item_id, data), "update floor item", session)

    @classmethod
    async def delete_floor_item(cls, session: AsyncSession, store: StagingStore, item_id: str) -> ActionResult:
        return await run_action(cls._delete_floor_item(session, store, item_id), "delete floor item", session)

    @classmethod
    async def _create_floor(cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]) -> StagedFloor:
        payload = FloorCreate.model_validate(data)
        floor = await FloorRepository(session).create(**payload.model_dump())
        await session.commit()

        staged = StagedFloor(id=floor.id, name=floor.name, width=floor.width, height=floor.height)
        await store.append_item(StagingKey.FLOORS, staged.to_staged(), create_missing=False)
        return staged

    @classmethod
    async def _update_floor(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, data: Mapping[str, Any]
    ) -> StagedFloor:
        updates = FloorUpdate.model_validate(data).model_dump(exclude_unset=True)
        repo = FloorRepository(session)
        if await repo.update(floor_id, **updates) is None:
            raise NotFoundError(f"Floor {floor_id} not found")
        await session.commit()

        floor = await repo.get_with_items(floor_id)
        await store.update_floor(
            floor_id, _patch({"name": floor.name, "width": floor.width, "height": floor.height})
        )
        return floor_to_staged(floor)

    @classmethod
    async def _add_floor_item(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, data: Mapping[str, Any]
    ) -> StagedFloorItem:
        payload = FloorItemCreate.model_validate(data)
        if not await FloorRepository(session).get(floor_id):
            raise NotFoundError(f"Floor {floor_id} not found")
        asset = await AssetRepository(session).get_with_type(payload.asset_id)
        if asset is None:
            raise NotFoundError(f"Asset {payload.asset_id} not found")

        pos = Position.of(payload.pos_x, payload.pos_y)
        item = await FloorItemRepository(session).create(
            floor_id=floor_id,
            type=asset.asset_type.name,
            pos_x=pos.x,
            pos_y=pos.y,
            rotation=0.0,
            label=asset.label,
            assigned_to=asset.assigned_to,
        )
        await session.commit()

        staged = floor_item_to_staged(item)
        await store.append_floor_item(floor_id, staged.to_staged())
        return staged

    @classmethod
    async def _update_floor_item(
        cls, session: AsyncSession, store: StagingStore, item_id: str, data: Mapping[str, Any]
    ) -> StagedFloorItem:
        updates = FloorItemUpdate.model_validate(data).model_dump(exclude_unset=True)
        repo = FloorItemRepository(session)
        item = await repo.get(item_id)
        if item is None:
            raise NotFoundError(f"Floor item {item_id} not found")

        moved = "pos_x" in updates or "pos_y" in updates
        if moved:
            pos = Position.of(updates.get("pos_x", item.pos_x), updates.get("pos_y", item.pos_y))
            updates["pos_x"], updates["pos_y"] = pos.x, pos.y
        item = await repo.update(item_id, **updates)
        await session.commit()

        staged = floor_item_to_staged(item)
        # only mirror what changed so unsynced staged edits of other fields survive
        patch = {key: getattr(staged, name) for name, key in _STAGED_ITEM_FIELDS.items() if name in updates}
        if moved:
            patch["pos"] = staged.pos.model_dump()
        await store.update_floor_item(item.floor_id, item_id, _patch(patch))
        return staged

    @classmethod
    async def _delete_floor_item(cls, session: AsyncSession, store: StagingStore, item_id: str) -> dict[str, str]:
        repo = FloorItemRepository(session)
        item = await repo.get(item_id)
        if item is not None:
            floor_id = item.floor_id
            await repo.delete(item_id)
            await session.commit()
            await store.remove_floor_item(floor_id, item_id)
            return {"id": item_id, "floor_id": floor_id}

        # staged-only placement that was never committed
        removed_from: dict[str, str] = {}

        def change(floors: Collection | None) -> Collection | None:
            for floor in floors or []:
                items = floor.get("items") or []
                if any(i.get("id") == item_id for i in items):
                    floor["items"] = [i for i in items if i.get("id") != item_id]
                    removed_from["floor_id"] = floor.get("id")
                    return floors
            return None

        if not await store.mutate(StagingKey.FLOORS, change):
            raise NotFoundError(f"Floor item {item_id} not found")
        return {"id": item_id, "floor_id": removed_from["floor_id"]}
