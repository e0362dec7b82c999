from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.errors import run_action
from floorplan.schemas.asset_type import StagedAssetType
from floorplan.schemas.common import ActionResult
from floorplan.schemas.floor import PlaceExistingAsset, PlaceNewAsset, PositionUpdate, StagedFloor
from floorplan.schemas.resource import Resource
from floorplan.services.cache_gateway import CacheGateway
from floorplan.services.reconciler import Reconciler
from floorplan.services.staged_mutations import StagedMutations
from floorplan.services.staging_store import StagingStore


def resolve_asset_type(item_type: str, asset_types: Sequence[StagedAssetType]) -> StagedAssetType | None:
    """Asset type whose name matches ``item_type`` ignoring case."""
    wanted = (item_type or "").casefold()
    return next((t for t in asset_types if t.name.casefold() == wanted), None)


@dataclass
class FloorMapViewModel:
    floors: list[StagedFloor] = field(default_factory=list)
    asset_types: list[StagedAssetType] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    item_icons: dict[str, Any] = field(default_factory=dict)

    @classmethod
    async def load(cls, session: AsyncSession, store: StagingStore) -> "FloorMapViewModel":
        gateway = CacheGateway(session, store)
        floors = await gateway.get_floors()
        asset_types = sorted(await gateway.get_asset_types(), key=lambda t: t.name)
        resources = await gateway.get_resources()

        item_icons = {}
        for floor in floors:
            for item in floor.items:
                asset_type = resolve_asset_type(item.type, asset_types)
                item_icons[item.id] = asset_type.icon if asset_type else None

        return cls(floors=floors, asset_types=asset_types, resources=resources, item_icons=item_icons)

    @classmethod
    async def update_position(
        cls, session: AsyncSession, store: StagingStore, floor_item_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        async def _run():
            payload = PositionUpdate.model_validate(data)
            return await StagedMutations(CacheGateway(session, store)).update_position(
                floor_item_id, payload.x, payload.y
            )

        return await run_action(_run(), "update floor item position")

    @classmethod
    async def create_asset_on_floor(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        async def _run():
            payload = PlaceNewAsset.model_validate(data)
            return await StagedMutations(CacheGateway(session, store)).place_new_asset_on_floor(
                floor_id, payload.asset_type_id, payload.asset_type_name, payload.x, payload.y
            )

        return await run_action(_run(), "create asset on floor", session)

    @classmethod
    async def place_existing_asset(
        cls, session: AsyncSession, store: StagingStore, floor_id: str, asset_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        async def _run():
            payload = PlaceExistingAsset.model_validate(data)
            return await StagedMutations(CacheGateway(session, store)).place_existing_asset_on_floor(
                floor_id, asset_id, payload.x, payload.y
            )

        return await run_action(_run(), "place asset on floor", session)

    @classmethod
    async def commit_staged_floors(cls, session: AsyncSession, store: StagingStore) -> ActionResult:
        return await run_action(Reconciler(session, store).commit_staged_floors(), "commit staged floors", session)

    @classmethod
    async def sync_staging(cls, session: AsyncSession, store: StagingStore) -> ActionResult:
        return await run_action(CacheGateway(session, store).refresh_all(), "sync staging", session)
