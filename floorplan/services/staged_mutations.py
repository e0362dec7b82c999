import logging
import time
from typing import Any

from floorplan.config import settings
from floorplan.errors import NotFoundError, StorageError, ValidationError
from floorplan.models.base import new_id, utcnow
from floorplan.schemas.asset import StagedAsset
from floorplan.schemas.floor import Placement, Position, StagedFloorItem
from floorplan.services.cache_gateway import CacheGateway, parse_collection
from floorplan.services.staging_store import Collection, StagingKey

logger = logging.getLogger(__name__)


def auto_label(asset_type_name: str) -> str:
    """Label for an asset created by dropping its type onto a floor, e.g. ``Desk-482913``."""
    digits = max(settings.auto_label_suffix_digits, 1)
    suffix = str(time.time_ns() // 1_000_000)[-digits:]
    return f"{asset_type_name}-{suffix}"


class StagedMutations:
    """Floor-map edits that only touch the staging store.

    The durable store sees these changes when the reconciler commits them.
    """

    def __init__(self, gateway: CacheGateway):
        self.gateway = gateway
        self.store = gateway.store

    async def update_position(self, floor_item_id: str, x: Any, y: Any) -> StagedFloorItem:
        pos = Position.of(x, y).model_dump()
        state: dict[str, Any] = {"staged": False, "item": None}

        def change(floors: Collection | None) -> Collection | None:
            if floors is None:
                return None
            state["staged"] = True
            for floor in floors:
                items = floor.get("items") if isinstance(floor, dict) else None
                for item in items if isinstance(items, list) else []:
                    if isinstance(item, dict) and item.get("id") == floor_item_id:
                        item["pos"] = dict(pos)
                        state["item"] = item
                        return floors
            return None

        applied = await self.store.mutate(StagingKey.FLOORS, change)
        if not state["staged"]:
            raise NotFoundError("No staged floor data")
        if state["item"] is None:
            raise NotFoundError(f"Floor item {floor_item_id} not found on any staged floor")
        if not applied:
            raise StorageError("Could not save the staged position")
        return StagedFloorItem.model_validate(state["item"])

    async def place_new_asset_on_floor(
        self, floor_id: str, asset_type_id: str, asset_type_name: str, x: Any, y: Any
    ) -> Placement:
        asset_type_name = (asset_type_name or "").strip()
        if not asset_type_id or not asset_type_name:
            raise ValidationError("Asset type id and name are required")
        await self._require_staged_floor(floor_id)
        # pulls durable assets into staging first so the new one is not the only staged asset
        await self.gateway.get_all_assets()

        now = utcnow()
        asset = StagedAsset(
            id=new_id(),
            label=auto_label(asset_type_name),
            assigned_to=None,
            asset_type_id=asset_type_id,
            created_at=now,
            updated_at=now,
        )
        item = StagedFloorItem(
            id=new_id(),
            type=asset_type_name,
            pos=Position.of(x, y),
            rotation=0,
            label=asset.label,
        )

        if not await self.store.append_item(StagingKey.ASSETS, asset.to_staged()):
            raise StorageError("Could not stage the new asset")
        if not await self.store.append_floor_item(floor_id, item.to_staged()):
            await self.store.remove_item(StagingKey.ASSETS, asset.id)
            raise StorageError("Could not stage the new floor item")

        logger.info("Staged new %s asset %s on floor %s", asset_type_name, asset.id, floor_id)
        return Placement(floor_id=floor_id, item=item, asset=asset)

    async def place_existing_asset_on_floor(self, floor_id: str, asset_id: str, x: Any, y: Any) -> Placement:
        raw_assets = await self.store.read(StagingKey.ASSETS)
        if raw_assets is None:
            raise NotFoundError("No staged assets")
        asset = next((a for a in parse_collection(StagedAsset, raw_assets) if a.id == asset_id), None)
        if asset is None:
            raise NotFoundError(f"Asset {asset_id} not found")

        asset_types = await self.gateway.get_asset_types()
        asset_type = next((t for t in asset_types if t.id == asset.asset_type_id), None)
        if asset_type is None:
            raise NotFoundError(f"Asset type {asset.asset_type_id} not found")
        await self._require_staged_floor(floor_id)

        item = StagedFloorItem(
            id=new_id(),
            type=asset_type.name,
            pos=Position.of(x, y),
            rotation=0,
            label=asset.label,
            assigned_to=asset.assigned_to,
        )
        if not await self.store.append_floor_item(floor_id, item.to_staged()):
            raise StorageError("Could not stage the floor item")

        logger.info("Staged asset %s on floor %s as item %s", asset.id, floor_id, item.id)
        return Placement(floor_id=floor_id, item=item, asset=asset)

    async def _require_staged_floor(self, floor_id: str) -> None:
        floors = await self.gateway.get_floors()
        if not any(floor.id == floor_id for floor in floors):
            raise NotFoundError(f"Floor {floor_id} not found")
