import logging
from typing import TypeVar
from collections.abc import Awaitable, Callable, Sequence

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.models.asset import Asset
from floorplan.models.asset_type import AssetType
from floorplan.models.floor import Floor, FloorItem
from floorplan.repositories.asset_repo import AssetRepository
from floorplan.repositories.asset_type_repo import AssetTypeRepository
from floorplan.repositories.floor_repo import FloorRepository
from floorplan.resources import DEFAULT_ROSTER
from floorplan.schemas.asset import StagedAsset
from floorplan.schemas.asset_type import StagedAssetType
from floorplan.schemas.common import StagedModel
from floorplan.schemas.floor import Position, StagedFloor, StagedFloorItem
from floorplan.schemas.resource import Resource
from floorplan.services.staging_store import StagingKey, StagingStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=StagedModel)


def asset_type_to_staged(row: AssetType) -> StagedAssetType:
    return StagedAssetType(
        id=row.id,
        name=row.name,
        icon_definition=row.icon_definition,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def asset_to_staged(row: Asset) -> StagedAsset:
    return StagedAsset(
        id=row.id,
        label=row.label,
        assigned_to=row.assigned_to or None,
        asset_type_id=row.asset_type_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def floor_item_to_staged(row: FloorItem) -> StagedFloorItem:
    return StagedFloorItem(
        id=row.id,
        type=row.type,
        pos=Position.of(row.pos_x, row.pos_y),
        rotation=row.rotation or 0.0,
        label=row.label or None,
        assigned_to=row.assigned_to or None,
    )


def floor_to_staged(row: Floor) -> StagedFloor:
    return StagedFloor(
        id=row.id,
        name=row.name,
        width=row.width,
        height=row.height,
        items=[floor_item_to_staged(item) for item in row.items],
    )


def parse_collection(model: type[M], raw: list) -> list[M]:
    """Validate staged records, skipping any that cannot be repaired."""
    records = []
    for record in raw:
        try:
            records.append(model.model_validate(record))
        except pydantic.ValidationError as exc:
            logger.warning("Skipping malformed staged %s record: %s", model.__name__, exc.errors()[0])
    return records


class CacheGateway:
    """Read-through access to every entity collection.

    The staged copy wins whenever it exists; otherwise the durable store is
    read once and its records are written to staging before being returned.
    """

    def __init__(
        self,
        session: AsyncSession,
        store: StagingStore,
        roster: Sequence[Resource] = DEFAULT_ROSTER,
    ):
        self.session = session
        self.store = store
        self.roster = roster

    async def get_asset_types(self) -> list[StagedAssetType]:
        return await self._read_through(StagingKey.ASSET_TYPES, StagedAssetType, self._fetch_asset_types)

    async def get_all_assets(self) -> list[StagedAsset]:
        return await self._read_through(StagingKey.ASSETS, StagedAsset, self._fetch_assets)

    async def get_assets_by_type(self, asset_type_id: str) -> list[StagedAsset]:
        return [a for a in await self.get_all_assets() if a.asset_type_id == asset_type_id]

    async def get_floors(self) -> list[StagedFloor]:
        return await self._read_through(StagingKey.FLOORS, StagedFloor, self._fetch_floors)

    async def get_resources(self) -> list[Resource]:
        return await self._read_through(StagingKey.RESOURCES, Resource, self._fetch_resources)

    async def refresh_all(self) -> dict[str, int]:
        """Overwrite every staged collection with the durable store's current state.

        Unlike the getters, durable errors propagate so the caller can report them.
        """
        fetchers = {
            StagingKey.ASSET_TYPES: self._fetch_asset_types,
            StagingKey.ASSETS: self._fetch_assets,
            StagingKey.FLOORS: self._fetch_floors,
            StagingKey.RESOURCES: self._fetch_resources,
        }
        counts = {}
        for key, fetch in fetchers.items():
            records = await fetch()
            await self.store.write_all(key, [r.to_staged() for r in records])
            counts[str(key)] = len(records)
            logger.info("Synced %d %s into staging", len(records), key)
        return counts

    async def _read_through(
        self,
        key: StagingKey,
        model: type[M],
        fetch: Callable[[], Awaitable[list[M]]],
    ) -> list[M]:
        raw = await self.store.read(key)
        if raw is not None:
            return parse_collection(model, raw)

        try:
            records = await fetch()
        except SQLAlchemyError:
            logger.exception("Could not load %s from the durable store", key)
            return []

        await self.store.write_all(key, [r.to_staged() for r in records])
        logger.info("Filled staged %s with %d records", key, len(records))
        return records

    async def _fetch_asset_types(self) -> list[StagedAssetType]:
        rows = await AssetTypeRepository(self.session).get_all()
        return [asset_type_to_staged(row) for row in rows]

    async def _fetch_assets(self) -> list[StagedAsset]:
        rows = await AssetRepository(self.session).get_all()
        return [asset_to_staged(row) for row in rows]

    async def _fetch_floors(self) -> list[StagedFloor]:
        rows = await FloorRepository(self.session).get_all_with_items()
        return [floor_to_staged(row) for row in rows]

    async def _fetch_resources(self) -> list[Resource]:
        return list(self.roster)
