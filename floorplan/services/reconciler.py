import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.errors import NothingToCommitError, StorageError
from floorplan.repositories.asset_repo import AssetRepository
from floorplan.repositories.floor_repo import FloorRepository
from floorplan.schemas.asset import StagedAsset
from floorplan.schemas.common import CommitSummary
from floorplan.schemas.floor import StagedFloor, StagedFloorItem
from floorplan.services.cache_gateway import parse_collection
from floorplan.services.staging_store import StagingKey, StagingStore

logger = logging.getLogger(__name__)


def _item_row(item: StagedFloorItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "type": item.type,
        "pos_x": item.pos.x,
        "pos_y": item.pos.y,
        "rotation": item.rotation,
        "label": item.label,
        "assigned_to": item.assigned_to,
    }


class Reconciler:
    """Flushes the staged floors, floor items and assets into the durable store.

    The staged snapshot is read once. Floors and assets are upserted by their
    staged ids, and each floor's durable item set is replaced by its staged
    item list. Everything is written in a single transaction, so a failure
    anywhere leaves the durable store as it was.
    """

    def __init__(self, session: AsyncSession, store: StagingStore):
        self.session = session
        self.store = store

    async def commit_staged_floors(self) -> CommitSummary:
        raw_floors = await self.store.read(StagingKey.FLOORS)
        if raw_floors is None:
            raise NothingToCommitError()
        raw_assets = await self.store.read(StagingKey.ASSETS)

        floors = parse_collection(StagedFloor, raw_floors)
        assets = parse_collection(StagedAsset, raw_assets or [])

        floor_repo = FloorRepository(self.session)
        asset_repo = AssetRepository(self.session)
        summary = CommitSummary()
        try:
            for floor in floors:
                await floor_repo.upsert(floor.id, name=floor.name, width=floor.width, height=floor.height)
                summary.items_committed += await floor_repo.replace_items(
                    floor.id, [_item_row(item) for item in floor.items]
                )
                summary.floors_committed += 1

            for asset in assets:
                await asset_repo.upsert(
                    asset.id,
                    label=asset.label,
                    assigned_to=asset.assigned_to,
                    asset_type_id=asset.asset_type_id,
                )
                summary.assets_committed += 1

            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Commit of staged floors failed, durable store rolled back")
            raise StorageError(f"Commit failed: {getattr(exc, 'orig', None) or exc}") from exc

        logger.info(
            "Committed %d floors (%d items) and %d assets",
            summary.floors_committed,
            summary.items_committed,
            summary.assets_committed,
        )
        return summary
