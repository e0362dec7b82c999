from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floorplan.models.floor import Floor, FloorItem
from floorplan.repositories.base import BaseRepository


class FloorRepository(BaseRepository[Floor]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Floor)

    async def get_with_items(self, floor_id: str) -> Floor | None:
        stmt = (
            select(Floor)
            .options(selectinload(Floor.items))
            .where(Floor.id == floor_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all_with_items(self) -> list[Floor]:
        stmt = (
            select(Floor)
            .options(selectinload(Floor.items))
            .order_by(Floor.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_items(self, floor_id: str, rows: list[dict[str, Any]]) -> int:
        """Delete every item of the floor, then bulk insert ``rows``.

        Each row is a FloorItem attribute mapping; ``floor_id`` is filled in.
        """
        await self.session.execute(
            delete(FloorItem)
            .where(FloorItem.floor_id == floor_id)
            .execution_options(synchronize_session=False)
        )
        if rows:
            await self.session.execute(
                insert(FloorItem), [{**row, "floor_id": floor_id} for row in rows]
            )
        await self.session.flush()
        return len(rows)


class FloorItemRepository(BaseRepository[FloorItem]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, FloorItem)
