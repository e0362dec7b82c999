from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floorplan.models.asset import Asset
from floorplan.repositories.base import BaseRepository


class AssetRepository(BaseRepository[Asset]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Asset)

    async def get_with_type(self, asset_id: str) -> Asset | None:
        stmt = select(Asset).options(selectinload(Asset.asset_type)).where(Asset.id == asset_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
