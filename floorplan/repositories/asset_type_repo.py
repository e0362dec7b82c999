from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.models.asset_type import AssetType
from floorplan.repositories.base import BaseRepository


class AssetTypeRepository(BaseRepository[AssetType]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, AssetType)

    async def get_by_name(self, name: str) -> AssetType | None:
        stmt = select(AssetType).where(AssetType.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
