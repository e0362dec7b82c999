from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    def __init__(self, session: AsyncSession, model: type[T]):
        self.session = session
        self.model = model

    async def get(self, id: str) -> T | None:
        return await self.session.get(self.model, id, populate_existing=True)

    async def get_all(self, offset: int = 0, limit: int | None = None) -> list[T]:
        stmt = select(self.model).order_by(self.model.created_at.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> T:
        obj = self.model(**kwargs)
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def update(self, id: str, **kwargs: Any) -> T | None:
        obj = await self.get(id)
        if obj is None:
            return None
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        if not kwargs:
            return obj
        for key, value in kwargs.items():
            setattr(obj, key, value)
        await self.session.flush()
        await self.session.refresh(obj)
        return obj

    async def upsert(self, id: str, **kwargs: Any) -> tuple[T, bool]:
        """Update the row with ``id`` or insert it under that same id.

        Returns the row and whether it was inserted.
        """
        obj = await self.get(id)
        if obj is None:
            obj = self.model(id=id, **kwargs)
            self.session.add(obj)
            await self.session.flush()
            return obj, True
        for key, value in kwargs.items():
            setattr(obj, key, value)
        await self.session.flush()
        return obj, False

    async def delete(self, id: str) -> bool:
        stmt = delete(self.model).where(self.model.id == id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
