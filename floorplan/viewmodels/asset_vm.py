from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.errors import ConflictError, NotFoundError, run_action
from floorplan.repositories.asset_repo import AssetRepository
from floorplan.repositories.asset_type_repo import AssetTypeRepository
from floorplan.schemas.asset import AssetCreate, AssetUpdate, StagedAsset
from floorplan.schemas.asset_type import AssetTypeCreate, StagedAssetType
from floorplan.schemas.common import ActionResult
from floorplan.services.cache_gateway import CacheGateway, asset_to_staged, asset_type_to_staged
from floorplan.services.staging_store import StagingKey, StagingStore


@dataclass
class AssetTypeListViewModel:
    asset_types: list[StagedAssetType] = field(default_factory=list)

    @classmethod
    async def load(cls, session: AsyncSession, store: StagingStore) -> "AssetTypeListViewModel":
        gateway = CacheGateway(session, store)
        return cls(asset_types=await gateway.get_asset_types())

    @classmethod
    async def create_asset_type(
        cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]
    ) -> ActionResult:
        return await run_action(cls._create_asset_type(session, store, data), "create asset type", session)

    @classmethod
    async def _create_asset_type(
        cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]
    ) -> StagedAssetType:
        payload = AssetTypeCreate.model_validate(data)
        repo = AssetTypeRepository(session)
        if await repo.get_by_name(payload.name):
            raise ConflictError("Asset type with this name already exists")
        try:
            asset_type = await repo.create(name=payload.name, icon_definition=payload.icon_definition)
            await session.commit()
        except IntegrityError:
            await session.rollback()
            raise ConflictError("Asset type with this name already exists") from None
        await store.invalidate(StagingKey.ASSET_TYPES)
        return asset_type_to_staged(asset_type)


@dataclass
class AssetListViewModel:
    assets: list[StagedAsset] = field(default_factory=list)
    asset_type_id: str | None = None

    @classmethod
    async def load(
        cls, session: AsyncSession, store: StagingStore, asset_type_id: str | None = None
    ) -> "AssetListViewModel":
        gateway = CacheGateway(session, store)
        if asset_type_id:
            assets = await gateway.get_assets_by_type(asset_type_id)
        else:
            assets = await gateway.get_all_assets()
        return cls(assets=assets, asset_type_id=asset_type_id)

    @classmethod
    async def create_asset(cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]) -> ActionResult:
        return await run_action(cls._create_asset(session, store, data), "create asset", session)

    @classmethod
    async def update_asset(
        cls, session: AsyncSession, store: StagingStore, asset_id: str, data: Mapping[str, Any]
    ) -> ActionResult:
        return await run_action(cls._update_asset(session, store, asset_id, data), "update asset", session)

    @classmethod
    async def _create_asset(cls, session: AsyncSession, store: StagingStore, data: Mapping[str, Any]) -> StagedAsset:
        payload = AssetCreate.model_validate(data)
        if not await AssetTypeRepository(session).get(payload.asset_type_id):
            raise NotFoundError(f"Asset type {payload.asset_type_id} not found")

        asset = await AssetRepository(session).create(**payload.model_dump())
        await session.commit()

        staged = asset_to_staged(asset)
        await store.append_item(StagingKey.ASSETS, staged.to_staged(), create_missing=False)
        return staged

    @classmethod
    async def _update_asset(
        cls, session: AsyncSession, store: StagingStore, asset_id: str, data: Mapping[str, Any]
    ) -> StagedAsset:
        updates = AssetUpdate.model_validate(data).model_dump(exclude_unset=True)
        new_type = updates.get("asset_type_id")
        if new_type and not await AssetTypeRepository(session).get(new_type):
            raise NotFoundError(f"Asset type {new_type} not found")

        asset = await AssetRepository(session).update(asset_id, **updates)
        if asset is None:
            raise NotFoundError(f"Asset {asset_id} not found")
        await session.commit()

        staged = asset_to_staged(asset)
        await store.update_item(StagingKey.ASSETS, asset_id, lambda record: {**record, **staged.to_staged()})
        return staged
