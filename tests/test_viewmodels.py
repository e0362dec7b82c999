"""Tests for the viewmodel operations behind the HTTP routes."""
import pytest
from sqlalchemy import select

from conftest import DESK_ICON, count_rows
from floorplan.models import AssetType, Floor, FloorItem
from floorplan.schemas.asset_type import StagedAssetType
from floorplan.services.staged_mutations import StagedMutations
from floorplan.services.staging_store import StagingKey
from floorplan.viewmodels.asset_vm import AssetListViewModel, AssetTypeListViewModel
from floorplan.viewmodels.floor_map_vm import FloorMapViewModel, resolve_asset_type
from floorplan.viewmodels.floor_vm import FloorListViewModel, FloorViewModel


def _staged_item(floors, floor_id, item_id):
    floor = next(f for f in floors if f["id"] == floor_id)
    return next((i for i in floor["items"] if i["id"] == item_id), None)


# Asset types

@pytest.mark.asyncio
async def test_create_asset_type(db_session, store):
    result = await AssetTypeListViewModel.create_asset_type(
        db_session, store, {"name": " Chair ", "icon_definition": {"type": "chair", "elements": []}}
    )

    assert result.success
    assert result.data.name == "Chair"
    assert result.data.icon == {"type": "chair", "elements": []}
    assert await count_rows(db_session, AssetType) == 1


@pytest.mark.asyncio
async def test_duplicate_asset_type_name_conflicts(db_session, store, desk_type):
    result = await AssetTypeListViewModel.create_asset_type(
        db_session, store, {"name": "Desk", "iconDefinition": DESK_ICON}
    )

    assert not result.success
    assert result.code == "conflict"
    assert result.error == "Asset type with this name already exists"
    assert await count_rows(db_session, AssetType) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("data", [
    {"name": "Lamp", "icon_definition": "{not json"},
    {"name": "   ", "icon_definition": "{}"},
    {"name": "Lamp"},
])
async def test_invalid_asset_type_is_rejected(db_session, store, data):
    result = await AssetTypeListViewModel.create_asset_type(db_session, store, data)

    assert not result.success
    assert result.code == "validation"
    assert await count_rows(db_session, AssetType) == 0


@pytest.mark.asyncio
async def test_new_asset_type_invalidates_staged_list(db_session, store, desk_type):
    listed = await AssetTypeListViewModel.load(db_session, store)
    assert [t.name for t in listed.asset_types] == ["Desk"]

    await AssetTypeListViewModel.create_asset_type(db_session, store, {"name": "Lamp", "icon_definition": "{}"})
    assert await store.read(StagingKey.ASSET_TYPES) is None

    listed = await AssetTypeListViewModel.load(db_session, store)
    assert sorted(t.name for t in listed.asset_types) == ["Desk", "Lamp"]


# Assets

@pytest.mark.asyncio
async def test_create_asset_writes_through_staged_assets(db_session, store, assigned_desk):
    await AssetListViewModel.load(db_session, store)

    result = await AssetListViewModel.create_asset(
        db_session, store, {"label": "Standing Desk", "assignedTo": "5", "assetTypeId": "type-desk"}
    )

    assert result.success
    staged = await store.read(StagingKey.ASSETS)
    assert [a["id"] for a in staged] == [result.data.id, "asset-1"]
    assert staged[0]["assignedTo"] == "5"


@pytest.mark.asyncio
async def test_create_asset_does_not_start_staging(db_session, store, desk_type):
    result = await AssetListViewModel.create_asset(
        db_session, store, {"label": "Standing Desk", "assigned_to": "5", "asset_type_id": "type-desk"}
    )

    assert result.success
    assert await store.read(StagingKey.ASSETS) is None


@pytest.mark.asyncio
async def test_create_asset_validation_and_unknown_type(db_session, store, desk_type):
    missing = await AssetListViewModel.create_asset(
        db_session, store, {"label": "Desk", "assigned_to": "", "asset_type_id": "type-desk"}
    )
    assert missing.code == "validation"
    assert "assigned" in missing.error

    unknown = await AssetListViewModel.create_asset(
        db_session, store, {"label": "Desk", "assigned_to": "1", "asset_type_id": "type-nope"}
    )
    assert unknown.code == "not_found"


@pytest.mark.asyncio
async def test_update_asset_merges_into_staged_copy(db_session, store, assigned_desk):
    await AssetListViewModel.load(db_session, store)

    result = await AssetListViewModel.update_asset(db_session, store, "asset-1", {"label": "Window Desk"})

    assert result.success
    assert result.data.label == "Window Desk"
    assert result.data.assigned_to == "3"
    (staged,) = await store.read(StagingKey.ASSETS)
    assert staged["label"] == "Window Desk"
    assert staged["assignedTo"] == "3"

    missing = await AssetListViewModel.update_asset(db_session, store, "ghost", {"label": "x"})
    assert missing.code == "not_found"


@pytest.mark.asyncio
async def test_assets_filtered_by_type(db_session, store, assigned_desk):
    vm = await AssetListViewModel.load(db_session, store, asset_type_id="type-desk")
    assert [a.id for a in vm.assets] == ["asset-1"]

    vm = await AssetListViewModel.load(db_session, store, asset_type_id="type-chair")
    assert vm.assets == []


# Floors

@pytest.mark.asyncio
async def test_create_floor(db_session, store, office):
    await FloorListViewModel.load(db_session, store)

    result = await FloorViewModel.create_floor(db_session, store, {"name": "Annex", "width": 300, "height": 200})

    assert result.success
    assert await count_rows(db_session, Floor) == 3
    staged = await store.read(StagingKey.FLOORS)
    assert staged[0] == {"id": result.data.id, "name": "Annex", "width": 300, "height": 200, "items": []}


@pytest.mark.asyncio
async def test_create_floor_rejects_bad_dimensions(db_session, store):
    result = await FloorViewModel.create_floor(db_session, store, {"name": "Annex", "width": 0, "height": 200})

    assert result.code == "validation"
    assert await count_rows(db_session, Floor) == 0


@pytest.mark.asyncio
async def test_update_floor_patches_staged_floor(db_session, store, gateway, office):
    await gateway.get_floors()
    await StagedMutations(gateway).update_position("desk-1", 9, 9)

    result = await FloorViewModel.update_floor(db_session, store, "floor-1", {"name": "HQ"})

    assert result.success
    assert result.data.name == "HQ"
    assert result.data.width == 1000
    floors = await store.read(StagingKey.FLOORS)
    main = next(f for f in floors if f["id"] == "floor-1")
    assert main["name"] == "HQ"
    # unsynced staged positions survive
    assert _staged_item(floors, "floor-1", "desk-1")["pos"] == {"x": 9.0, "y": 9.0}

    missing = await FloorViewModel.update_floor(db_session, store, "floor-404", {"name": "x"})
    assert missing.code == "not_found"


@pytest.mark.asyncio
async def test_floor_list_counts_items(db_session, store, office):
    vm = await FloorListViewModel.load(db_session, store)

    assert len(vm.floors) == 2
    assert vm.total_items == 3


# Floor items

@pytest.mark.asyncio
async def test_add_floor_item_copies_asset(db_session, store, gateway, office, assigned_desk):
    await gateway.get_floors()

    result = await FloorViewModel.add_floor_item(
        db_session, store, "floor-2", {"asset_id": "asset-1", "pos_x": 40, "pos_y": 60}
    )

    assert result.success
    item = result.data
    assert (item.type, item.label, item.assigned_to) == ("Desk", "Corner Desk", "3")
    assert await count_rows(db_session, FloorItem) == 4
    staged = _staged_item(await store.read(StagingKey.FLOORS), "floor-2", item.id)
    assert staged["pos"] == {"x": 40.0, "y": 60.0}


@pytest.mark.asyncio
async def test_add_floor_item_unknown_floor_or_asset(db_session, store, office, assigned_desk):
    no_floor = await FloorViewModel.add_floor_item(db_session, store, "floor-404", {"asset_id": "asset-1"})
    no_asset = await FloorViewModel.add_floor_item(db_session, store, "floor-1", {"asset_id": "ghost"})

    assert no_floor.code == "not_found"
    assert no_asset.code == "not_found"
    assert await count_rows(db_session, FloorItem) == 3


@pytest.mark.asyncio
async def test_label_update_keeps_staged_position(db_session, store, gateway, office):
    await gateway.get_floors()
    await StagedMutations(gateway).update_position("desk-2", 700, 500)

    result = await FloorViewModel.update_floor_item(db_session, store, "desk-2", {"label": "Hot Desk"})

    assert result.success
    staged = _staged_item(await store.read(StagingKey.FLOORS), "floor-1", "desk-2")
    assert staged["label"] == "Hot Desk"
    assert staged["pos"] == {"x": 700.0, "y": 500.0}


@pytest.mark.asyncio
async def test_moving_update_mirrors_position(db_session, store, gateway, office):
    await gateway.get_floors()

    result = await FloorViewModel.update_floor_item(
        db_session, store, "chair-21", {"pos_x": 10, "rotation": 90}
    )

    assert result.success
    assert (result.data.pos.x, result.data.pos.y) == (10.0, 240.0)
    staged = _staged_item(await store.read(StagingKey.FLOORS), "floor-2", "chair-21")
    assert staged["pos"] == {"x": 10.0, "y": 240.0}
    assert staged["rotation"] == 90.0


@pytest.mark.asyncio
async def test_add_floor_item_with_malformed_position_lands_at_origin(db_session, store, office, assigned_desk):
    result = await FloorViewModel.add_floor_item(
        db_session, store, "floor-1", {"assetId": "asset-1", "posX": "abc", "posY": 5}
    )

    assert result.success
    assert (result.data.pos.x, result.data.pos.y) == (0.0, 0.0)
    assert (result.data.label, result.data.assigned_to) == ("Corner Desk", "3")
    row = (await db_session.execute(
        select(FloorItem.pos_x, FloorItem.pos_y).where(FloorItem.id == result.data.id)
    )).one()
    assert tuple(row) == (0.0, 0.0)


@pytest.mark.asyncio
async def test_update_floor_item_with_malformed_position_lands_at_origin(db_session, store, gateway, office):
    await gateway.get_floors()

    result = await FloorViewModel.update_floor_item(
        db_session, store, "desk-2", {"posX": 20, "posY": "nowhere", "label": "Hot Desk"}
    )

    assert result.success
    assert (result.data.pos.x, result.data.pos.y) == (0.0, 0.0)
    assert result.data.label == "Hot Desk"
    assert result.data.assigned_to == "2"
    staged = _staged_item(await store.read(StagingKey.FLOORS), "floor-1", "desk-2")
    assert staged["pos"] == {"x": 0.0, "y": 0.0}
    assert staged["label"] == "Hot Desk"


@pytest.mark.asyncio
async def test_delete_floor_item_purges_staged_copy(db_session, store, gateway, office):
    await gateway.get_floors()

    result = await FloorViewModel.delete_floor_item(db_session, store, "desk-1")

    assert result.success
    assert result.data == {"id": "desk-1", "floor_id": "floor-1"}
    assert await db_session.scalar(select(FloorItem.id).where(FloorItem.id == "desk-1")) is None
    assert _staged_item(await store.read(StagingKey.FLOORS), "floor-1", "desk-1") is None


@pytest.mark.asyncio
async def test_delete_staged_only_item(db_session, store, gateway, office):
    placement = await StagedMutations(gateway).place_new_asset_on_floor("floor-1", "type-desk", "Desk", 1, 1)

    result = await FloorViewModel.delete_floor_item(db_session, store, placement.item.id)

    assert result.success
    assert result.data["floor_id"] == "floor-1"
    assert _staged_item(await store.read(StagingKey.FLOORS), "floor-1", placement.item.id) is None

    missing = await FloorViewModel.delete_floor_item(db_session, store, placement.item.id)
    assert missing.code == "not_found"


# Floor map

def _asset_type(name, icon="{}"):
    return StagedAssetType(id=f"type-{name.lower()}", name=name, icon_definition=icon)


def test_resolve_asset_type_ignores_case():
    types = [_asset_type("Desk"), _asset_type("Chair")]

    assert resolve_asset_type("desk", types).name == "Desk"
    assert resolve_asset_type("CHAIR", types).name == "Chair"
    assert resolve_asset_type("Sofa", types) is None
    assert resolve_asset_type("", types) is None


@pytest.mark.asyncio
async def test_floor_map_load(db_session, store, office):
    vm = await FloorMapViewModel.load(db_session, store)

    assert {f.id for f in vm.floors} == {"floor-1", "floor-2"}
    assert [t.name for t in vm.asset_types] == ["Desk"]
    assert len(vm.resources) == 15
    assert vm.item_icons["desk-1"]["type"] == "desk"
    assert vm.item_icons["chair-21"] is None


@pytest.mark.asyncio
async def test_floor_map_actions_report_codes(db_session, store, office):
    no_staging = await FloorMapViewModel.update_position(db_session, store, "desk-1", {"x": 1, "y": 2})
    assert no_staging.code == "not_found"

    bad_type = await FloorMapViewModel.create_asset_on_floor(
        db_session, store, "floor-1", {"asset_type_id": "", "asset_type_name": "Desk"}
    )
    assert bad_type.code == "validation"

    placed = await FloorMapViewModel.create_asset_on_floor(
        db_session, store, "floor-1", {"assetTypeId": "type-desk", "assetTypeName": "Desk", "x": 3, "y": 4}
    )
    assert placed.success

    moved = await FloorMapViewModel.update_position(db_session, store, placed.data.item.id, {"x": 8, "y": 9})
    assert moved.success
    assert (moved.data.pos.x, moved.data.pos.y) == (8.0, 9.0)

    again = await FloorMapViewModel.place_existing_asset(
        db_session, store, "floor-2", placed.data.asset.id, {"x": 1, "y": 1}
    )
    assert again.success
    assert again.data.item.label == placed.data.asset.label


@pytest.mark.asyncio
async def test_sync_staging(db_session, store, office):
    await store.write_all(StagingKey.FLOORS, [])

    result = await FloorMapViewModel.sync_staging(db_session, store)

    assert result.success
    assert result.data["floors"] == 2
    assert len(await store.read(StagingKey.FLOORS)) == 2
