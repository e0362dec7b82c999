from floorplan.models.asset import Asset
from floorplan.models.asset_type import AssetType
from floorplan.models.base import Base
from floorplan.models.floor import Floor, FloorItem

__all__ = ["Asset", "AssetType", "Base", "Floor", "FloorItem"]
