import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

from floorplan.schemas.asset import StagedAsset
from floorplan.schemas.common import InputModel, StagedModel


def _finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_position(value: Any) -> dict[str, float]:
    """Return ``{"x", "y"}`` as finite floats, or the origin for anything malformed."""
    if isinstance(value, Position):
        value = value.model_dump()
    if isinstance(value, dict):
        x, y = _finite(value.get("x")), _finite(value.get("y"))
        if x is not None and y is not None:
            return {"x": x, "y": y}
    return {"x": 0.0, "y": 0.0}


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def of(cls, x: Any, y: Any) -> "Position":
        return cls(**coerce_position({"x": x, "y": y}))


class StagedFloorItem(StagedModel):
    id: str
    type: str
    pos: Position = Field(default_factory=Position)
    rotation: float = 0.0
    label: str | None = None
    assigned_to: str | None = None

    @field_validator("pos", mode="before")
    @classmethod
    def _coerce_pos(cls, value: Any) -> dict[str, float]:
        return coerce_position(value)

    @field_validator("rotation", mode="before")
    @classmethod
    def _coerce_rotation(cls, value: Any) -> float:
        rotation = _finite(value)
        return 0.0 if rotation is None else rotation


class StagedFloor(StagedModel):
    id: str
    name: str
    width: int
    height: int
    items: list[StagedFloorItem] = Field(default_factory=list)


class FloorCreate(InputModel):
    name: str = Field(min_length=1, max_length=100)
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    model_config = {"str_strip_whitespace": True}


class FloorUpdate(InputModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    model_config = {"str_strip_whitespace": True}


class FloorItemCreate(InputModel):
    asset_id: str = Field(min_length=1)
    pos_x: Any = 0.0
    pos_y: Any = 0.0


class FloorItemUpdate(InputModel):
    label: str | None = Field(default=None, max_length=200)
    assigned_to: str | None = Field(default=None, max_length=50)
    rotation: float | None = None
    pos_x: Any = None
    pos_y: Any = None


class PositionUpdate(InputModel):
    x: Any = 0.0
    y: Any = 0.0


class PlaceNewAsset(PositionUpdate):
    asset_type_id: str = Field(min_length=1)
    asset_type_name: str = Field(min_length=1)


class PlaceExistingAsset(PositionUpdate):
    pass


class Placement(StagedModel):
    floor_id: str
    item: StagedFloorItem
    asset: StagedAsset
