from datetime import datetime

from pydantic import Field

from floorplan.schemas.common import InputModel, StagedModel


class AssetCreate(InputModel):
    label: str = Field(min_length=1, max_length=200)
    assigned_to: str = Field(min_length=1, max_length=50)
    asset_type_id: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class AssetUpdate(InputModel):
    label: str | None = Field(default=None, min_length=1, max_length=200)
    assigned_to: str | None = Field(default=None, max_length=50)
    asset_type_id: str | None = Field(default=None, min_length=1)

    model_config = {"str_strip_whitespace": True}


class StagedAsset(StagedModel):
    id: str
    label: str
    assigned_to: str | None = None
    asset_type_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
