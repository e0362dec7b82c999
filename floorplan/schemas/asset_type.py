import json
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from floorplan.schemas.common import InputModel, StagedModel


class AssetTypeCreate(InputModel):
    name: str = Field(min_length=1, max_length=100)
    icon_definition: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}

    @field_validator("icon_definition", mode="before")
    @classmethod
    def _serialize_structured(cls, value: Any) -> Any:
        if isinstance(value, (dict, list)):
            return json.dumps(value)
        return value

    @field_validator("icon_definition")
    @classmethod
    def _must_be_json(cls, value: str) -> str:
        try:
            json.loads(value)
        except ValueError:
            raise ValueError("icon definition must be valid JSON") from None
        return value


class StagedAssetType(StagedModel):
    id: str
    name: str
    icon_definition: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def icon(self) -> Any:
        """Decoded icon descriptor, or None when the stored text is not JSON."""
        try:
            return json.loads(self.icon_definition)
        except ValueError:
            return None
