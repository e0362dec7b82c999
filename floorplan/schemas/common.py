from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ActionResult(BaseModel):
    success: bool
    data: Any = None
    error: str | None = None
    code: str | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, code: str) -> "ActionResult":
        return cls(success=False, error=error, code=str(code))


class CommitSummary(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    floors_committed: int = 0
    items_committed: int = 0
    assets_committed: int = 0


class StagedModel(BaseModel):
    """Base for records kept in the staging store (camelCase JSON)."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_staged(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InputModel(BaseModel):
    """Request payloads; fields accept snake_case or camelCase keys."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
