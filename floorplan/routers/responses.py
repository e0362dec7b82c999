from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from floorplan.errors import ErrorCode
from floorplan.schemas.common import ActionResult, StagedModel

_STATUS_BY_CODE = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.STORAGE: 500,
}


def encode(value: Any) -> Any:
    if isinstance(value, StagedModel):
        return value.to_staged()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [encode(v) for v in value]
    if isinstance(value, dict):
        return {k: encode(v) for k, v in value.items()}
    return jsonable_encoder(value)


def result_response(result: ActionResult, status_code: int = 200) -> JSONResponse:
    if not result.success:
        status_code = _STATUS_BY_CODE.get(result.code, 500)
    body = {
        "success": result.success,
        "data": encode(result.data),
        "error": result.error,
        "code": result.code,
    }
    return JSONResponse(body, status_code=status_code)
