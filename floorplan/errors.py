import logging
from collections.abc import Awaitable
from enum import StrEnum
from typing import Any

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.schemas.common import ActionResult

logger = logging.getLogger(__name__)


class ErrorCode(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class FloorPlanError(Exception):
    code: ErrorCode = ErrorCode.STORAGE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FloorPlanError):
    code = ErrorCode.VALIDATION


class NotFoundError(FloorPlanError):
    code = ErrorCode.NOT_FOUND


class NothingToCommitError(NotFoundError):
    def __init__(self, message: str = "No staged floors to commit"):
        super().__init__(message)


class ConflictError(FloorPlanError):
    code = ErrorCode.CONFLICT


class StorageError(FloorPlanError):
    code = ErrorCode.STORAGE


def _describe_validation(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "value"
    return f"{field}: {first.get('msg', 'invalid value')}"


async def run_action(
    operation: Awaitable[Any], action: str, session: AsyncSession | None = None
) -> ActionResult:
    """Await ``operation`` and fold its outcome into an ActionResult.

    Domain errors, pydantic validation errors and database errors become
    failures; anything else propagates. A database error rolls ``session`` back.
    """
    try:
        data = await operation
    except FloorPlanError as exc:
        logger.info("%s failed (%s): %s", action, exc.code, exc.message)
        return ActionResult.failure(exc.message, exc.code)
    except pydantic.ValidationError as exc:
        message = _describe_validation(exc)
        logger.info("%s rejected: %s", action, message)
        return ActionResult.failure(message, ErrorCode.VALIDATION)
    except SQLAlchemyError as exc:
        if session is not None:
            await session.rollback()
        logger.exception("%s failed in the durable store", action)
        return ActionResult.failure(str(getattr(exc, "orig", None) or exc), ErrorCode.STORAGE)
    return ActionResult.ok(data)
