"""Shared FastAPI dependencies: API key, caller identity, service calls."""

import uuid
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from journeydesk.config import settings
from journeydesk.errors import BulkActionError, JourneyDeskError
from journeydesk.models.enums import AppRole
from journeydesk.repository import StoreRepository


@dataclass(frozen=True)
class Actor:
    id: uuid.UUID | None
    role: AppRole | None


async def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
    if x_api_key != settings.api_key.get_secret_value():
        raise HTTPException(status_code=401, detail="Invalid API key")


async def get_actor(
    x_actor_id: uuid.UUID | None = Header(default=None),
    x_actor_role: AppRole | None = Header(default=None),
) -> Actor:
    return Actor(id=x_actor_id, role=x_actor_role)


async def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.role != AppRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin role required")
    return actor


def http_error(error: JourneyDeskError) -> HTTPException:
    detail: dict[str, Any] = {"code": error.code}
    if isinstance(error, BulkActionError):
        detail["applied"] = error.applied
    return HTTPException(status_code=error.status_code, detail=detail)


async def call_service(session: AsyncSession, fn: Callable[[StoreRepository], Any]) -> Any:
    """Run a synchronous service call against the request's session."""

    def _call(sync_session: Session):
        return fn(StoreRepository(sync_session))

    try:
        return await session.run_sync(_call)
    except JourneyDeskError as e:
        raise http_error(e) from e
