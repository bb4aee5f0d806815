"""FastAPI endpoints for admin review actions.

Provides:
- Bulk approval of tasks and documents, bulk stage completion
- Bulk attendance marking
- Session link management and cohort completion
- Per-participant session completions
"""

import uuid
from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from journeydesk.api.dependencies import Actor, call_service, require_admin, require_api_key
from journeydesk.api.v1.schemas import (
    AttendanceAllPresentIn,
    AttendanceMarkIn,
    CompletionToggleIn,
    DocumentSelection,
    LinkActiveIn,
    LinkIn,
    StageSelection,
    TaskSelection,
)
from journeydesk.db.session import get_store_async_session
from journeydesk.models.enums import SessionType
from journeydesk.services.bulk_actions import BulkActionService
from journeydesk.services.session_links import SessionCompletionService, SessionLinkService

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Admin"],
    dependencies=[Depends(require_api_key)],
)


# ===================================================================
# BULK ACTIONS
# ===================================================================


@router.get("/users/{user_id}/bulk-candidates")
async def get_bulk_candidates(
    user_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    candidates = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).load_candidates(user_id),
    )
    return asdict(candidates)


@router.post("/users/{user_id}/bulk/tasks")
async def bulk_approve_tasks(
    user_id: uuid.UUID,
    body: TaskSelection,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    applied = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).approve_tasks(user_id, body.task_ids),
    )
    return {"applied": applied}


@router.post("/bulk/documents")
async def bulk_approve_documents(
    body: DocumentSelection,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    applied = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).approve_documents(body.document_ids),
    )
    return {"applied": applied}


@router.post("/users/{user_id}/bulk/stages")
async def bulk_complete_stages(
    user_id: uuid.UUID,
    body: StageSelection,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    applied = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).complete_stages(user_id, body.stage_ids),
    )
    return {"applied": applied}


@router.post("/bulk/attendance")
async def bulk_mark_attendance(
    body: AttendanceMarkIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    """Record a daily or session check-in for each selected participant."""
    applied = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).mark_attendance(
            body.user_ids, body.date, body.attendance_type, body.session_name
        ),
    )
    return {"applied": applied}


@router.post("/bulk/attendance/all-present")
async def bulk_mark_all_present(
    body: AttendanceAllPresentIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    """Daily check-in for every participant not yet marked that day."""
    batch = None if body.batch in (None, "", "all") else body.batch
    applied = await call_service(
        session,
        lambda repo: BulkActionService(repo, actor.id).mark_all_present(body.date, batch),
    )
    return {"applied": applied}


# ===================================================================
# SESSION LINKS
# ===================================================================


@router.get("/links")
async def list_links(
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    links = await call_service(session, lambda repo: SessionLinkService(repo, actor.id).list_links())
    return {"links": links}


@router.post("/links", status_code=201)
async def create_link(
    body: LinkIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    return await call_service(
        session,
        lambda repo: SessionLinkService(repo, actor.id).create_link(**body.model_dump()),
    )


@router.put("/links/{link_id}")
async def update_link(
    link_id: uuid.UUID,
    body: LinkIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    return await call_service(
        session,
        lambda repo: SessionLinkService(repo, actor.id).update_link(link_id, **body.model_dump()),
    )


@router.delete("/links/{link_id}", status_code=204)
async def delete_link(
    link_id: uuid.UUID,
    confirm: bool = False,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    await call_service(
        session,
        lambda repo: SessionLinkService(repo, actor.id).delete_link(link_id, confirm),
    )


@router.post("/links/{link_id}/active")
async def set_link_active(
    link_id: uuid.UUID,
    body: LinkActiveIn,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    return await call_service(
        session,
        lambda repo: SessionLinkService(repo, actor.id).set_active(link_id, body.is_active),
    )


@router.post("/links/{link_id}/complete")
async def mark_link_complete(
    link_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    """Mark the link's session completed for every participant it targets."""
    result = await call_service(
        session,
        lambda repo: SessionLinkService(repo, actor.id).mark_complete_for_cohort(link_id),
    )
    return asdict(result)


# ===================================================================
# SESSION COMPLETIONS
# ===================================================================


@router.get("/users/{user_id}/sessions")
async def list_session_completions(
    user_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    completions = await call_service(
        session,
        lambda repo: SessionCompletionService(repo, actor.id).list_completions(user_id),
    )
    return {"user_id": str(user_id), "completions": completions}


@router.post("/users/{user_id}/sessions/{session_type}/toggle")
async def toggle_session_completion(
    user_id: uuid.UUID,
    session_type: SessionType,
    body: CompletionToggleIn | None = None,
    actor: Actor = Depends(require_admin),
    session: AsyncSession = Depends(get_store_async_session),
):
    notes = body.notes if body else None
    completed = await call_service(
        session,
        lambda repo: SessionCompletionService(repo, actor.id).toggle(user_id, session_type, notes),
    )
    return {"user_id": str(user_id), "session_type": session_type.value, "completed": completed}
