"""FastAPI endpoints for the facilitator dashboard, navigation and audit history.

Provides:
- Pending review summary and per-participant load
- Drill-down into each pending count
- Participant comparison
- Attendance reports
- Role navigation and per-record audit history
"""

import uuid
from dataclasses import asdict
from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from journeydesk.api.dependencies import Actor, call_service, get_actor, require_api_key
from journeydesk.db.session import get_store_async_session
from journeydesk.reporting.aggregation import MAX_COMPARED_PARTICIPANTS
from journeydesk.services.audit import AuditHistoryReader
from journeydesk.services.dashboard import DashboardSnapshot, FacilitatorDashboard
from journeydesk.services.navigation import NavigationResolver

router = APIRouter(prefix="/api/v1", tags=["Dashboard"], dependencies=[Depends(require_api_key)])

# Last good dashboard snapshot per viewer, bounded by MAX_SNAPSHOTS with the
# least recently refreshed viewers evicted first.
_snapshots: dict[uuid.UUID, DashboardSnapshot] = {}


def _require_viewer(actor: Actor) -> uuid.UUID:
    if actor.id is None:
        raise HTTPException(status_code=400, detail="X-Actor-Id header required")
    return actor.id


# ===================================================================
# DASHBOARD
# ===================================================================


@router.get("/dashboard/summary")
async def get_dashboard_summary(
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_store_async_session),
):
    """Pending review counts for the viewer's participants, busiest participant first."""
    viewer_id = _require_viewer(actor)
    snapshot = await call_service(
        session,
        lambda repo: FacilitatorDashboard(repo, _snapshots).refresh(viewer_id, actor.role),
    )

    return {
        "summary": {**asdict(snapshot.summary), "total": snapshot.summary.total},
        "participants": [
            {**asdict(p), "total_pending": p.total_pending}
            for p in snapshot.participants
        ],
    }


@router.get("/dashboard/drill-down/{kind}")
async def get_dashboard_drill_down(
    kind: Literal["tasks", "documents", "trades", "enrollments"],
    actor: Actor = Depends(get_actor),
    session: AsyncSession = Depends(get_store_async_session),
):
    viewer_id = _require_viewer(actor)
    records = await call_service(
        session,
        lambda repo: FacilitatorDashboard(repo, _snapshots).drill_down(viewer_id, actor.role, kind),
    )
    return {"kind": kind, "count": len(records), "records": records}


@router.get("/dashboard/compare")
async def compare_participants(
    user_id: Annotated[list[uuid.UUID], Query()],
    session: AsyncSession = Depends(get_store_async_session),
):
    """Side-by-side progress for up to five participants."""
    if len(user_id) > MAX_COMPARED_PARTICIPANTS:
        raise HTTPException(
            status_code=422,
            detail=f"At most {MAX_COMPARED_PARTICIPANTS} participants can be compared",
        )

    comparison = await call_service(
        session,
        lambda repo: FacilitatorDashboard(repo).compare(user_id),
    )
    return {"participants": comparison}


@router.get("/dashboard/attendance")
async def get_attendance_report(
    period: Literal["daily", "weekly", "monthly", "custom"] = "daily",
    anchor: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    batch: str | None = None,
    session: AsyncSession = Depends(get_store_async_session),
):
    if period == "custom" and (start_date is None or end_date is None):
        raise HTTPException(status_code=422, detail="custom period needs start_date and end_date")

    start, end, rows = await call_service(
        session,
        lambda repo: FacilitatorDashboard(repo).attendance(
            period, anchor, start_date, end_date, None if batch == "all" else batch
        ),
    )
    return {
        "start_date": start,
        "end_date": end,
        "participants": [asdict(row) for row in rows],
    }


# ===================================================================
# NAVIGATION & AUDIT
# ===================================================================


@router.get("/navigation/{role}", tags=["Navigation"])
async def get_navigation(
    role: str,
    session: AsyncSession = Depends(get_store_async_session),
):
    result = await call_service(session, lambda repo: NavigationResolver(repo).resolve(role))
    return asdict(result)


@router.get("/audit/{table_name}/{record_id}", tags=["Audit"])
async def get_audit_history(
    table_name: str,
    record_id: uuid.UUID,
    session: AsyncSession = Depends(get_store_async_session),
):
    """Status history of one record, newest first."""
    events = await call_service(
        session,
        lambda repo: AuditHistoryReader(repo).history(table_name, record_id),
    )
    return {
        "table_name": table_name,
        "record_id": str(record_id),
        "events": [asdict(event) for event in events],
    }
