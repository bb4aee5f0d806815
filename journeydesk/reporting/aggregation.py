"""Roll up raw programme rows into dashboard summaries.

Computes:
- Cohort-wide pending review counts
- Per-participant pending counts and stage position
- Drill-down records behind each pending count
- Side-by-side participant comparison
- Attendance summaries over a reporting period
"""

import uuid
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from journeydesk.models.enums import (
    AttendanceType,
    DocumentStatus,
    ProgressStatus,
    SubmissionStatus,
    TradeStatus,
)

UNKNOWN_NAME = "Unknown"
PENDING_DOCUMENT_STATUSES = frozenset({DocumentStatus.PENDING, DocumentStatus.SUBMITTED})
PENDING_ENROLLMENT_STATUS = "submitted"
MAX_COMPARED_PARTICIPANTS = 5


@dataclass
class PendingSummary:
    tasks: int = 0
    documents: int = 0
    trades: int = 0
    enrollments: int = 0
    stages_not_started: int = 0

    @property
    def total(self) -> int:
        return self.tasks + self.documents + self.trades + self.enrollments


@dataclass
class ParticipantSummary:
    id: uuid.UUID
    full_name: str
    email: str
    batch_number: str | None
    pending_tasks: int
    pending_documents: int
    pending_trades: int
    current_stage: int
    stage_status: ProgressStatus

    @property
    def total_pending(self) -> int:
        return self.pending_tasks + self.pending_documents + self.pending_trades


def _for_users(rows: Iterable[dict], user_ids: set) -> list[dict]:
    return [r for r in rows if r["user_id"] in user_ids]


def pending_submissions(rows: Iterable[dict]) -> list[dict]:
    return [r for r in rows if r["status"] == SubmissionStatus.SUBMITTED]


def pending_documents(rows: Iterable[dict]) -> list[dict]:
    return [r for r in rows if r["status"] in PENDING_DOCUMENT_STATUSES]


def pending_trades(rows: Iterable[dict]) -> list[dict]:
    return [r for r in rows if r["status"] == TradeStatus.PENDING]


def pending_enrollments(rows: Iterable[dict]) -> list[dict]:
    return [r for r in rows if r["status"] == PENDING_ENROLLMENT_STATUS]


def compute_pending_summary(
    participant_ids: list[uuid.UUID],
    submissions: list[dict],
    documents: list[dict],
    trades: list[dict],
    enrollments: list[dict],
    progress: list[dict],
    stages: list[dict],
) -> PendingSummary:
    """Count items awaiting review across a cohort.

    `stages_not_started` is participants x active stages minus the progress
    rows that exist for those participants, whatever their status.
    """
    ids = set(participant_ids)
    active_stages = [s for s in stages if s.get("is_active", True)]

    return PendingSummary(
        tasks=len(pending_submissions(_for_users(submissions, ids))),
        documents=len(pending_documents(_for_users(documents, ids))),
        trades=len(pending_trades(_for_users(trades, ids))),
        enrollments=len(pending_enrollments(_for_users(enrollments, ids))),
        stages_not_started=len(participant_ids) * len(active_stages) - len(_for_users(progress, ids)),
    )


def _stage_position(
    user_progress: list[dict],
    active_stages: list[dict],
) -> tuple[int, ProgressStatus]:
    stage_orders = {s["id"]: s["stage_order"] for s in active_stages}
    completed_ids = {
        p["stage_id"] for p in user_progress if p["status"] == ProgressStatus.COMPLETED
    }
    current = next(
        (p for p in user_progress if p["status"] == ProgressStatus.IN_PROGRESS),
        None,
    )

    if current is not None:
        return stage_orders.get(current["stage_id"]) or 1, ProgressStatus.IN_PROGRESS

    current_stage = len(completed_ids) + 1 if completed_ids else 1
    if active_stages and set(stage_orders) <= completed_ids:
        return current_stage, ProgressStatus.COMPLETED
    return current_stage, ProgressStatus.NOT_STARTED


def summarize_participants(
    profiles: list[dict],
    submissions: list[dict],
    documents: list[dict],
    trades: list[dict],
    progress: list[dict],
    stages: list[dict],
) -> list[ParticipantSummary]:
    """Per-participant review load, busiest first.

    The sort is stable, so participants with equal load keep profile order.
    """
    active_stages = [s for s in stages if s.get("is_active", True)]
    tasks_pending = pending_submissions(submissions)
    docs_pending = pending_documents(documents)
    trades_pending = pending_trades(trades)

    summaries = []
    for profile in profiles:
        user_id = profile["id"]
        user_progress = [p for p in progress if p["user_id"] == user_id]
        current_stage, stage_status = _stage_position(user_progress, active_stages)

        summaries.append(ParticipantSummary(
            id=user_id,
            full_name=profile.get("full_name") or UNKNOWN_NAME,
            email=profile.get("email") or "",
            batch_number=profile.get("batch_number"),
            pending_tasks=sum(1 for t in tasks_pending if t["user_id"] == user_id),
            pending_documents=sum(1 for d in docs_pending if d["user_id"] == user_id),
            pending_trades=sum(1 for t in trades_pending if t["user_id"] == user_id),
            current_stage=current_stage,
            stage_status=stage_status,
        ))

    return sorted(summaries, key=lambda s: s.total_pending, reverse=True)


# ---------------------------------------------------------------------------
# Drill-down
# ---------------------------------------------------------------------------

DRILL_DOWN_KINDS = ("tasks", "documents", "trades", "enrollments")


def build_drill_down(
    kind: str,
    rows: list[dict],
    profiles: list[dict],
    task_titles: dict[uuid.UUID, str] | None = None,
) -> list[dict]:
    """List the individual pending records behind one dashboard count."""
    if kind not in DRILL_DOWN_KINDS:
        raise ValueError(f"Unknown drill-down kind '{kind}'. Available: {list(DRILL_DOWN_KINDS)}")

    by_id = {p["id"]: p for p in profiles}
    task_titles = task_titles or {}
    records = []

    for row in rows:
        profile = by_id.get(row["user_id"], {})
        record = {
            "id": row["id"],
            "user_id": row["user_id"],
            "participant": profile.get("full_name") or UNKNOWN_NAME,
            "batch_number": profile.get("batch_number"),
            "status": row.get("status"),
        }
        if kind == "tasks":
            record["title"] = task_titles.get(row["task_id"], UNKNOWN_NAME)
            record["date"] = row.get("submitted_at")
        elif kind == "documents":
            record["title"] = row.get("document_name")
            record["date"] = row.get("submitted_at")
        elif kind == "trades":
            record["title"] = row.get("product_service")
            record["amount"] = row.get("amount")
            record["date"] = row.get("trade_date")
        else:
            record["title"] = row.get("full_name")
            record["date"] = row.get("submitted_at")
        records.append(record)

    return records


# ---------------------------------------------------------------------------
# Participant comparison
# ---------------------------------------------------------------------------


def compare_participants(
    user_ids: list[uuid.UUID],
    profiles: list[dict],
    stages: list[dict],
    tasks: list[dict],
    progress: list[dict],
    submissions: list[dict],
    documents: list[dict],
    trades: list[dict],
) -> list[dict]:
    """Side-by-side progress for up to five participants, in the order given."""
    if len(user_ids) > MAX_COMPARED_PARTICIPANTS:
        raise ValueError(f"At most {MAX_COMPARED_PARTICIPANTS} participants can be compared")

    by_id = {p["id"]: p for p in profiles}
    total_stages = len(stages)
    comparison = []

    for user_id in user_ids:
        profile = by_id.get(user_id, {})
        user_docs = [d for d in documents if d["user_id"] == user_id]
        user_trades = [t for t in trades if t["user_id"] == user_id]
        stages_completed = sum(
            1 for p in progress
            if p["user_id"] == user_id and p["status"] == ProgressStatus.COMPLETED
        )

        comparison.append({
            "user_id": user_id,
            "user_name": profile.get("full_name") or UNKNOWN_NAME,
            "batch_number": profile.get("batch_number"),
            "stages_completed": stages_completed,
            "total_stages": total_stages,
            "tasks_completed": sum(
                1 for s in submissions
                if s["user_id"] == user_id and s["status"] == SubmissionStatus.VERIFIED
            ),
            "total_tasks": len(tasks),
            "docs_approved": sum(1 for d in user_docs if d["status"] == DocumentStatus.APPROVED),
            "total_docs": len(user_docs),
            "trades_approved": sum(1 for t in user_trades if t["status"] == TradeStatus.APPROVED),
            "trade_volume": sum(float(t.get("amount") or 0) for t in user_trades),
            "overall_progress": (
                round(stages_completed / total_stages * 100) if total_stages > 0 else 0
            ),
        })

    return comparison


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


@dataclass
class AttendanceSummary:
    user_id: uuid.UUID
    full_name: str
    batch_number: str | None
    unique_id: str | None
    total_days: int
    present_days: int
    absent_days: int
    attendance_rate: int
    session_attendance: int
    present_dates: list[date] = field(default_factory=list)


def period_range(period: str, anchor: date) -> tuple[date, date]:
    """Inclusive date range for a reporting period around `anchor`.

    Weeks run Monday to Sunday.
    """
    if period == "daily":
        return anchor, anchor
    if period == "weekly":
        start = anchor - timedelta(days=anchor.weekday())
        return start, start + timedelta(days=6)
    if period == "monthly":
        last_day = monthrange(anchor.year, anchor.month)[1]
        return anchor.replace(day=1), anchor.replace(day=last_day)
    raise ValueError(f"Unknown period '{period}'. Available: daily, weekly, monthly")


def summarize_attendance(
    profiles: list[dict],
    attendance: list[dict],
    start: date,
    end: date,
    batch: str | None = None,
) -> list[AttendanceSummary]:
    """Per-participant attendance over an inclusive date range.

    A participant is present on a day with at least one daily check-in;
    session check-ins are counted separately.
    """
    total_days = (end - start).days + 1 if end >= start else 0
    in_range = [a for a in attendance if start <= a["date"] <= end]
    selected = [p for p in profiles if batch is None or p.get("batch_number") == batch]

    summaries = []
    for profile in selected:
        user_rows = [a for a in in_range if a["user_id"] == profile["id"]]
        present = sorted({a["date"] for a in user_rows if a["attendance_type"] == AttendanceType.DAILY})
        summaries.append(AttendanceSummary(
            user_id=profile["id"],
            full_name=profile.get("full_name") or UNKNOWN_NAME,
            batch_number=profile.get("batch_number"),
            unique_id=profile.get("unique_id"),
            total_days=total_days,
            present_days=len(present),
            absent_days=total_days - len(present),
            attendance_rate=round(len(present) / total_days * 100) if total_days > 0 else 0,
            session_attendance=sum(
                1 for a in user_rows if a["attendance_type"] == AttendanceType.SESSION
            ),
            present_dates=present,
        ))

    return summaries
