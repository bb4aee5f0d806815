"""Facilitator dashboard: pending-review counts and per-participant load.

Admins see every participant, everyone else only the participants assigned
to them as coach. A refresh that hits a store error keeps showing the
viewer's last good snapshot.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from journeydesk.models.enums import (
    AppRole,
    SubmissionStatus,
    TradeStatus,
)
from journeydesk.models.store import (
    Attendance,
    Document,
    EnrollmentSubmission,
    ParticipantProgress,
    Task,
    TaskSubmission,
    Trade,
)
from journeydesk.reporting.aggregation import (
    PENDING_DOCUMENT_STATUSES,
    PENDING_ENROLLMENT_STATUS,
    AttendanceSummary,
    ParticipantSummary,
    PendingSummary,
    build_drill_down,
    compare_participants,
    compute_pending_summary,
    period_range,
    summarize_attendance,
    summarize_participants,
)
from journeydesk.repository import StoreRepository

logger = logging.getLogger(__name__)

MAX_SNAPSHOTS = 500

DRILL_DOWN_SOURCES = {
    "tasks": "submissions",
    "documents": "documents",
    "trades": "trades",
    "enrollments": "enrollments",
}


@dataclass
class DashboardSnapshot:
    summary: PendingSummary = field(default_factory=PendingSummary)
    participants: list[ParticipantSummary] = field(default_factory=list)
    raw: dict[str, list[dict]] = field(default_factory=dict)


class FacilitatorDashboard:
    def __init__(
        self,
        repository: StoreRepository,
        snapshots: dict[uuid.UUID, DashboardSnapshot] | None = None,
        max_snapshots: int = MAX_SNAPSHOTS,
    ):
        self.repository = repository
        # Last good snapshot per viewer; share the dict to keep it across requests.
        self.snapshots = snapshots if snapshots is not None else {}
        self.max_snapshots = max_snapshots

    def _remember(self, viewer_id: uuid.UUID, snapshot: DashboardSnapshot) -> None:
        # Most recently refreshed viewers last; the oldest are evicted first.
        self.snapshots.pop(viewer_id, None)
        self.snapshots[viewer_id] = snapshot
        while len(self.snapshots) > self.max_snapshots:
            del self.snapshots[next(iter(self.snapshots))]

    def _profiles_for(self, viewer_id: uuid.UUID, viewer_role: AppRole | str) -> list[dict]:
        if viewer_role == AppRole.ADMIN:
            return self.repository.fetch_profiles()
        return self.repository.fetch_profiles(coach_id=viewer_id)

    def _fetch_raw(self, profiles: list[dict]) -> dict[str, list[dict]]:
        repo = self.repository
        ids = [p["id"] for p in profiles]

        return {
            "profiles": profiles,
            "submissions": repo.fetch(
                TaskSubmission,
                TaskSubmission.user_id.in_(ids),
                TaskSubmission.status == SubmissionStatus.SUBMITTED,
            ),
            "documents": repo.fetch(
                Document,
                Document.user_id.in_(ids),
                Document.status.in_(list(PENDING_DOCUMENT_STATUSES)),
            ),
            "trades": repo.fetch(
                Trade,
                Trade.user_id.in_(ids),
                Trade.status == TradeStatus.PENDING,
            ),
            "enrollments": repo.fetch(
                EnrollmentSubmission,
                EnrollmentSubmission.user_id.in_(ids),
                EnrollmentSubmission.status == PENDING_ENROLLMENT_STATUS,
            ),
            "progress": repo.fetch(ParticipantProgress, ParticipantProgress.user_id.in_(ids)),
            "stages": repo.fetch_stages(active_only=True),
        }

    def refresh(self, viewer_id: uuid.UUID, viewer_role: AppRole | str) -> DashboardSnapshot:
        """Recompute the viewer's snapshot, or return the last good one on a store error."""
        try:
            profiles = self._profiles_for(viewer_id, viewer_role)
            if not profiles:
                snapshot = DashboardSnapshot()
            else:
                raw = self._fetch_raw(profiles)
                snapshot = DashboardSnapshot(
                    summary=compute_pending_summary(
                        [p["id"] for p in profiles],
                        raw["submissions"],
                        raw["documents"],
                        raw["trades"],
                        raw["enrollments"],
                        raw["progress"],
                        raw["stages"],
                    ),
                    participants=summarize_participants(
                        profiles,
                        raw["submissions"],
                        raw["documents"],
                        raw["trades"],
                        raw["progress"],
                        raw["stages"],
                    ),
                    raw=raw,
                )
        except SQLAlchemyError:
            logger.exception(f"Dashboard refresh failed for viewer {viewer_id}")
            self.repository.rollback()
            return self.snapshots.get(viewer_id, DashboardSnapshot())

        self._remember(viewer_id, snapshot)
        return snapshot

    def drill_down(self, viewer_id: uuid.UUID, viewer_role: AppRole | str, kind: str) -> list[dict]:
        if kind not in DRILL_DOWN_SOURCES:
            raise ValueError(f"Unknown drill-down kind '{kind}'")

        snapshot = self.refresh(viewer_id, viewer_role)
        rows = snapshot.raw.get(DRILL_DOWN_SOURCES[kind], [])

        task_titles = {}
        if kind == "tasks" and rows:
            task_ids = {r["task_id"] for r in rows}
            task_titles = {
                t["id"]: t["title"] for t in self.repository.fetch(Task, Task.id.in_(list(task_ids)))
            }
        return build_drill_down(kind, rows, snapshot.raw.get("profiles", []), task_titles)

    def compare(self, user_ids: list[uuid.UUID]) -> list[dict]:
        repo = self.repository
        return compare_participants(
            user_ids,
            repo.fetch_profiles(),
            repo.fetch_stages(active_only=True),
            repo.fetch(Task, Task.is_active.is_(True)),
            repo.fetch(ParticipantProgress, ParticipantProgress.user_id.in_(user_ids)),
            repo.fetch(TaskSubmission, TaskSubmission.user_id.in_(user_ids)),
            repo.fetch(Document, Document.user_id.in_(user_ids)),
            repo.fetch(Trade, Trade.user_id.in_(user_ids)),
        )

    def attendance(
        self,
        period: str,
        anchor: date | None = None,
        start: date | None = None,
        end: date | None = None,
        batch: str | None = None,
    ) -> tuple[date, date, list[AttendanceSummary]]:
        """Attendance summary for a named period around `anchor`, or a custom `start`..`end`."""
        if period == "custom":
            if start is None or end is None:
                raise ValueError("A custom period needs both start and end dates")
        else:
            start, end = period_range(period, anchor or date.today())

        rows = self.repository.fetch(
            Attendance,
            Attendance.date >= start,
            Attendance.date <= end,
        )
        profiles = self.repository.fetch_profiles(batch=batch)
        return start, end, summarize_attendance(profiles, rows, start, end, batch)
