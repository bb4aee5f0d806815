"""Bulk review actions an admin runs against one participant or a cohort.

Task and stage items are written and committed one at a time. A batch stops
at the first failing item and raises `BulkActionError`; items committed
before it stay applied. Document approval and attendance marking are a
single statement each.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from journeydesk.errors import BulkActionError, ValidationError
from journeydesk.models.enums import (
    AttendanceType,
    DocumentStatus,
    ProgressStatus,
    SubmissionStatus,
)
from journeydesk.models.store import (
    Document,
    ParticipantProgress,
    Task,
    TaskSubmission,
    utcnow,
)
from journeydesk.repository import StoreRepository

logger = logging.getLogger(__name__)

PENDING_TASK_STATUSES = frozenset({SubmissionStatus.SUBMITTED, SubmissionStatus.IN_PROGRESS})
PENDING_DOCUMENT_STATUSES = frozenset({DocumentStatus.PENDING, DocumentStatus.SUBMITTED})


@dataclass
class BulkCandidates:
    pending_tasks: list[dict] = field(default_factory=list)
    pending_documents: list[dict] = field(default_factory=list)
    incomplete_stages: list[dict] = field(default_factory=list)


class BulkActionService:
    def __init__(self, repository: StoreRepository, actor_id: uuid.UUID | None):
        self.repository = repository
        self.actor_id = actor_id

    def load_candidates(self, user_id: uuid.UUID) -> BulkCandidates:
        """Items of one participant that a bulk action could still move forward."""
        repo = self.repository
        tasks = repo.fetch(Task, order_by=Task.task_order)
        submissions = {
            s["task_id"]: s
            for s in repo.fetch(TaskSubmission, TaskSubmission.user_id == user_id)
        }
        documents = repo.fetch(Document, Document.user_id == user_id)
        stages = repo.fetch_stages()
        progress = {
            p["stage_id"]: p
            for p in repo.fetch(ParticipantProgress, ParticipantProgress.user_id == user_id)
        }

        task_rows = [
            {
                "id": t["id"],
                "title": t["title"],
                "status": submissions.get(t["id"], {}).get("status", SubmissionStatus.NOT_STARTED.value),
            }
            for t in tasks
        ]
        stage_rows = [
            {
                "id": s["id"],
                "name": s["name"],
                "stage_order": s["stage_order"],
                "status": progress.get(s["id"], {}).get("status", ProgressStatus.NOT_STARTED.value),
            }
            for s in stages
        ]

        return BulkCandidates(
            pending_tasks=[t for t in task_rows if t["status"] in PENDING_TASK_STATUSES],
            pending_documents=[
                {
                    "id": d["id"],
                    "document_name": d["document_name"],
                    "document_type": d["document_type"],
                    "status": d["status"],
                }
                for d in documents
                if d["status"] in PENDING_DOCUMENT_STATUSES
            ],
            incomplete_stages=[s for s in stage_rows if s["status"] != ProgressStatus.COMPLETED],
        )

    def _run(self, label: str, items: list, apply) -> int:
        applied = 0
        for item in items:
            try:
                apply(item)
                self.repository.commit()
            except SQLAlchemyError as e:
                self.repository.rollback()
                logger.error(f"Bulk {label} stopped at {item} after {applied} applied: {e}")
                raise BulkActionError(f"bulk_{label}_failed", applied) from e
            applied += 1

        logger.info(f"Bulk {label}: {applied} applied by {self.actor_id}")
        return applied

    def approve_tasks(self, user_id: uuid.UUID, task_ids: list[uuid.UUID]) -> int:
        """Verify each task for the user, creating the submission when there is none."""
        if not task_ids:
            return 0
        now = utcnow()
        return self._run(
            "tasks",
            task_ids,
            lambda task_id: self.repository.upsert_submission_verified(
                user_id, task_id, self.actor_id, now
            ),
        )

    def approve_documents(self, document_ids: list[uuid.UUID]) -> int:
        """Approve all listed documents in a single statement."""
        if not document_ids:
            return 0
        try:
            count = self.repository.approve_documents(document_ids, self.actor_id, utcnow())
            self.repository.commit()
        except SQLAlchemyError as e:
            self.repository.rollback()
            logger.error(f"Bulk document approval failed: {e}")
            raise BulkActionError("bulk_documents_failed", 0) from e

        logger.info(f"Bulk documents: {count} approved by {self.actor_id}")
        return count

    def complete_stages(self, user_id: uuid.UUID, stage_ids: list[uuid.UUID]) -> int:
        if not stage_ids:
            return 0
        now = utcnow()
        return self._run(
            "stages",
            stage_ids,
            lambda stage_id: self.repository.upsert_progress_completed(user_id, stage_id, now),
        )

    def _insert_attendance(self, rows: list[dict]) -> int:
        try:
            count = self.repository.insert_attendance(rows)
            self.repository.commit()
        except SQLAlchemyError as e:
            self.repository.rollback()
            logger.error(f"Bulk attendance marking failed: {e}")
            raise BulkActionError("bulk_attendance_failed", 0) from e
        return count

    def mark_attendance(
        self,
        user_ids: list[uuid.UUID],
        on_date: date,
        attendance_type: AttendanceType | str = AttendanceType.DAILY,
        session_name: str | None = None,
    ) -> int:
        """Record one check-in per selected participant on `on_date`."""
        if not user_ids:
            return 0
        attendance_type = AttendanceType(attendance_type)
        if attendance_type == AttendanceType.SESSION and not session_name:
            raise ValidationError("session_required", "Session attendance needs a session name")

        now = utcnow()
        rows = [
            {
                "id": uuid.uuid4(),
                "user_id": user_id,
                "attendance_type": attendance_type,
                "session_name": session_name if attendance_type == AttendanceType.SESSION else None,
                "check_in_time": now,
                "date": on_date,
                "created_at": now,
            }
            for user_id in user_ids
        ]
        count = self._insert_attendance(rows)
        logger.info(f"Bulk attendance: {count} {attendance_type.value} check-ins on {on_date} by {self.actor_id}")
        return count

    def mark_all_present(self, on_date: date, batch: str | None = None) -> int:
        """Daily check-in for every participant in `batch` not yet marked on `on_date`."""
        marked = self.repository.fetch_attended_user_ids(on_date, AttendanceType.DAILY)
        unmarked = [
            p["id"] for p in self.repository.fetch_profiles(batch=batch)
            if p["id"] not in marked
        ]
        if not unmarked:
            logger.info(f"Bulk attendance: everyone already marked on {on_date}")
            return 0
        return self.mark_attendance(unmarked, on_date)
