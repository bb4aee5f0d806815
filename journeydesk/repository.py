"""Data-access layer over the programme store.

Every service receives a `StoreRepository` bound to an explicit session
instead of reaching for a global client, so tests can hand in a repository
over an in-memory SQLite session.
"""

import enum
import uuid
from datetime import date, datetime
from typing import Any, Iterable

from sqlalchemy import delete, insert, inspect, select, update
from sqlalchemy.orm import Session

from journeydesk.models.enums import (
    AttendanceType,
    DocumentStatus,
    ProgressStatus,
    SessionType,
    SubmissionStatus,
)
from journeydesk.models.store import (
    Attendance,
    Document,
    JourneyStage,
    ParticipantProgress,
    Profile,
    SessionCompletion,
    StoreBase,
    TaskSubmission,
)

BULK_SUBMISSION_NOTES = "Bulk submitted by admin"
BULK_APPROVAL_NOTES = "Bulk approved by admin"


def _plain(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    return value


def row_to_dict(obj: StoreBase) -> dict:
    """Flatten an ORM row to a dict of column values with enums unwrapped."""
    return {
        attr.key: _plain(getattr(obj, attr.key))
        for attr in inspect(obj).mapper.column_attrs
    }


class StoreRepository:
    """Reads and writes against one session of the programme store."""

    def __init__(self, session: Session):
        self.session = session

    # -----------------------------
    # Generic reads
    # -----------------------------

    def fetch(
        self,
        model: type[StoreBase],
        *criteria,
        order_by=None,
        limit: int | None = None,
    ) -> list[dict]:
        query = select(model)
        if criteria:
            query = query.where(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        return [row_to_dict(obj) for obj in self.session.execute(query).scalars()]

    def get(self, model: type[StoreBase], record_id: uuid.UUID):
        return self.session.get(model, record_id)

    # -----------------------------
    # Profiles and stages
    # -----------------------------

    def fetch_profiles(
        self,
        batch: str | None = None,
        coach_id: uuid.UUID | None = None,
    ) -> list[dict]:
        criteria = []
        if batch is not None:
            criteria.append(Profile.batch_number == batch)
        if coach_id is not None:
            criteria.append(Profile.assigned_coach_id == coach_id)
        return self.fetch(Profile, *criteria, order_by=Profile.full_name)

    def fetch_profile_names(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, str | None]:
        ids = list(user_ids)
        if not ids:
            return {}
        result = self.session.execute(
            select(Profile.id, Profile.full_name).where(Profile.id.in_(ids))
        )
        return {row.id: row.full_name for row in result}

    def fetch_batches(self) -> list[str]:
        result = self.session.execute(
            select(Profile.batch_number).where(Profile.batch_number.isnot(None)).distinct()
        )
        return sorted(batch for batch in result.scalars() if batch)

    def fetch_stages(self, active_only: bool = False) -> list[dict]:
        criteria = [JourneyStage.is_active.is_(True)] if active_only else []
        return self.fetch(JourneyStage, *criteria, order_by=JourneyStage.stage_order)

    def find_stage_id(self, name: str) -> uuid.UUID | None:
        return self.session.execute(
            select(JourneyStage.id).where(JourneyStage.name == name).limit(1)
        ).scalar_one_or_none()

    # -----------------------------
    # Atomic upserts
    # -----------------------------

    def _insert(self, model: type[StoreBase]):
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            raise NotImplementedError(f"Upsert is not supported on dialect '{dialect}'")
        return insert(model.__table__)

    def upsert_submission_verified(
        self,
        user_id: uuid.UUID,
        task_id: uuid.UUID,
        verified_by: uuid.UUID | None,
        now: datetime,
    ) -> None:
        """Insert a verified submission or verify the existing one, in one statement."""
        stmt = self._insert(TaskSubmission).values(
            id=uuid.uuid4(),
            user_id=user_id,
            task_id=task_id,
            status=SubmissionStatus.VERIFIED,
            submission_notes=BULK_SUBMISSION_NOTES,
            submitted_at=now,
            verified_by=verified_by,
            verified_at=now,
            verification_notes=BULK_APPROVAL_NOTES,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "task_id"],
            set_={
                "status": SubmissionStatus.VERIFIED,
                "verified_by": verified_by,
                "verified_at": now,
                "verification_notes": BULK_APPROVAL_NOTES,
            },
        )
        self.session.execute(stmt)

    def upsert_progress_completed(
        self,
        user_id: uuid.UUID,
        stage_id: uuid.UUID,
        now: datetime,
    ) -> None:
        """Mark a stage completed for a user; a new row starts and completes at `now`."""
        stmt = self._insert(ParticipantProgress).values(
            id=uuid.uuid4(),
            user_id=user_id,
            stage_id=stage_id,
            status=ProgressStatus.COMPLETED,
            started_at=now,
            completed_at=now,
            created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "stage_id"],
            set_={"status": ProgressStatus.COMPLETED, "completed_at": now},
        )
        self.session.execute(stmt)

    # -----------------------------
    # Bulk updates
    # -----------------------------

    def approve_documents(
        self,
        document_ids: list[uuid.UUID],
        reviewed_by: uuid.UUID | None,
        now: datetime,
    ) -> int:
        """Approve every listed document with a single UPDATE statement."""
        result = self.session.execute(
            update(Document)
            .where(Document.id.in_(document_ids))
            .values(
                status=DocumentStatus.APPROVED,
                reviewed_by=reviewed_by,
                reviewed_at=now,
                review_notes=BULK_APPROVAL_NOTES,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def replace_session_completions(
        self,
        user_ids: list[uuid.UUID],
        session_type: SessionType,
        marked_by: uuid.UUID | None,
        notes: str,
        now: datetime,
    ) -> int:
        """Drop every completion of `session_type` for the users and insert one fresh row each."""
        self.session.execute(
            delete(SessionCompletion)
            .where(
                SessionCompletion.session_type == session_type,
                SessionCompletion.user_id.in_(user_ids),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.add_all(
            SessionCompletion(
                user_id=user_id,
                session_type=session_type,
                marked_by=marked_by,
                notes=notes,
                completed_at=now,
            )
            for user_id in user_ids
        )
        self.session.flush()
        return len(user_ids)

    def fetch_attended_user_ids(self, on_date: date, attendance_type: AttendanceType) -> set[uuid.UUID]:
        result = self.session.execute(
            select(Attendance.user_id).where(
                Attendance.date == on_date,
                Attendance.attendance_type == attendance_type,
            )
        )
        return set(result.scalars())

    def insert_attendance(self, rows: list[dict]) -> int:
        """Insert all attendance rows with one bulk INSERT."""
        if rows:
            self.session.execute(insert(Attendance), rows)
        return len(rows)

    # -----------------------------
    # Unit of work
    # -----------------------------

    def add(self, obj: StoreBase) -> StoreBase:
        self.session.add(obj)
        self.session.flush()
        return obj

    def delete(self, obj: StoreBase) -> None:
        self.session.delete(obj)
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
