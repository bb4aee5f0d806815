import uuid
from datetime import date, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from journeydesk.errors import BulkActionError, ValidationError
from journeydesk.models.enums import AttendanceType, DocumentStatus, ProgressStatus, SubmissionStatus
from journeydesk.models.store import Attendance, ParticipantProgress, TaskSubmission
from journeydesk.repository import BULK_APPROVAL_NOTES, BULK_SUBMISSION_NOTES
from journeydesk.services.bulk_actions import BulkActionService
from tests.utils import (
    count_statements,
    make_attendance,
    make_document,
    make_profile,
    make_progress,
    make_stage,
    make_submission,
    make_task,
)

ADMIN_ID = uuid.uuid4()


@pytest.fixture
def journey(session):
    asha = make_profile(session, "Asha Rao")
    stages = [make_stage(session, name, i) for i, name in enumerate(["Enrollment", "Orientation", "First Trade"], 1)]
    tasks = [make_task(session, stages[0], title, i) for i, title in enumerate(["Form", "Photo", "IEC"], 1)]
    session.commit()
    return asha, stages, tasks


@pytest.fixture
def service(repo):
    return BulkActionService(repo, ADMIN_ID)


def _submissions(session, user):
    return {
        s.task_id: s
        for s in session.execute(select(TaskSubmission).where(TaskSubmission.user_id == user.id)).scalars()
    }


def test_load_candidates(session, service, journey):
    asha, stages, tasks = journey
    make_submission(session, asha, tasks[0], SubmissionStatus.SUBMITTED)
    make_submission(session, asha, tasks[1], SubmissionStatus.IN_PROGRESS)
    make_submission(session, asha, tasks[2], SubmissionStatus.VERIFIED)
    make_document(session, asha, "PAN", DocumentStatus.PENDING)
    make_document(session, asha, "GST", DocumentStatus.SUBMITTED)
    make_document(session, asha, "IEC", DocumentStatus.APPROVED)
    make_progress(session, asha, stages[0], ProgressStatus.COMPLETED)
    make_progress(session, asha, stages[1], ProgressStatus.IN_PROGRESS)
    session.commit()

    candidates = service.load_candidates(asha.id)

    assert [t["title"] for t in candidates.pending_tasks] == ["Form", "Photo"]
    assert sorted(d["document_name"] for d in candidates.pending_documents) == ["GST", "PAN"]
    assert [(s["name"], s["status"]) for s in candidates.incomplete_stages] == [
        ("Orientation", "in_progress"),
        ("First Trade", "not_started"),
    ]


class TestApproveTasks:
    def test_verifies_existing_and_creates_missing_with_one_statement_each(
        self, engine, session, service, journey
    ):
        asha, _, tasks = journey
        make_submission(session, asha, tasks[0], SubmissionStatus.SUBMITTED, submission_notes="done")
        session.commit()
        user_id, task_ids = asha.id, [tasks[0].id, tasks[1].id]

        with count_statements(engine) as statements:
            applied = service.approve_tasks(user_id, task_ids)

        assert applied == 2
        assert len(statements) == 2
        assert all(s.lstrip().upper().startswith("INSERT") for s in statements)

        subs = _submissions(session, asha)
        assert len(subs) == 2
        existing, created = subs[tasks[0].id], subs[tasks[1].id]
        assert existing.status == SubmissionStatus.VERIFIED
        assert existing.submission_notes == "done"
        assert existing.verification_notes == BULK_APPROVAL_NOTES
        assert existing.verified_by == ADMIN_ID
        assert created.status == SubmissionStatus.VERIFIED
        assert created.submission_notes == BULK_SUBMISSION_NOTES
        assert created.verified_at is not None

    def test_repeat_approval_keeps_one_row(self, session, service, journey):
        asha, _, tasks = journey
        service.approve_tasks(asha.id, [tasks[0].id])
        service.approve_tasks(asha.id, [tasks[0].id])

        assert len(_submissions(session, asha)) == 1

    def test_empty_selection(self, engine, service, journey):
        user_id = journey[0].id

        with count_statements(engine) as statements:
            assert service.approve_tasks(user_id, []) == 0
        assert statements == []


def test_approve_documents_in_single_update(engine, session, service, journey):
    asha = journey[0]
    docs = [make_document(session, asha, name) for name in ("PAN", "GST", "IEC")]
    untouched = make_document(session, asha, "Bank")
    session.commit()
    document_ids = [d.id for d in docs]

    with count_statements(engine) as statements:
        applied = service.approve_documents(document_ids)

    assert applied == 3
    assert len(statements) == 1
    assert statements[0].lstrip().upper().startswith("UPDATE")

    for doc in docs:
        session.refresh(doc)
        assert doc.status == DocumentStatus.APPROVED
        assert doc.reviewed_by == ADMIN_ID
        assert doc.review_notes == BULK_APPROVAL_NOTES
    session.refresh(untouched)
    assert untouched.status == DocumentStatus.PENDING


class TestCompleteStages:
    def test_completes_existing_and_new_progress(self, session, service, journey):
        asha, stages, _ = journey
        existing = make_progress(
            session, asha, stages[0], ProgressStatus.IN_PROGRESS, started_at=datetime(2024, 1, 1, 9, 0)
        )
        session.commit()
        started_at = existing.started_at

        assert service.complete_stages(asha.id, [stages[0].id, stages[1].id]) == 2

        rows = {
            p.stage_id: p
            for p in session.execute(
                select(ParticipantProgress).where(ParticipantProgress.user_id == asha.id)
            ).scalars()
        }
        assert len(rows) == 2
        assert rows[stages[0].id].status == ProgressStatus.COMPLETED
        assert rows[stages[0].id].started_at == started_at
        assert rows[stages[1].id].status == ProgressStatus.COMPLETED
        assert rows[stages[1].id].started_at == rows[stages[1].id].completed_at

    def test_stops_at_first_failure_keeping_applied_items(self, session, repo, service, journey, monkeypatch):
        asha, stages, _ = journey
        upsert = repo.upsert_progress_completed
        calls = []

        def flaky(user_id, stage_id, now):
            calls.append(stage_id)
            if len(calls) == 2:
                raise OperationalError("INSERT", {}, Exception("connection lost"))
            upsert(user_id, stage_id, now)

        monkeypatch.setattr(repo, "upsert_progress_completed", flaky)

        with pytest.raises(BulkActionError) as exc_info:
            service.complete_stages(asha.id, [s.id for s in stages])

        assert exc_info.value.applied == 1
        assert len(calls) == 2
        completed = session.execute(
            select(ParticipantProgress.stage_id).where(ParticipantProgress.user_id == asha.id)
        ).scalars().all()
        assert completed == [stages[0].id]


def _attendance(session, on_date):
    return session.execute(
        select(Attendance).where(Attendance.date == on_date).order_by(Attendance.attendance_type)
    ).scalars().all()


class TestMarkAttendance:
    def test_selected_participants_in_one_insert(self, engine, session, service):
        asha = make_profile(session, "Asha Rao", "B01")
        vikram = make_profile(session, "Vikram Iyer", "B01")
        session.commit()
        user_ids = [asha.id, vikram.id]

        with count_statements(engine) as statements:
            applied = service.mark_attendance(user_ids, date(2024, 3, 4))

        assert applied == 2
        assert len(statements) == 1
        assert statements[0].lstrip().upper().startswith("INSERT")
        rows = _attendance(session, date(2024, 3, 4))
        assert sorted(r.user_id for r in rows) == sorted(user_ids)
        assert {r.attendance_type for r in rows} == {AttendanceType.DAILY}
        assert {r.session_name for r in rows} == {None}

    def test_session_check_in_carries_session_name(self, session, service):
        asha = make_profile(session, "Asha Rao", "B01")
        session.commit()

        service.mark_attendance([asha.id], date(2024, 3, 4), "session", "Buyer Outreach")

        [row] = _attendance(session, date(2024, 3, 4))
        assert row.attendance_type == AttendanceType.SESSION
        assert row.session_name == "Buyer Outreach"

    def test_session_check_in_needs_session_name(self, engine, session, service):
        asha = make_profile(session, "Asha Rao", "B01")
        session.commit()
        user_ids = [asha.id]

        with count_statements(engine) as statements:
            with pytest.raises(ValidationError) as exc_info:
                service.mark_attendance(user_ids, date(2024, 3, 4), AttendanceType.SESSION)

        assert exc_info.value.code == "session_required"
        assert statements == []

    def test_empty_selection(self, service):
        assert service.mark_attendance([], date(2024, 3, 4)) == 0

    def test_all_present_skips_already_marked(self, session, service):
        asha = make_profile(session, "Asha Rao", "B01")
        vikram = make_profile(session, "Vikram Iyer", "B01")
        meera = make_profile(session, "Meera Nair", "B01")
        other = make_profile(session, "Rohan Joshi", "B02")
        make_attendance(session, asha, date(2024, 3, 4))
        make_attendance(session, vikram, date(2024, 3, 4), AttendanceType.SESSION, "Buyer Outreach")
        make_attendance(session, meera, date(2024, 3, 3))
        session.commit()

        assert service.mark_all_present(date(2024, 3, 4), batch="B01") == 2

        daily = [r.user_id for r in _attendance(session, date(2024, 3, 4)) if r.attendance_type == AttendanceType.DAILY]
        assert sorted(daily) == sorted([asha.id, vikram.id, meera.id])
        assert other.id not in daily

        assert service.mark_all_present(date(2024, 3, 4), batch="B01") == 0

    def test_store_failure(self, session, repo, service, monkeypatch):
        asha = make_profile(session, "Asha Rao", "B01")
        session.commit()

        def broken(rows):
            raise OperationalError("INSERT", {}, Exception("connection lost"))

        monkeypatch.setattr(repo, "insert_attendance", broken)

        with pytest.raises(BulkActionError) as exc_info:
            service.mark_attendance([asha.id], date(2024, 3, 4))
        assert exc_info.value.code == "bulk_attendance_failed"
        assert exc_info.value.applied == 0
