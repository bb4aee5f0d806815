import uuid
from datetime import date

import pytest

from journeydesk.models.enums import ProgressStatus
from journeydesk.reporting.aggregation import (
    build_drill_down,
    compare_participants,
    compute_pending_summary,
    period_range,
    summarize_attendance,
    summarize_participants,
)

U1, U2, U3, OUTSIDER = (uuid.uuid4() for _ in range(4))
S1, S2, S3 = (uuid.uuid4() for _ in range(3))

STAGES = [
    {"id": S1, "name": "Enrollment", "stage_order": 1, "is_active": True},
    {"id": S2, "name": "Orientation", "stage_order": 2, "is_active": True},
    {"id": S3, "name": "First Trade", "stage_order": 3, "is_active": True},
]

PROFILES = [
    {"id": U1, "full_name": "Asha Rao", "email": "asha@example.com", "batch_number": "B01", "unique_id": "JD-1"},
    {"id": U2, "full_name": "Vikram Iyer", "email": "vikram@example.com", "batch_number": "B01", "unique_id": "JD-2"},
    {"id": U3, "full_name": "Meera Nair", "email": "meera@example.com", "batch_number": "B02", "unique_id": "JD-3"},
]


def _row(user_id, status, **extra):
    return {"id": uuid.uuid4(), "user_id": user_id, "status": status, **extra}


class TestPendingSummary:
    def test_counts_only_pending_rows_of_participants(self):
        summary = compute_pending_summary(
            [U1, U2],
            submissions=[_row(U1, "submitted"), _row(U2, "verified"), _row(OUTSIDER, "submitted")],
            documents=[_row(U1, "pending"), _row(U1, "submitted"), _row(U2, "approved")],
            trades=[_row(U2, "pending"), _row(U2, "rejected")],
            enrollments=[_row(U1, "submitted"), _row(U2, "approved")],
            progress=[],
            stages=STAGES,
        )

        assert summary.tasks == 1
        assert summary.documents == 2
        assert summary.trades == 1
        assert summary.enrollments == 1
        assert summary.total == 5

    def test_stages_not_started_counts_missing_progress_rows(self):
        progress = [
            {"user_id": U1, "stage_id": S1, "status": "completed"},
            {"user_id": U1, "stage_id": S2, "status": "in_progress"},
            {"user_id": U2, "stage_id": S1, "status": "not_started"},
            {"user_id": OUTSIDER, "stage_id": S1, "status": "completed"},
        ]
        stages = STAGES + [{"id": uuid.uuid4(), "name": "Retired", "stage_order": 9, "is_active": False}]

        summary = compute_pending_summary([U1, U2], [], [], [], [], progress, stages)

        # 2 participants x 3 active stages - 3 progress rows
        assert summary.stages_not_started == 3

    def test_stages_not_started_three_participants_two_stages_one_row(self):
        progress = [{"user_id": U2, "stage_id": S1, "status": "in_progress"}]

        summary = compute_pending_summary([U1, U2, U3], [], [], [], [], progress, STAGES[:2])

        assert summary.stages_not_started == 3 * 2 - 1 == 5

    def test_participant_totals_sum_to_cohort_totals(self):
        submissions = [_row(U1, "submitted"), _row(U2, "submitted"), _row(U3, "verified")]
        documents = [_row(U1, "pending"), _row(U3, "submitted"), _row(U3, "approved"), _row(U2, "rejected")]
        trades = [_row(U2, "pending"), _row(U2, "pending"), _row(U1, "approved")]
        enrollments = [_row(U3, "submitted")]

        summary = compute_pending_summary(
            [U1, U2, U3], submissions, documents, trades, enrollments, [], STAGES
        )
        participants = summarize_participants(PROFILES, submissions, documents, trades, [], STAGES)

        # Enrollments are only counted cohort-wide.
        assert sum(p.total_pending for p in participants) == summary.total - summary.enrollments
        assert sum(p.pending_tasks for p in participants) == summary.tasks
        assert sum(p.pending_documents for p in participants) == summary.documents
        assert sum(p.pending_trades for p in participants) == summary.trades

    def test_empty_cohort(self):
        summary = compute_pending_summary([], [], [], [], [], [], STAGES)
        assert summary.total == 0
        assert summary.stages_not_started == 0


class TestSummarizeParticipants:
    def test_sorted_by_total_pending_keeping_profile_order_on_ties(self):
        submissions = [_row(U3, "submitted"), _row(U2, "submitted")]
        documents = [_row(U3, "pending"), _row(U2, "submitted")]
        trades = [_row(U1, "pending")]

        result = summarize_participants(PROFILES, submissions, documents, trades, [], STAGES)

        assert [s.id for s in result] == [U2, U3, U1]
        assert result[0].total_pending == 2
        assert result[2].pending_trades == 1

    def test_in_progress_stage_is_current(self):
        progress = [
            {"user_id": U1, "stage_id": S1, "status": "completed"},
            {"user_id": U1, "stage_id": S3, "status": "in_progress"},
        ]
        [asha] = summarize_participants(PROFILES[:1], [], [], [], progress, STAGES)

        assert asha.current_stage == 3
        assert asha.stage_status == ProgressStatus.IN_PROGRESS

    def test_next_stage_after_completed_ones(self):
        progress = [
            {"user_id": U1, "stage_id": S1, "status": "completed"},
            {"user_id": U1, "stage_id": S2, "status": "completed"},
        ]
        [asha] = summarize_participants(PROFILES[:1], [], [], [], progress, STAGES)

        assert asha.current_stage == 3
        assert asha.stage_status == ProgressStatus.NOT_STARTED

    def test_all_active_stages_completed(self):
        progress = [{"user_id": U1, "stage_id": s["id"], "status": "completed"} for s in STAGES]
        [asha] = summarize_participants(PROFILES[:1], [], [], [], progress, STAGES)

        assert asha.stage_status == ProgressStatus.COMPLETED

    def test_no_progress_starts_at_first_stage(self):
        [asha] = summarize_participants(PROFILES[:1], [], [], [], [], STAGES)

        assert asha.current_stage == 1
        assert asha.stage_status == ProgressStatus.NOT_STARTED

    def test_no_active_stages_is_never_completed(self):
        [asha] = summarize_participants(PROFILES[:1], [], [], [], [], [])
        assert asha.stage_status == ProgressStatus.NOT_STARTED


class TestDrillDown:
    def test_task_records_resolve_titles_and_names(self):
        task_id = uuid.uuid4()
        rows = [
            _row(U1, "submitted", task_id=task_id, submitted_at=None),
            _row(OUTSIDER, "submitted", task_id=uuid.uuid4(), submitted_at=None),
        ]

        records = build_drill_down("tasks", rows, PROFILES, {task_id: "Register IEC"})

        assert records[0]["participant"] == "Asha Rao"
        assert records[0]["title"] == "Register IEC"
        assert records[1]["participant"] == "Unknown"
        assert records[1]["title"] == "Unknown"

    def test_trade_records_carry_amount(self):
        rows = [_row(U2, "pending", product_service="Spices", amount=1500.0, trade_date=date(2024, 1, 2))]

        [record] = build_drill_down("trades", rows, PROFILES)

        assert record["title"] == "Spices"
        assert record["amount"] == 1500.0
        assert record["date"] == date(2024, 1, 2)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_drill_down("invoices", [], PROFILES)


class TestCompareParticipants:
    def test_side_by_side_metrics(self):
        progress = [
            {"user_id": U1, "stage_id": S1, "status": "completed"},
            {"user_id": U1, "stage_id": S2, "status": "in_progress"},
        ]
        submissions = [_row(U1, "verified"), _row(U1, "submitted")]
        documents = [_row(U1, "approved"), _row(U1, "pending")]
        trades = [_row(U1, "approved", amount=1000.0), _row(U1, "pending", amount=500.0)]
        tasks = [{"id": uuid.uuid4()} for _ in range(4)]

        [asha, meera] = compare_participants(
            [U1, U3], PROFILES, STAGES, tasks, progress, submissions, documents, trades
        )

        assert asha["user_name"] == "Asha Rao"
        assert asha["stages_completed"] == 1
        assert asha["total_stages"] == 3
        assert asha["tasks_completed"] == 1
        assert asha["total_tasks"] == 4
        assert asha["docs_approved"] == 1
        assert asha["total_docs"] == 2
        assert asha["trades_approved"] == 1
        assert asha["trade_volume"] == 1500.0
        assert asha["overall_progress"] == 33
        assert meera["overall_progress"] == 0

    def test_at_most_five(self):
        with pytest.raises(ValueError):
            compare_participants([uuid.uuid4() for _ in range(6)], [], STAGES, [], [], [], [], [])


class TestAttendance:
    def test_period_ranges(self):
        wednesday = date(2024, 1, 10)

        assert period_range("daily", wednesday) == (wednesday, wednesday)
        assert period_range("weekly", wednesday) == (date(2024, 1, 8), date(2024, 1, 14))
        assert period_range("monthly", date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            period_range("yearly", date(2024, 1, 1))

    def test_summary_counts_unique_daily_check_ins(self):
        attendance = [
            {"user_id": U1, "date": date(2024, 1, 8), "attendance_type": "daily"},
            {"user_id": U1, "date": date(2024, 1, 8), "attendance_type": "daily"},
            {"user_id": U1, "date": date(2024, 1, 9), "attendance_type": "daily"},
            {"user_id": U1, "date": date(2024, 1, 9), "attendance_type": "session"},
            {"user_id": U1, "date": date(2024, 1, 20), "attendance_type": "daily"},
        ]

        [asha, vikram] = summarize_attendance(
            PROFILES, attendance, date(2024, 1, 8), date(2024, 1, 10), batch="B01"
        )

        assert asha.total_days == 3
        assert asha.present_days == 2
        assert asha.absent_days == 1
        assert asha.attendance_rate == 67
        assert asha.session_attendance == 1
        assert asha.present_dates == [date(2024, 1, 8), date(2024, 1, 9)]
        assert vikram.present_days == 0
        assert vikram.attendance_rate == 0
