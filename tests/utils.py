"""Row builders and statement counting for store tests."""

from contextlib import contextmanager
from datetime import date, datetime, timezone

from sqlalchemy import event

from journeydesk.models.enums import (
    AttendanceType,
    DocumentStatus,
    ProgressStatus,
    SessionType,
    SubmissionStatus,
    TradeStatus,
)
from journeydesk.models.store import (
    Attendance,
    Document,
    EnrollmentSubmission,
    JourneyStage,
    ParticipantProgress,
    Profile,
    SpecialSessionLink,
    Task,
    TaskSubmission,
    Trade,
)


@contextmanager
def count_statements(engine):
    """Collect every SQL statement sent to the database inside the block."""
    statements = []

    def _before(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _before)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _before)


def _add(session, obj):
    session.add(obj)
    session.flush()
    return obj


def make_profile(session, full_name="Asha Rao", batch_number="B01", coach=None, **kwargs):
    return _add(session, Profile(
        full_name=full_name,
        email=kwargs.pop("email", f"{full_name.split()[0].lower()}@example.com"),
        batch_number=batch_number,
        assigned_coach_id=coach.id if coach is not None else None,
        **kwargs,
    ))


def make_stage(session, name, stage_order, is_active=True):
    return _add(session, JourneyStage(name=name, stage_order=stage_order, is_active=is_active))


def make_task(session, stage, title, task_order=1):
    return _add(session, Task(stage_id=stage.id, title=title, task_order=task_order))


def make_progress(session, user, stage, status=ProgressStatus.IN_PROGRESS, **kwargs):
    return _add(session, ParticipantProgress(
        user_id=user.id, stage_id=stage.id, status=status, **kwargs
    ))


def make_submission(session, user, task, status=SubmissionStatus.SUBMITTED, **kwargs):
    return _add(session, TaskSubmission(user_id=user.id, task_id=task.id, status=status, **kwargs))


def make_document(session, user, name="GST Certificate", status=DocumentStatus.PENDING, **kwargs):
    return _add(session, Document(
        user_id=user.id,
        document_type=kwargs.pop("document_type", "gst"),
        document_name=name,
        status=status,
        **kwargs,
    ))


def make_trade(session, user, amount=250000.0, status=TradeStatus.PENDING, trade_date=None, **kwargs):
    return _add(session, Trade(
        user_id=user.id,
        trade_type=kwargs.pop("trade_type", "export"),
        product_service=kwargs.pop("product_service", "Organic spices"),
        country=kwargs.pop("country", "UAE"),
        amount=amount,
        status=status,
        trade_date=trade_date or date(2024, 1, 15),
        **kwargs,
    ))


def make_enrollment(session, user, status="submitted"):
    return _add(session, EnrollmentSubmission(
        user_id=user.id, full_name=user.full_name, status=status
    ))


def make_attendance(session, user, day, attendance_type=AttendanceType.DAILY, session_name=None):
    return _add(session, Attendance(
        user_id=user.id,
        attendance_type=attendance_type,
        session_name=session_name,
        check_in_time=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc),
        date=day,
    ))


def make_link(session, title="Buyer Outreach", session_type=SessionType.SPECIAL_SESSION, **kwargs):
    return _add(session, SpecialSessionLink(
        title=title,
        link_url=kwargs.pop("link_url", "https://meet.example.com/abc"),
        session_type=session_type,
        **kwargs,
    ))
