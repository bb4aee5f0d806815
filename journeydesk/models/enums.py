"""Closed status and category types for the programme store.

Every status column is backed by one of these enums. Members compare equal to
their raw string value, so rows fetched as plain dicts can be matched against
them directly.
"""

import enum


class StatusOutcome(str, enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    PENDING = "pending"


POSITIVE_STATUSES = frozenset({"approved", "verified", "completed"})
NEGATIVE_STATUSES = frozenset({"rejected"})


def status_outcome(status: str | None) -> StatusOutcome:
    """Classify any entity status as terminal-positive, terminal-negative or pending."""
    value = status.value if isinstance(status, enum.Enum) else status
    if value in POSITIVE_STATUSES:
        return StatusOutcome.POSITIVE
    if value in NEGATIVE_STATUSES:
        return StatusOutcome.NEGATIVE
    return StatusOutcome.PENDING


class AppRole(str, enum.Enum):
    ADMIN = "admin"
    COACH = "coach"
    PARTICIPANT = "participant"
    ECOMMERCE = "ecommerce"
    FINANCE = "finance"


class ProgressStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SubmissionStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class TradeStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SessionType(str, enum.Enum):
    OFFLINE_ORIENTATION = "offline_orientation"
    ONLINE_ORIENTATION = "online_orientation"
    SPECIAL_SESSION = "special_session"
    OHM_MEET = "ohm_meet"
    UDYAMI_AI_ACCESS = "udyami_ai_access"


class AttendanceType(str, enum.Enum):
    DAILY = "daily"
    SESSION = "session"


class DataSource(str, enum.Enum):
    PROFILES = "profiles"
    TASK_SUBMISSIONS = "task_submissions"
    DOCUMENTS = "documents"
    TRADES = "trades"
    ATTENDANCE = "attendance"
    PARTICIPANT_PROGRESS = "participant_progress"
    ECOMMERCE_SETUPS = "ecommerce_setups"


def enum_column_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]
