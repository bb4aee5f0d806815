"""Field catalogs for the custom report builder.

Each data source exposes an ordered list of output fields with a default
selection, the column its date-range filter applies to, and whether it can
be filtered by status.
"""

from dataclasses import dataclass

from journeydesk.models.enums import DataSource
from journeydesk.models.store import (
    Attendance,
    Document,
    EcommerceSetup,
    ParticipantProgress,
    Profile,
    StoreBase,
    TaskSubmission,
    Trade,
)


@dataclass(frozen=True)
class FieldOption:
    key: str
    label: str
    default_selected: bool


FIELD_CATALOG: dict[DataSource, list[FieldOption]] = {
    DataSource.PROFILES: [
        FieldOption("full_name", "Name", True),
        FieldOption("email", "Email", True),
        FieldOption("batch_number", "Batch", True),
        FieldOption("phone", "Phone", False),
        FieldOption("created_at", "Joined Date", False),
    ],
    DataSource.TASK_SUBMISSIONS: [
        FieldOption("user_name", "Participant", True),
        FieldOption("task_title", "Task", True),
        FieldOption("status", "Status", True),
        FieldOption("submitted_at", "Submitted", True),
        FieldOption("verified_at", "Verified", False),
    ],
    DataSource.DOCUMENTS: [
        FieldOption("user_name", "Participant", True),
        FieldOption("document_type", "Type", True),
        FieldOption("document_name", "Name", True),
        FieldOption("status", "Status", True),
        FieldOption("submitted_at", "Submitted", False),
    ],
    DataSource.TRADES: [
        FieldOption("user_name", "Participant", True),
        FieldOption("trade_type", "Type", True),
        FieldOption("product_service", "Product/Service", True),
        FieldOption("amount", "Amount", True),
        FieldOption("country", "Country", True),
        FieldOption("status", "Status", True),
        FieldOption("trade_date", "Date", False),
    ],
    DataSource.ATTENDANCE: [
        FieldOption("user_name", "Participant", True),
        FieldOption("date", "Date", True),
        FieldOption("attendance_type", "Type", True),
        FieldOption("session_name", "Session", False),
        FieldOption("check_in_time", "Check-in", False),
    ],
    DataSource.PARTICIPANT_PROGRESS: [
        FieldOption("user_name", "Participant", True),
        FieldOption("stage_name", "Stage", True),
        FieldOption("status", "Status", True),
        FieldOption("started_at", "Started", False),
        FieldOption("completed_at", "Completed", False),
    ],
    DataSource.ECOMMERCE_SETUPS: [
        FieldOption("user_name", "Participant", True),
        FieldOption("store_name", "Store", True),
        FieldOption("platform", "Platform", True),
        FieldOption("status", "Status", True),
        FieldOption("created_at", "Created", False),
    ],
}

SOURCE_MODELS: dict[DataSource, type[StoreBase]] = {
    DataSource.PROFILES: Profile,
    DataSource.TASK_SUBMISSIONS: TaskSubmission,
    DataSource.DOCUMENTS: Document,
    DataSource.TRADES: Trade,
    DataSource.ATTENDANCE: Attendance,
    DataSource.PARTICIPANT_PROGRESS: ParticipantProgress,
    DataSource.ECOMMERCE_SETUPS: EcommerceSetup,
}

# Column the date-range filter applies to; profiles are never date-filtered.
DATE_FIELDS: dict[DataSource, str] = {
    DataSource.TASK_SUBMISSIONS: "submitted_at",
    DataSource.DOCUMENTS: "submitted_at",
    DataSource.TRADES: "trade_date",
    DataSource.ATTENDANCE: "date",
    DataSource.PARTICIPANT_PROGRESS: "completed_at",
    DataSource.ECOMMERCE_SETUPS: "created_at",
}

STATUS_FILTERABLE = frozenset({
    DataSource.TASK_SUBMISSIONS,
    DataSource.DOCUMENTS,
    DataSource.TRADES,
    DataSource.PARTICIPANT_PROGRESS,
    DataSource.ECOMMERCE_SETUPS,
})

# Default English labels; callers may pass their own translate function.
STATUS_LABELS: dict[str, str] = {
    "not_started": "Not Started",
    "in_progress": "In Progress",
    "completed": "Completed",
    "pending": "Pending",
    "submitted": "Submitted",
    "under_review": "Under Review",
    "verified": "Verified",
    "approved": "Approved",
    "rejected": "Rejected",
    "unknown": "Unknown",
}


def default_fields(source: DataSource) -> list[str]:
    return [f.key for f in FIELD_CATALOG[source] if f.default_selected]


def field_labels(source: DataSource, keys: list[str]) -> dict[str, str]:
    """Ordered key -> label mapping for the selected keys, in catalog order."""
    selected = set(keys)
    return {f.key: f.label for f in FIELD_CATALOG[source] if f.key in selected}


def has_status_field(source: DataSource) -> bool:
    return any(f.key == "status" for f in FIELD_CATALOG[source])
