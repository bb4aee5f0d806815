"""Factory for generating documents, trades, attendance, enrollment_submissions,
ecommerce_setups, special_session_links, audit_logs and role_navigation_settings records."""

from datetime import date, datetime, time, timedelta, timezone

from journeydesk.models.enums import (
    AppRole,
    AttendanceType,
    DocumentStatus,
    SessionType,
    TradeStatus,
)
from journeydesk.seed.factories.cohort import seeded_uuid
from journeydesk.seed.profiles import SeedProfile

DOCUMENT_TYPES = [
    ("iec", "Import Export Code"),
    ("gst", "GST Certificate"),
    ("pan", "PAN Card"),
    ("udyam", "Udyam Registration"),
    ("bank", "Bank Account Proof"),
]
PRODUCTS = [
    "Handloom sarees", "Basmati rice", "Brass handicrafts", "Organic spices",
    "Leather footwear", "Ayurvedic oils", "Software services", "Cotton textiles",
]
COUNTRIES = ["UAE", "USA", "UK", "Germany", "Singapore", "Australia", "Kenya", "Japan"]
PLATFORMS = ["Amazon Global", "Etsy", "Shopify", "Flipkart", "WooCommerce"]
SESSIONS = ["Export Basics", "Buyer Outreach", "Pricing Workshop"]


def generate_documents(participants: list[dict], profile: SeedProfile, rng) -> list[dict]:
    now = datetime.now(timezone.utc)
    documents = []
    for participant in participants:
        picked = rng.sample(DOCUMENT_TYPES, min(profile.documents_per_participant, len(DOCUMENT_TYPES)))
        for doc_type, doc_name in picked:
            if rng.random() < profile.review_backlog_rate:
                status = rng.choice([DocumentStatus.PENDING, DocumentStatus.SUBMITTED])
            else:
                status = rng.choice([DocumentStatus.APPROVED, DocumentStatus.APPROVED, DocumentStatus.REJECTED])
            reviewed = status in (DocumentStatus.APPROVED, DocumentStatus.REJECTED)
            submitted_at = now - timedelta(days=rng.randint(1, 45))
            documents.append({
                "id": seeded_uuid(rng),
                "user_id": participant["id"],
                "document_type": doc_type,
                "document_name": doc_name,
                "status": status,
                "reviewed_by": participant["assigned_coach_id"] if reviewed else None,
                "review_notes": None,
                "submitted_at": submitted_at,
                "reviewed_at": submitted_at + timedelta(days=2) if reviewed else None,
                "created_at": submitted_at,
            })
    return documents


def generate_trades(participants: list[dict], profile: SeedProfile, rng, today: date) -> list[dict]:
    trades = []
    for participant in participants:
        for _ in range(rng.randint(0, profile.trades_per_participant_max)):
            trade_date = today - timedelta(days=rng.randint(0, 60))
            if rng.random() < profile.review_backlog_rate:
                status = TradeStatus.PENDING
            else:
                status = rng.choice([TradeStatus.APPROVED, TradeStatus.APPROVED, TradeStatus.REJECTED])
            trades.append({
                "id": seeded_uuid(rng),
                "user_id": participant["id"],
                "trade_type": rng.choice(["export", "import"]),
                "product_service": rng.choice(PRODUCTS),
                "country": rng.choice(COUNTRIES),
                "amount": float(rng.randint(5, 5000) * 1000),
                "currency": "INR",
                "status": status,
                "trade_date": trade_date,
                "created_at": datetime.combine(trade_date, time(12), tzinfo=timezone.utc),
            })
    return trades


def generate_attendance(participants: list[dict], profile: SeedProfile, rng, today: date) -> list[dict]:
    """Daily check-ins on most days, plus an occasional session check-in."""
    attendance = []
    for participant in participants:
        for offset in range(profile.attendance_days):
            day = today - timedelta(days=offset)
            if day.weekday() == 6 or rng.random() > profile.attendance_rate:
                continue
            check_in = datetime.combine(day, time(9, rng.randint(0, 59)), tzinfo=timezone.utc)
            attendance.append({
                "id": seeded_uuid(rng),
                "user_id": participant["id"],
                "attendance_type": AttendanceType.DAILY,
                "session_name": None,
                "check_in_time": check_in,
                "date": day,
                "created_at": check_in,
            })
            if rng.random() < 0.1:
                attendance.append({
                    "id": seeded_uuid(rng),
                    "user_id": participant["id"],
                    "attendance_type": AttendanceType.SESSION,
                    "session_name": rng.choice(SESSIONS),
                    "check_in_time": check_in + timedelta(hours=5),
                    "date": day,
                    "created_at": check_in + timedelta(hours=5),
                })
    return attendance


def generate_enrollments(participants: list[dict], profile: SeedProfile, rng) -> list[dict]:
    now = datetime.now(timezone.utc)
    return [
        {
            "id": seeded_uuid(rng),
            "user_id": p["id"],
            "full_name": p["full_name"],
            "status": "submitted" if rng.random() < profile.review_backlog_rate else "approved",
            "submitted_at": p["created_at"],
            "created_at": now,
        }
        for p in participants
    ]


def generate_ecommerce_setups(participants: list[dict], rng) -> list[dict]:
    setups = []
    for participant in participants:
        if rng.random() < 0.6:
            continue
        setups.append({
            "id": seeded_uuid(rng),
            "user_id": participant["id"],
            "store_name": f"{participant['full_name'].split()[0]}'s Store",
            "platform": rng.choice(PLATFORMS),
            "status": rng.choice(["pending", "in_progress", "completed"]),
            "created_at": participant["created_at"] + timedelta(days=rng.randint(10, 25)),
        })
    return setups


def generate_links(batches: list[str], profile: SeedProfile, rng) -> list[dict]:
    now = datetime.now(timezone.utc)
    session_types = [
        SessionType.SPECIAL_SESSION,
        SessionType.ONLINE_ORIENTATION,
        SessionType.OFFLINE_ORIENTATION,
        SessionType.OHM_MEET,
    ]
    links = []
    for i in range(profile.num_links):
        session_type = session_types[i % len(session_types)]
        links.append({
            "id": seeded_uuid(rng),
            "title": f"{session_type.value.replace('_', ' ').title()} #{i + 1}",
            "description": None,
            "link_url": f"https://meet.example.com/jd-{i + 1}",
            "session_type": session_type,
            "target_batch": rng.choice([None, *batches]),
            "is_active": True,
            "is_completed": False,
            "created_by": None,
            "created_at": now - timedelta(days=profile.num_links - i),
            "updated_at": now - timedelta(days=profile.num_links - i),
        })
    return links


def generate_audit_logs(documents: list[dict], rng) -> list[dict]:
    """One review entry per reviewed document, preceded by its submission."""
    logs = []
    for doc in documents:
        if doc["reviewed_at"] is None:
            continue
        logs.append({
            "id": seeded_uuid(rng),
            "table_name": "documents",
            "record_id": doc["id"],
            "user_id": doc["user_id"],
            "action": "status_changed",
            "old_status": DocumentStatus.PENDING.value,
            "new_status": DocumentStatus.SUBMITTED.value,
            "changed_by": doc["user_id"],
            "notes": None,
            "created_at": doc["submitted_at"],
        })
        logs.append({
            "id": seeded_uuid(rng),
            "table_name": "documents",
            "record_id": doc["id"],
            "user_id": doc["user_id"],
            "action": doc["status"].value,
            "old_status": DocumentStatus.SUBMITTED.value,
            "new_status": doc["status"].value,
            "changed_by": doc["reviewed_by"],
            "notes": None,
            "created_at": doc["reviewed_at"],
        })
    return logs


def generate_navigation_settings(rng) -> list[dict]:
    """Configured sidebar for coaches; the other roles use the built-in navigation."""
    rows = [
        ("/coach", "sidebar.verification", "CheckSquare", True),
        ("/attendance", "sidebar.attendance", "Calendar", False),
        ("/analytics", "sidebar.analytics", "BarChart3", False),
    ]
    return [
        {
            "id": seeded_uuid(rng),
            "role": AppRole.COACH,
            "page_path": path,
            "label_key": label_key,
            "icon_name": icon,
            "is_visible": True,
            "is_default": is_default,
            "display_order": order,
            "is_custom": False,
            "custom_label": None,
            "is_external": False,
        }
        for order, (path, label_key, icon, is_default) in enumerate(rows)
    ]
