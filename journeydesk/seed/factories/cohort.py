"""Factory for generating journey_stages, tasks, profiles and participant_progress records."""

import uuid
from datetime import datetime, timedelta, timezone

from journeydesk.models.enums import ProgressStatus, SubmissionStatus
from journeydesk.seed.profiles import SeedProfile

STAGES = [
    {"name": "Enrollment", "description": "Register and submit the enrollment form"},
    {"name": "Offline Orientation", "description": "In-person programme orientation"},
    {"name": "Online Orientation", "description": "Live online orientation session"},
    {"name": "Business Documentation", "description": "Company and export registrations"},
    {"name": "Special Session", "description": "Expert-led special session"},
    {"name": "Market Research", "description": "Identify target markets and buyers"},
    {"name": "E-commerce Setup", "description": "Launch an online storefront"},
    {"name": "OHM Offline Meet", "description": "Cohort meet-up with mentors"},
    {"name": "First Trade", "description": "Complete the first export or import"},
]

FIRST_NAMES = [
    "Aarav", "Priya", "Rohan", "Ananya", "Vikram", "Sneha", "Arjun", "Kavya",
    "Rahul", "Meera", "Karan", "Isha", "Aditya", "Pooja", "Nikhil", "Divya",
]
LAST_NAMES = [
    "Sharma", "Patel", "Reddy", "Iyer", "Gupta", "Nair", "Deshmukh", "Joshi",
    "Kulkarni", "Singh", "Menon", "Rao",
]


def seeded_uuid(rng) -> uuid.UUID:
    return uuid.UUID(int=rng.getrandbits(128), version=4)


def generate_stages(rng) -> list[dict]:
    now = datetime.now(timezone.utc)
    return [
        {
            "id": seeded_uuid(rng),
            "name": stage["name"],
            "description": stage["description"],
            "stage_order": order,
            "is_active": True,
            "created_at": now,
        }
        for order, stage in enumerate(STAGES, start=1)
    ]


def generate_tasks(stages: list[dict], profile: SeedProfile, rng) -> list[dict]:
    now = datetime.now(timezone.utc)
    tasks = []
    for stage in stages:
        for i in range(1, profile.tasks_per_stage + 1):
            tasks.append({
                "id": seeded_uuid(rng),
                "stage_id": stage["id"],
                "title": f"{stage['name']}: step {i}",
                "description": None,
                "task_order": stage["stage_order"] * 10 + i,
                "is_active": True,
                "created_at": now,
            })
    return tasks


def _person(rng, index: int) -> tuple[str, str]:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return f"{first} {last}", f"{first.lower()}.{last.lower()}{index}@example.com"


def generate_profiles(profile: SeedProfile, rng) -> dict:
    """Generate coach and participant profiles.

    Returns dict with keys: coaches, participants
    """
    now = datetime.now(timezone.utc)
    coaches = []
    for i in range(profile.num_coaches):
        name, email = _person(rng, i)
        coaches.append({
            "id": seeded_uuid(rng),
            "full_name": name,
            "email": email,
            "phone": None,
            "batch_number": None,
            "unique_id": f"COACH-{i + 1:03d}",
            "assigned_coach_id": None,
            "created_at": now - timedelta(days=120),
        })

    participants = []
    serial = 0
    for b in range(1, profile.num_batches + 1):
        for _ in range(profile.participants_per_batch):
            serial += 1
            name, email = _person(rng, 100 + serial)
            participants.append({
                "id": seeded_uuid(rng),
                "full_name": name,
                "email": email,
                "phone": f"+91 9{rng.randint(100000000, 999999999)}",
                "batch_number": f"B{b:02d}",
                "unique_id": f"JD-{serial:04d}",
                "assigned_coach_id": rng.choice(coaches)["id"] if coaches else None,
                "created_at": now - timedelta(days=rng.randint(30, 90)),
            })

    return {"coaches": coaches, "participants": participants}


def generate_journeys(
    participants: list[dict],
    stages: list[dict],
    tasks: list[dict],
    profile: SeedProfile,
    rng,
) -> dict:
    """Walk every participant some way along the journey.

    Stages before the participant's current one are completed, the current
    one is in progress. Tasks of completed stages are verified; tasks of the
    current stage are submitted for review or still in progress.

    Returns dict with keys: progress, submissions
    """
    now = datetime.now(timezone.utc)
    progress = []
    submissions = []
    tasks_by_stage: dict[uuid.UUID, list[dict]] = {}
    for task in tasks:
        tasks_by_stage.setdefault(task["stage_id"], []).append(task)

    for participant in participants:
        reached = rng.randint(0, len(stages))
        started = participant["created_at"]
        for stage in stages[:reached]:
            is_current = stage["stage_order"] == reached and rng.random() < 0.7
            stage_start = started + timedelta(days=(stage["stage_order"] - 1) * 4)
            progress.append({
                "id": seeded_uuid(rng),
                "user_id": participant["id"],
                "stage_id": stage["id"],
                "status": ProgressStatus.IN_PROGRESS if is_current else ProgressStatus.COMPLETED,
                "started_at": stage_start,
                "completed_at": None if is_current else stage_start + timedelta(days=3),
                "created_at": stage_start,
            })

            for task in tasks_by_stage.get(stage["id"], []):
                if is_current:
                    status = (
                        SubmissionStatus.SUBMITTED
                        if rng.random() < profile.review_backlog_rate
                        else SubmissionStatus.IN_PROGRESS
                    )
                else:
                    status = SubmissionStatus.VERIFIED
                verified = status == SubmissionStatus.VERIFIED
                submitted_at = min(stage_start + timedelta(days=1), now)
                submissions.append({
                    "id": seeded_uuid(rng),
                    "user_id": participant["id"],
                    "task_id": task["id"],
                    "submission_notes": None,
                    "status": status,
                    "verified_by": participant["assigned_coach_id"] if verified else None,
                    "verification_notes": None,
                    "submitted_at": submitted_at if status != SubmissionStatus.IN_PROGRESS else None,
                    "verified_at": submitted_at + timedelta(days=1) if verified else None,
                    "created_at": stage_start,
                })

    return {"progress": progress, "submissions": submissions}
