"""Demo cohort profiles defining volume and review backlog shapes."""

from dataclasses import dataclass


@dataclass
class SeedProfile:
    name: str
    num_coaches: int = 3
    num_batches: int = 3
    participants_per_batch: int = 12
    tasks_per_stage: int = 3
    documents_per_participant: int = 3
    trades_per_participant_max: int = 4
    attendance_days: int = 30
    attendance_rate: float = 0.75
    # Probability that a participant's open item is waiting for review.
    review_backlog_rate: float = 0.30
    num_links: int = 4


PROFILES: dict[str, SeedProfile] = {
    "standard": SeedProfile(
        name="standard",
    ),
    "small": SeedProfile(
        name="small",
        num_coaches=1,
        num_batches=1,
        participants_per_batch=5,
        tasks_per_stage=2,
        documents_per_participant=2,
        trades_per_participant_max=2,
        attendance_days=7,
        num_links=2,
    ),
    "busy_review": SeedProfile(
        name="busy_review",
        participants_per_batch=20,
        documents_per_participant=5,
        trades_per_participant_max=8,
        review_backlog_rate=0.80,
    ),
}


def get_profile(name: str) -> SeedProfile:
    if name not in PROFILES:
        raise ValueError(f"Unknown profile '{name}'. Available: {list(PROFILES.keys())}")
    return PROFILES[name]
