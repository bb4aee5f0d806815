"""CLI entry-point for generating a demo cohort into the programme store.

Usage:
    python -m journeydesk.seed.generator --profile=standard --seed=42
    python -m journeydesk.seed.generator --profile=busy_review --seed=42 --reset
"""

import argparse
import logging
import random
import time
from datetime import date

from sqlalchemy import insert
from sqlalchemy.orm import Session

from journeydesk.config import settings
from journeydesk.db.engine import StoreSyncSessionLocal, store_sync_engine
from journeydesk.models.store import (
    Attendance,
    AuditLog,
    Document,
    EcommerceSetup,
    EnrollmentSubmission,
    JourneyStage,
    ParticipantProgress,
    Profile,
    RoleNavigationSetting,
    SpecialSessionLink,
    StoreBase,
    Task,
    TaskSubmission,
    Trade,
)
from journeydesk.seed.factories.activity import (
    generate_attendance,
    generate_audit_logs,
    generate_documents,
    generate_ecommerce_setups,
    generate_enrollments,
    generate_links,
    generate_navigation_settings,
    generate_trades,
)
from journeydesk.seed.factories.cohort import (
    generate_journeys,
    generate_profiles,
    generate_stages,
    generate_tasks,
)
from journeydesk.seed.profiles import SeedProfile, get_profile


def build_dataset(profile: SeedProfile, rng: random.Random, today: date) -> dict[type[StoreBase], list[dict]]:
    """Generate every table's rows, keyed by model in insert order."""
    stages = generate_stages(rng)
    tasks = generate_tasks(stages, profile, rng)
    people = generate_profiles(profile, rng)
    participants = people["participants"]
    journeys = generate_journeys(participants, stages, tasks, profile, rng)
    documents = generate_documents(participants, profile, rng)
    batches = sorted({p["batch_number"] for p in participants})

    return {
        JourneyStage: stages,
        Task: tasks,
        Profile: people["coaches"] + participants,
        ParticipantProgress: journeys["progress"],
        TaskSubmission: journeys["submissions"],
        Document: documents,
        Trade: generate_trades(participants, profile, rng, today),
        Attendance: generate_attendance(participants, profile, rng, today),
        EnrollmentSubmission: generate_enrollments(participants, profile, rng),
        EcommerceSetup: generate_ecommerce_setups(participants, rng),
        SpecialSessionLink: generate_links(batches, profile, rng),
        AuditLog: generate_audit_logs(documents, rng),
        RoleNavigationSetting: generate_navigation_settings(rng),
    }


def load_dataset(session: Session, dataset: dict[type[StoreBase], list[dict]]) -> dict[str, int]:
    counts = {}
    for model, rows in dataset.items():
        if rows:
            session.execute(insert(model), rows)
        counts[model.__tablename__] = len(rows)
    session.commit()
    return counts


def reset_tables(session: Session) -> None:
    """Delete all rows, children before parents."""
    for table in reversed(StoreBase.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    print("  All store tables cleared.")


def run_seed(profile_name: str, seed: int, reset: bool = False) -> None:
    print(f"\n{'='*60}")
    print("JourneyDesk - Demo Cohort Generator")
    print(f"Profile: {profile_name} | Seed: {seed} | Reset: {reset}")
    print(f"{'='*60}\n")

    profile = get_profile(profile_name)
    rng = random.Random(seed)
    start_time = time.time()

    print("[1/3] Creating store tables...")
    StoreBase.metadata.create_all(store_sync_engine)

    session = StoreSyncSessionLocal()
    try:
        if reset:
            print("[1.5/3] Resetting existing data...")
            reset_tables(session)

        print("[2/3] Generating cohort...")
        dataset = build_dataset(profile, rng, date.today())

        print("[3/3] Inserting rows...")
        counts = load_dataset(session, dataset)
        for table_name, count in counts.items():
            print(f"  {table_name}: {count} rows")

        elapsed = time.time() - start_time
        print(f"\n{'='*60}")
        print(f"Seed generation complete in {elapsed:.1f}s")
        print(f"{'='*60}\n")

    except Exception as e:
        session.rollback()
        print(f"\nERROR: Seed generation failed: {e}")
        raise
    finally:
        session.close()


def main():
    parser = argparse.ArgumentParser(description="JourneyDesk Demo Cohort Generator")
    parser.add_argument(
        "--profile",
        type=str,
        default=settings.seed_profile,
        help="Seed profile (standard, small, busy_review)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.seed_random_seed,
        help="Random seed for reproducible data",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete all store rows before generating",
    )
    args = parser.parse_args()

    logging.basicConfig(level=settings.api_log_level.upper())
    run_seed(args.profile, args.seed, args.reset)


if __name__ == "__main__":
    main()
