"""Unique (user, stage) progress rows and (user, task) submissions

Revision ID: jd_001
Revises:
Create Date: 2026-10-19

Duplicates are removed first, keeping the most recently created row of
each pair, so the constraints can back single-statement upserts.

Constraints added:
- uq_participant_progress_user_stage
- uq_task_submissions_user_task
"""

from alembic import op

# revision identifiers, used by Alembic.
revision = 'jd_001'
down_revision = None
branch_labels = None
depends_on = None


def _dedupe(table: str, key: str) -> None:
    op.execute(f"""
        DELETE FROM {table}
        WHERE id IN (
            SELECT id FROM (
                SELECT id,
                       ROW_NUMBER() OVER (
                           PARTITION BY user_id, {key}
                           ORDER BY created_at DESC, id DESC
                       ) AS rn
                FROM {table}
            ) ranked
            WHERE ranked.rn > 1
        )
    """)


def upgrade() -> None:
    _dedupe('participant_progress', 'stage_id')
    op.create_unique_constraint(
        'uq_participant_progress_user_stage',
        'participant_progress',
        ['user_id', 'stage_id'],
    )

    _dedupe('task_submissions', 'task_id')
    op.create_unique_constraint(
        'uq_task_submissions_user_task',
        'task_submissions',
        ['user_id', 'task_id'],
    )


def downgrade() -> None:
    op.drop_constraint('uq_task_submissions_user_task', 'task_submissions', type_='unique')
    op.drop_constraint('uq_participant_progress_user_stage', 'participant_progress', type_='unique')
