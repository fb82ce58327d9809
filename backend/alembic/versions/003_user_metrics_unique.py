"""Unique daily metric per (address, as_on_date, community_id).

Revision ID: 003_metrics_unique
Revises: 002_invites_left
Create Date: 2026-10-17

The metrics export upserts ON CONFLICT no_duplicate_metric, so the constraint must exist
before the first run.
"""
from typing import Sequence, Union

from alembic import op


revision: str = "003_metrics_unique"
down_revision: Union[str, None] = "002_invites_left"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("user_metrics") as batch:
        batch.create_unique_constraint(
            "no_duplicate_metric", ["address", "as_on_date", "community_id"],
        )


def downgrade() -> None:
    with op.batch_alter_table("user_metrics") as batch:
        batch.drop_constraint("no_duplicate_metric", type_="unique")
