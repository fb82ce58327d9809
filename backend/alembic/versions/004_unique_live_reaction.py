"""One live reaction per creator, target and reaction type.

Revision ID: 004_live_reaction
Revises: 003_metrics_unique
Create Date: 2026-10-17

Partial unique index: soft-deleted rows (deleted_at set) are ignored, so a removed
reaction can be added again.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "004_live_reaction"
down_revision: Union[str, None] = "003_metrics_unique"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index(
        "uq_reactions_live",
        "reactions",
        ["reactionable_type", "reactionable_id", "reaction_type", "creator"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_reactions_live", table_name="reactions")
