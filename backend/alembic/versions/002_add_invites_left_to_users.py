"""Add invites_left to users.

Revision ID: 002_invites_left
Revises: 001_initial
Create Date: 2026-10-17

Every user gets an invite allowance; existing users start at 0 and are topped up by the
snowball sweep.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002_invites_left"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("users") as batch:
        batch.add_column(
            sa.Column("invites_left", sa.Integer(), nullable=False, server_default="0"),
        )


def downgrade() -> None:
    with op.batch_alter_table("users") as batch:
        batch.drop_column("invites_left")
