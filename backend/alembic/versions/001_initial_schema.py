"""Initial schema - users, invites, flags, comments, reactions, notifications, devices, metrics.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_COUNTERS = (
    "total_claims", "total_arguments", "total_claims_backed", "total_claims_challenged",
    "total_amount_backed", "total_amount_challenged", "total_endorsements_given",
    "total_endorsements_received", "stake_earned", "stake_lost", "stake_balance",
    "interest_earned", "total_amount_at_stake", "total_amount_staked", "cred_earned",
)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(64), nullable=False, unique=True),
        sa.Column("username", sa.String(32), nullable=False, unique=True),
        sa.Column("full_name", sa.String(128), nullable=False, server_default=""),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("avatar_url", sa.String(512), nullable=False, server_default=""),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column(
            "referred_by", sa.BigInteger,
            sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    op.create_table(
        "invites",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("creator", sa.String(64), nullable=False, index=True),
        sa.Column("friend_email", sa.String(256), nullable=False, unique=True),
        sa.Column("paid", sa.Boolean, nullable=False, server_default=sa.false()),
        _created_at(),
    )

    op.create_table(
        "flagged_stories",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("story_id", sa.BigInteger, nullable=False, index=True),
        sa.Column("creator", sa.String(64), nullable=False),
        _created_at("created_on"),
        sa.UniqueConstraint("story_id", "creator", name="no_duplicate_flag"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("parent_id", sa.BigInteger, nullable=True),
        sa.Column("claim_id", sa.BigInteger, nullable=False, index=True),
        sa.Column("argument_id", sa.BigInteger, nullable=True, index=True),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("creator", sa.String(64), nullable=False),
        _created_at(),
    )

    op.create_table(
        "reactions",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("reactionable_type", sa.String(20), nullable=False),
        sa.Column("reactionable_id", sa.BigInteger, nullable=False),
        sa.Column("reaction_type", sa.Integer, nullable=False, server_default="0"),
        sa.Column("creator", sa.String(64), nullable=False),
        _created_at(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_reactions_target", "reactions", ["reactionable_type", "reactionable_id"],
    )

    op.create_table(
        "notification_events",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(64), nullable=False, index=True),
        sa.Column("sender_address", sa.String(64), nullable=True),
        sa.Column("type", sa.Integer, nullable=False),
        sa.Column("type_id", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("meta", sa.JSON, nullable=False),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("seen", sa.Boolean, nullable=False, server_default=sa.false()),
        _created_at("timestamp"),
    )

    op.create_table(
        "device_tokens",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(64), nullable=False, index=True),
        sa.Column("token", sa.String(512), nullable=False, unique=True),
        sa.Column("platform", sa.String(10), nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        _created_at(),
    )

    op.create_table(
        "claim_of_the_day_ids",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("community_id", sa.String(64), nullable=False, unique=True),
        sa.Column("claim_id", sa.BigInteger, nullable=False),
    )

    op.create_table(
        "user_metrics",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("address", sa.String(64), nullable=False, index=True),
        sa.Column("as_on_date", sa.Date, nullable=False),
        sa.Column("community_id", sa.String(64), nullable=False),
        *[
            sa.Column(name, sa.BigInteger, nullable=False, server_default="0")
            for name in _COUNTERS
        ],
    )


def downgrade() -> None:
    op.drop_table("user_metrics")
    op.drop_table("claim_of_the_day_ids")
    op.drop_table("device_tokens")
    op.drop_table("notification_events")
    op.drop_index("ix_reactions_target", table_name="reactions")
    op.drop_table("reactions")
    op.drop_table("comments")
    op.drop_table("flagged_stories")
    op.drop_table("invites")
    op.drop_table("users")
