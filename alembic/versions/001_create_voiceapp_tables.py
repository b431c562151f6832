"""Create user, voice, reply and voice_like tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=256), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("country", sa.String(length=128), nullable=False),
        sa.Column("profile_pic", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_email"), "user", ["email"], unique=True)

    op.create_table(
        "voice",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("file", sa.String(length=512), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("country", sa.String(length=128), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index(op.f("ix_voice_id"), "voice", ["id"], unique=True)
    op.create_index(op.f("ix_voice_user_id"), "voice", ["user_id"])

    op.create_table(
        "reply",
        sa.Column("seq", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("voice_id", sa.String(length=36), sa.ForeignKey("voice.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("file", sa.String(length=512), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )
    op.create_index(op.f("ix_reply_id"), "reply", ["id"], unique=True)
    op.create_index(op.f("ix_reply_voice_id"), "reply", ["voice_id"])

    op.create_table(
        "voice_like",
        sa.Column("voice_id", sa.String(length=36), sa.ForeignKey("voice.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("user.id"), nullable=False),
        sa.PrimaryKeyConstraint("voice_id", "user_id"),
    )


def downgrade() -> None:
    op.drop_table("voice_like")
    op.drop_index(op.f("ix_reply_voice_id"), table_name="reply")
    op.drop_index(op.f("ix_reply_id"), table_name="reply")
    op.drop_table("reply")
    op.drop_index(op.f("ix_voice_user_id"), table_name="voice")
    op.drop_index(op.f("ix_voice_id"), table_name="voice")
    op.drop_table("voice")
    op.drop_index(op.f("ix_user_email"), table_name="user")
    op.drop_table("user")
