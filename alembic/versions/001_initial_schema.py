"""Initial schema - document, version_snapshot, transition_event.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

LETTER_STATES = ("DRAFT", "PENDING_REVIEW", "APPROVED", "READY_TO_SEND", "SENT")


def upgrade() -> None:
    op.create_table(
        "document",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("state", sa.String(32), nullable=False, server_default="DRAFT"),
        sa.Column("current_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("compliance_score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("lock_version", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint(
            "state IN ({})".format(", ".join(f"'{s}'" for s in LETTER_STATES)),
            name="ck_document_state",
        ),
        sa.CheckConstraint("current_version >= 1", name="ck_document_current_version"),
        sa.CheckConstraint(
            "compliance_score >= 0 AND compliance_score <= 100",
            name="ck_document_compliance_score",
        ),
    )
    op.create_index("ix_document_state", "document", ["state"])

    op.create_table(
        "version_snapshot",
        sa.Column(
            "document_id",
            sa.UUID(),
            sa.ForeignKey("document.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("version_number", sa.Integer(), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("compliance_score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("origin_instruction", sa.Text(), nullable=True),
        sa.CheckConstraint("version_number >= 1", name="ck_version_snapshot_number"),
    )

    op.create_table(
        "transition_event",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=True), nullable=False),
        sa.Column(
            "document_id",
            sa.UUID(),
            sa.ForeignKey("document.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("event_type", sa.String(32), nullable=False),
        sa.Column("from_state", sa.String(32), nullable=False),
        sa.Column("to_state", sa.String(32), nullable=False),
        sa.Column("actor_id", sa.String(255), nullable=False),
        sa.Column("actor_role", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("payload", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
    )
    op.create_index(
        "ix_transition_event_document_created",
        "transition_event",
        ["document_id", "created_at", "seq"],
    )


def downgrade() -> None:
    op.drop_table("transition_event")
    op.drop_table("version_snapshot")
    op.drop_table("document")
