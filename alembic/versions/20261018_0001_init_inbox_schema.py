"""init inbox schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    conversation_status = sa.Enum("open", "closed", name="inbox_conversation_status")
    conversation_mode = sa.Enum("bot", "human", name="inbox_conversation_mode")
    conversation_priority = sa.Enum(
        "low",
        "normal",
        "high",
        "urgent",
        name="inbox_conversation_priority",
    )

    bind = op.get_bind()
    conversation_status.create(bind, checkfirst=True)
    conversation_mode.create(bind, checkfirst=True)
    conversation_priority.create(bind, checkfirst=True)

    op.create_table(
        "contacts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=160), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contacts_phone", "contacts", ["phone"], unique=True)

    op.create_table(
        "ai_agents",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "inbox_conversations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("contact_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("ai_agent_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "status",
            sa.Enum("open", "closed", name="inbox_conversation_status", create_type=False),
            nullable=False,
            server_default=sa.text("'open'"),
        ),
        sa.Column(
            "mode",
            sa.Enum("bot", "human", name="inbox_conversation_mode", create_type=False),
            nullable=False,
            server_default=sa.text("'bot'"),
        ),
        sa.Column(
            "priority",
            sa.Enum(
                "low",
                "normal",
                "high",
                "urgent",
                name="inbox_conversation_priority",
                create_type=False,
            ),
            nullable=False,
            server_default=sa.text("'normal'"),
        ),
        sa.Column("handoff_summary", sa.Text(), nullable=True),
        sa.Column("last_message_preview", sa.String(length=500), nullable=True),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("unread_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint("unread_count >= 0", name="ck_inbox_conversations_unread_count"),
        sa.ForeignKeyConstraint(["contact_id"], ["contacts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["ai_agent_id"], ["ai_agents.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_inbox_conversations_phone",
        "inbox_conversations",
        ["phone"],
        unique=False,
    )
    op.create_index(
        "ix_inbox_conversations_contact_id",
        "inbox_conversations",
        ["contact_id"],
        unique=False,
    )
    op.create_index(
        "ix_inbox_conversations_last_message_at",
        "inbox_conversations",
        ["last_message_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_inbox_conversations_last_message_at", table_name="inbox_conversations")
    op.drop_index("ix_inbox_conversations_contact_id", table_name="inbox_conversations")
    op.drop_index("ix_inbox_conversations_phone", table_name="inbox_conversations")
    op.drop_table("inbox_conversations")

    op.drop_table("ai_agents")

    op.drop_index("ix_contacts_phone", table_name="contacts")
    op.drop_table("contacts")

    bind = op.get_bind()
    sa.Enum(name="inbox_conversation_priority").drop(bind, checkfirst=True)
    sa.Enum(name="inbox_conversation_mode").drop(bind, checkfirst=True)
    sa.Enum(name="inbox_conversation_status").drop(bind, checkfirst=True)
