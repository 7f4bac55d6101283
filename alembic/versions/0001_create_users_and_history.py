"""create users and chat history tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("google_id", sa.String(), nullable=True),
        sa.Column("picture_url", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("google_id", name="uq_users_google_id"),
        sa.CheckConstraint(
            "(password_hash IS NULL) <> (google_id IS NULL)",
            name="ck_users_credential_kind",
        ),
    )

    op.create_table(
        "chat_histories",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_chat_histories"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_chat_histories_user_id_users",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("user_id", name="uq_chat_histories_user_id"),
    )

    op.create_table(
        "conversations",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("conversation_id", sa.String(length=64), nullable=False),
        sa.Column("history_id", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_conversations"),
        sa.ForeignKeyConstraint(
            ["history_id"],
            ["chat_histories.id"],
            name="fk_conversations_history_id_chat_histories",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "conversation_id", name="uq_conversations_conversation_id"
        ),
    )
    op.create_index(
        "ix_conversations_history_id_id",
        "conversations",
        ["history_id", "id"],
    )

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("conversation_pk", sa.BigInteger(), nullable=False),
        sa.Column("sender", sa.String(length=20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_chat_messages"),
        sa.ForeignKeyConstraint(
            ["conversation_pk"],
            ["conversations.id"],
            name="fk_chat_messages_conversation_pk_conversations",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "sender IN ('user', 'assistant')", name="ck_chat_messages_sender"
        ),
    )
    op.create_index(
        "ix_chat_messages_conversation_pk_id",
        "chat_messages",
        ["conversation_pk", "id"],
    )


def downgrade() -> None:
    op.drop_index("ix_chat_messages_conversation_pk_id", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("ix_conversations_history_id_id", table_name="conversations")
    op.drop_table("conversations")
    op.drop_table("chat_histories")
    op.drop_table("users")
