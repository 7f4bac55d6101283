"""SQLAlchemy ORM models for the genchat application.

All tables are managed by Alembic migrations.  The ``Base.metadata``
naming convention ensures deterministic constraint names for
auto-generated migrations.

Row ordering (conversations within a history, messages within a
conversation) follows the autoincrement surrogate key, which is
monotonic in insertion order.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from genchat.core.models import utcnow

# SQLite only autoincrements ``INTEGER PRIMARY KEY`` columns.
AutoIncrementId = BigInteger().with_variant(Integer(), "sqlite")

# ---------------------------------------------------------------------------
# Declarative base with naming convention
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    """Shared declarative base with explicit naming convention."""

    metadata_naming_convention = {
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }


Base.metadata.naming_convention = Base.metadata_naming_convention


# ---------------------------------------------------------------------------
# Users table
# ---------------------------------------------------------------------------


class UserRow(Base):
    """An account; password-based or Google-based, never both."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    google_id: Mapped[str | None] = mapped_column(
        String, nullable=True, unique=True
    )
    picture_url: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "(password_hash IS NULL) <> (google_id IS NULL)",
            name="credential_kind",
        ),
    )

    def __repr__(self) -> str:
        return f"<UserRow(id={self.id!r}, email={self.email!r})>"


# ---------------------------------------------------------------------------
# Chat history tables
# ---------------------------------------------------------------------------


class ChatHistoryRow(Base):
    """The single history document of one user."""

    __tablename__ = "chat_histories"

    id: Mapped[int] = mapped_column(
        AutoIncrementId, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    conversations: Mapped[list["ConversationRow"]] = relationship(
        back_populates="history",
        order_by="ConversationRow.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ChatHistoryRow(id={self.id}, user_id={self.user_id!r})>"


class ConversationRow(Base):
    """One conversation inside a history."""

    __tablename__ = "conversations"

    id: Mapped[int] = mapped_column(
        AutoIncrementId, primary_key=True, autoincrement=True
    )
    conversation_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True
    )
    history_id: Mapped[int] = mapped_column(
        ForeignKey("chat_histories.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    history: Mapped[ChatHistoryRow] = relationship(back_populates="conversations")
    messages: Mapped[list["MessageRow"]] = relationship(
        back_populates="conversation",
        order_by="MessageRow.id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_conversations_history_id_id", "history_id", "id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConversationRow(id={self.id}, "
            f"conversation_id={self.conversation_id!r})>"
        )


class MessageRow(Base):
    """A single immutable message; ``sender`` is ``user`` or ``assistant``."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(
        AutoIncrementId, primary_key=True, autoincrement=True
    )
    conversation_pk: Mapped[int] = mapped_column(
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    conversation: Mapped[ConversationRow] = relationship(back_populates="messages")

    __table_args__ = (
        CheckConstraint("sender IN ('user', 'assistant')", name="sender"),
        Index("ix_chat_messages_conversation_pk_id", "conversation_pk", "id"),
    )

    def __repr__(self) -> str:
        return (
            f"<MessageRow(id={self.id}, conversation_pk={self.conversation_pk}, "
            f"sender={self.sender!r})>"
        )
