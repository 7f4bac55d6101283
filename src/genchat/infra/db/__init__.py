"""Async SQL infrastructure (engine builder, ORM models, converters)."""

from .engine import build_db, create_engine, create_session_factory
from .models import Base, ChatHistoryRow, ConversationRow, MessageRow, UserRow

__all__ = [
    "Base",
    "build_db",
    "ChatHistoryRow",
    "ConversationRow",
    "create_engine",
    "create_session_factory",
    "MessageRow",
    "UserRow",
]
