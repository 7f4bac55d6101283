"""Row ↔ domain model conversion for the SQL store backend."""

from datetime import datetime, timezone

from genchat.core.models import ChatHistory, Conversation, Message, User

from .models import ChatHistoryRow, ConversationRow, MessageRow, UserRow


def _aware(value: datetime) -> datetime:
    """SQLite drops tzinfo; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        google_id=row.google_id,
        picture_url=row.picture_url,
    )


def user_to_row(user: User) -> UserRow:
    return UserRow(
        id=user.id,
        name=user.name,
        email=user.email,
        password_hash=user.password_hash,
        google_id=user.google_id,
        picture_url=user.picture_url,
    )


def row_to_message(row: MessageRow) -> Message:
    return Message(
        content=row.content,
        sender=row.sender,  # type: ignore[arg-type]
        timestamp=_aware(row.timestamp),
    )


def message_to_row(message: Message, conversation_pk: int) -> MessageRow:
    return MessageRow(
        conversation_pk=conversation_pk,
        sender=message.sender,
        content=message.content,
        timestamp=message.timestamp,
    )


def row_to_conversation(row: ConversationRow) -> Conversation:
    return Conversation(
        id=row.conversation_id,
        messages=[row_to_message(m) for m in row.messages],
    )


def row_to_history(row: ChatHistoryRow) -> ChatHistory:
    return ChatHistory(
        user_id=row.user_id,
        conversations=[row_to_conversation(c) for c in row.conversations],
    )
