"""Domain models: users and the conversation-history document.

``ChatHistory`` owns its ``Conversation``s and a ``Conversation`` owns
its ``Message``s.  Messages are immutable and carry an explicit
``sender``; role is never inferred from position.
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SENDER_USER: Literal["user"] = "user"
SENDER_ASSISTANT: Literal["assistant"] = "assistant"

Sender = Literal["user", "assistant"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Message text")
    sender: Sender = Field(description="Who wrote the message")
    timestamp: datetime = Field(default_factory=utcnow)


class Conversation(BaseModel):
    """One ordered thread of request/response message pairs."""

    id: str = Field(description="Server-minted conversation id")
    messages: list[Message] = Field(default_factory=list)


class ChatHistory(BaseModel):
    """Per-user container of every conversation."""

    user_id: str
    conversations: list[Conversation] = Field(default_factory=list)

    def find(self, conversation_id: str) -> Conversation | None:
        """Linear scan for a conversation by id."""
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None


class ConversationSummary(BaseModel):
    """Sidebar entry: a conversation reduced to its first message."""

    id: str
    preview: str = Field(description="First message content, or empty")
    message_count: int


class User(BaseModel):
    """An account, authenticated by password *or* Google, never both."""

    id: str
    name: str
    email: str
    password_hash: str | None = None
    google_id: str | None = None
    picture_url: str | None = None

    @model_validator(mode="after")
    def _one_credential_kind(self) -> "User":
        if (self.password_hash is None) == (self.google_id is None):
            raise ValueError(
                "exactly one of password_hash or google_id must be set"
            )
        return self


class GoogleProfile(BaseModel):
    """Identity returned by the Google userinfo endpoint."""

    id: str
    display_name: str
    email: str
    photo_url: str | None = None


def make_exchange(prompt: str, answer: str) -> tuple[Message, Message]:
    """Build the user/assistant message pair for one chat round-trip."""
    now = utcnow()
    return (
        Message(content=prompt, sender=SENDER_USER, timestamp=now),
        Message(content=answer, sender=SENDER_ASSISTANT, timestamp=now),
    )
