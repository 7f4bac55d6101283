"""Pydantic models for the HTTP API.

Wire names are camelCase (``userId``, ``messageId``) to match the web
client; Python attributes stay snake_case.  Request fields are optional
at the schema level so that a missing field reaches the service and is
reported as ``VALIDATION_ERROR`` like any other blank value.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from genchat.core.models import Conversation

# Upper bound on a single prompt; longer prompts are rejected before
# reaching the model.
CHAT_QUESTION_MAX_LENGTH = 8192


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SignupRequest(_CamelModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(_CamelModel):
    email: str | None = None
    password: str | None = None


class MessageResponse(_CamelModel):
    message: str


class LoginResponse(_CamelModel):
    message: str
    user_id: str


class UserResponse(_CamelModel):
    """Public projection of a user; never includes credentials."""

    id: str
    name: str
    email: str
    picture_url: str | None = None
    google_account: bool = Field(description="Signed up through Google")


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(_CamelModel):
    question: str | None = Field(default=None, max_length=CHAT_QUESTION_MAX_LENGTH)
    user_id: str | None = None
    message_id: str | None = Field(
        default=None, description="Id of the conversation to continue"
    )


class ChatResponse(_CamelModel):
    ai_response: str
    conversation_id: str = Field(
        description="Conversation that received the exchange; "
        "may differ from the requested messageId"
    )


class ConversationListResponse(_CamelModel):
    conversations: list[Conversation]


class ConversationSummaryResponse(_CamelModel):
    id: str
    preview: str
    message_count: int


class SummaryListResponse(_CamelModel):
    conversations: list[ConversationSummaryResponse]


class NewConversationResponse(_CamelModel):
    conversation: Conversation
    name: str


class ConversationLookupRequest(_CamelModel):
    message_id: str | None = None


class ConversationLookupResponse(_CamelModel):
    status: Literal["success"] = "success"
    data: Conversation


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    detail: str = Field(description="Human-readable message")
    code: str = Field(description="Stable machine-readable error code")
