"""Domain model invariants."""

import pytest
from pydantic import ValidationError

from genchat.core.models import (
    SENDER_ASSISTANT,
    SENDER_USER,
    ChatHistory,
    Conversation,
    Message,
    User,
    make_exchange,
)


class TestUser:
    def test_password_account(self):
        user = User(id="user_1", name="A", email="a@x.com", password_hash="h")
        assert user.google_id is None

    def test_google_account(self):
        user = User(id="user_1", name="A", email="a@x.com", google_id="g-1")
        assert user.password_hash is None

    def test_requires_a_credential(self):
        with pytest.raises(ValidationError):
            User(id="user_1", name="A", email="a@x.com")

    def test_rejects_both_credentials(self):
        with pytest.raises(ValidationError):
            User(
                id="user_1",
                name="A",
                email="a@x.com",
                password_hash="h",
                google_id="g-1",
            )


class TestMessages:
    def test_message_is_immutable(self):
        message = Message(content="hi", sender=SENDER_USER)
        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_unknown_sender_rejected(self):
        with pytest.raises(ValidationError):
            Message(content="hi", sender="system")

    def test_make_exchange_orders_user_first(self):
        request, response = make_exchange("question", "answer")

        assert (request.sender, request.content) == (SENDER_USER, "question")
        assert (response.sender, response.content) == (SENDER_ASSISTANT, "answer")
        assert request.timestamp == response.timestamp


class TestChatHistory:
    def test_find(self):
        history = ChatHistory(
            user_id="user_1",
            conversations=[Conversation(id="conv_a"), Conversation(id="conv_b")],
        )

        assert history.find("conv_b").id == "conv_b"
        assert history.find("conv_missing") is None

    def test_conversations_default_empty(self):
        assert ChatHistory(user_id="user_1").conversations == []
