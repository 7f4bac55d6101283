"""History query and new-conversation services.

"No history yet" has one meaning everywhere: listing returns an empty
list, looking up a specific conversation raises ``NotFoundError``.
"""

import logging

from genchat.core.exceptions import NotFoundError
from genchat.core.models import Conversation, ConversationSummary, User
from genchat.infra.store.base import HistoryStore, UserStore

from .validation import require

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(self, users: UserStore, histories: HistoryStore) -> None:
        self._users = users
        self._histories = histories

    async def require_user(self, user_id: str) -> User:
        require(userId=user_id)
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_history(self, user_id: str) -> list[Conversation]:
        """Every conversation of the user, oldest first."""
        await self.require_user(user_id)
        history = await self._histories.get_history(user_id)
        return history.conversations if history else []

    async def get_conversation(
        self, user_id: str, conversation_id: str
    ) -> Conversation:
        require(userId=user_id, messageId=conversation_id)
        await self.require_user(user_id)
        history = await self._histories.get_history(user_id)
        if history is None:
            raise NotFoundError("No chat history found for this user")
        conversation = history.find(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        return conversation

    async def list_summaries(self, user_id: str) -> list[ConversationSummary]:
        """Sidebar view: each conversation reduced to its first message."""
        return [
            ConversationSummary(
                id=c.id,
                preview=c.messages[0].content if c.messages else "",
                message_count=len(c.messages),
            )
            for c in await self.get_history(user_id)
        ]

    async def start_conversation(self, user_id: str) -> tuple[Conversation, User]:
        """Append a fresh empty conversation; return it with its owner."""
        user = await self.require_user(user_id)
        conversation = await self._histories.add_conversation(user_id)
        logger.info("Started conversation %s for user %s", conversation.id, user_id)
        return conversation, user
