"""Single-process store backends using ``asyncio`` primitives.

Documents are copied on the way in and out so callers never share
mutable state with the store.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict

from genchat.core.exceptions import DuplicateEmailError, PersistenceError
from genchat.core.models import ChatHistory, Conversation, Message, User
from genchat.infra.id_utils import new_conversation_id

from .base import HistoryStore, UserStore


class LocalUserStore(UserStore):
    """In-process user table backed by a dict and an ``asyncio.Lock``."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def get_by_email(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy()
        return None

    async def get_by_google_id(self, google_id: str) -> User | None:
        for user in self._users.values():
            if user.google_id == google_id:
                return user.model_copy()
        return None

    async def create(self, user: User) -> User:
        async with self._lock:
            if any(u.email == user.email for u in self._users.values()):
                raise DuplicateEmailError()
            if user.google_id is not None and any(
                u.google_id == user.google_id for u in self._users.values()
            ):
                raise PersistenceError("Google account is already linked")
            self._users[user.id] = user.model_copy()
        return user.model_copy()

    async def aclose(self) -> None:
        pass


class LocalHistoryStore(HistoryStore):
    """In-process history documents, writes serialized per user."""

    def __init__(self) -> None:
        self._histories: dict[str, ChatHistory] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_history(self, user_id: str) -> ChatHistory | None:
        history = self._histories.get(user_id)
        return history.model_copy(deep=True) if history else None

    async def add_conversation(self, user_id: str) -> Conversation:
        async with self._locks[user_id]:
            history = self._load_or_create(user_id)
            conversation = Conversation(id=new_conversation_id())
            history.conversations.append(conversation)
            return conversation.model_copy(deep=True)

    async def append_exchange(
        self,
        user_id: str,
        conversation_id: str,
        request: Message,
        response: Message,
    ) -> Conversation:
        async with self._locks[user_id]:
            history = self._load_or_create(user_id)
            conversation = history.find(conversation_id)
            if conversation is None:
                conversation = Conversation(id=new_conversation_id())
                history.conversations.append(conversation)
            conversation.messages.extend((request, response))
            return conversation.model_copy(deep=True)

    def _load_or_create(self, user_id: str) -> ChatHistory:
        history = self._histories.get(user_id)
        if history is None:
            history = ChatHistory(user_id=user_id)
            self._histories[user_id] = history
        return history

    async def aclose(self) -> None:
        self._histories.clear()
        self._locks.clear()
