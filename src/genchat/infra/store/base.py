"""Store interfaces: abstract backends for users and chat history.

Two concrete backends are provided for each interface:

* SQL: async SQLAlchemy over PostgreSQL (``sql_backend``).
* Local: in-process dictionaries guarded by ``asyncio`` locks
  (``local_backend``).  Used automatically when no database URI is
  configured.

Backends return domain models (``genchat.core.models``) and raise
``PersistenceError`` when the underlying store fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from genchat.core.models import ChatHistory, Conversation, Message, User


class UserStore(ABC):
    """Interface for the credential store."""

    @abstractmethod
    async def get(self, user_id: str) -> User | None:
        """Return the user with ``user_id``, or ``None``."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None:
        """Return the user registered under ``email``, or ``None``."""

    @abstractmethod
    async def get_by_google_id(self, google_id: str) -> User | None:
        """Return the user linked to a Google account, or ``None``."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user.

        Raises:
            DuplicateEmailError: when the email is already registered.
            PersistenceError: when the Google id is already linked to
                another user, or the write fails.
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release any resources held by the backend."""


class HistoryStore(ABC):
    """Interface for the per-user conversation store."""

    @abstractmethod
    async def get_history(self, user_id: str) -> ChatHistory | None:
        """Return the user's history, or ``None`` if none exists yet."""

    @abstractmethod
    async def add_conversation(self, user_id: str) -> Conversation:
        """Load-or-create the user's history and append an empty conversation."""

    @abstractmethod
    async def append_exchange(
        self,
        user_id: str,
        conversation_id: str,
        request: Message,
        response: Message,
    ) -> Conversation:
        """Atomically append one message pair.

        The pair goes to the user's conversation whose id equals
        ``conversation_id``.  When the user has no history, or no
        conversation matches, a new conversation with a freshly minted id
        is created to hold it.

        Returns:
            The conversation that received the pair, including the pair.
        """

    @abstractmethod
    async def aclose(self) -> None:
        """Release any resources held by the backend."""
