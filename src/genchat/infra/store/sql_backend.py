"""SQL store backends over async SQLAlchemy.

Appends never rewrite the history document: the message pair is
inserted as two rows inside one transaction, so concurrent chats on
the same conversation cannot overwrite each other.  History creation
is insert-or-reselect on the unique ``chat_histories.user_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from genchat.core.exceptions import DuplicateEmailError, PersistenceError
from genchat.core.models import ChatHistory, Conversation, Message, User
from genchat.infra.db.converters import (
    message_to_row,
    row_to_conversation,
    row_to_history,
    row_to_user,
    user_to_row,
)
from genchat.infra.db.models import ChatHistoryRow, ConversationRow, UserRow
from genchat.infra.id_utils import new_conversation_id
from genchat.infra.telemetry import (
    ATTR_CONVERSATION_CREATED,
    ATTR_CONVERSATION_ID,
    ATTR_HISTORY_CONVERSATION_COUNT,
    ATTR_USER_ID,
    SPAN_HISTORY_APPEND,
    SPAN_HISTORY_LOAD,
    SPAN_HISTORY_NEW_CONVERSATION,
    tracer,
)

from .base import HistoryStore, UserStore

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate driver/ORM failures into ``PersistenceError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store operation %r failed", operation, exc_info=True)
        raise PersistenceError() from exc


class SqlUserStore(UserStore):
    """Users table access."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: str) -> User | None:
        with _store_errors("get user"):
            async with self._session_factory() as session:
                row = await session.get(UserRow, user_id)
        return row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        return await self._get_one(UserRow.email == email)

    async def get_by_google_id(self, google_id: str) -> User | None:
        return await self._get_one(UserRow.google_id == google_id)

    async def _get_one(self, clause) -> User | None:
        with _store_errors("find user"):
            async with self._session_factory() as session:
                row = await session.scalar(select(UserRow).where(clause))
        return row_to_user(row) if row else None

    async def create(self, user: User) -> User:
        try:
            async with self._session_factory() as session:
                session.add(user_to_row(user))
                await session.commit()
        except IntegrityError as exc:
            if await self.get_by_email(user.email) is not None:
                raise DuplicateEmailError() from exc
            if (
                user.google_id is not None
                and await self.get_by_google_id(user.google_id) is not None
            ):
                raise PersistenceError("Google account is already linked") from exc
            logger.error("Failed to create user %s", user.id, exc_info=True)
            raise PersistenceError() from exc
        except SQLAlchemyError as exc:
            logger.error("Failed to create user %s", user.id, exc_info=True)
            raise PersistenceError() from exc
        return user

    async def aclose(self) -> None:
        pass


class SqlHistoryStore(HistoryStore):
    """Chat history tables access."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_history(self, user_id: str) -> ChatHistory | None:
        with tracer.start_as_current_span(SPAN_HISTORY_LOAD) as span:
            span.set_attribute(ATTR_USER_ID, user_id)
            with _store_errors("load history"):
                async with self._session_factory() as session:
                    row = await session.scalar(
                        select(ChatHistoryRow)
                        .where(ChatHistoryRow.user_id == user_id)
                        .options(
                            selectinload(ChatHistoryRow.conversations).selectinload(
                                ConversationRow.messages
                            )
                        )
                    )
                    history = row_to_history(row) if row else None
            if history is not None:
                span.set_attribute(
                    ATTR_HISTORY_CONVERSATION_COUNT, len(history.conversations)
                )
            return history

    async def add_conversation(self, user_id: str) -> Conversation:
        with tracer.start_as_current_span(SPAN_HISTORY_NEW_CONVERSATION) as span:
            span.set_attribute(ATTR_USER_ID, user_id)
            history_pk = await self._history_pk(user_id)
            conversation_id = new_conversation_id()
            with _store_errors("add conversation"):
                async with self._session_factory() as session:
                    session.add(
                        ConversationRow(
                            conversation_id=conversation_id, history_id=history_pk
                        )
                    )
                    await session.commit()
            span.set_attribute(ATTR_CONVERSATION_ID, conversation_id)
            return Conversation(id=conversation_id)

    async def append_exchange(
        self,
        user_id: str,
        conversation_id: str,
        request: Message,
        response: Message,
    ) -> Conversation:
        with tracer.start_as_current_span(SPAN_HISTORY_APPEND) as span:
            span.set_attribute(ATTR_USER_ID, user_id)
            history_pk = await self._history_pk(user_id)
            with _store_errors("append exchange"):
                async with self._session_factory() as session:
                    async with session.begin():
                        conversation = await session.scalar(
                            select(ConversationRow).where(
                                ConversationRow.history_id == history_pk,
                                ConversationRow.conversation_id == conversation_id,
                            )
                        )
                        created = conversation is None
                        if conversation is None:
                            conversation = ConversationRow(
                                conversation_id=new_conversation_id(),
                                history_id=history_pk,
                            )
                            session.add(conversation)
                            await session.flush()
                        # Two adds, flushed in order: ids follow request → response.
                        session.add(message_to_row(request, conversation.id))
                        session.add(message_to_row(response, conversation.id))
                    conversation_pk = conversation.id
                    public_id = conversation.conversation_id

                async with self._session_factory() as session:
                    row = await session.scalar(
                        select(ConversationRow)
                        .where(ConversationRow.id == conversation_pk)
                        .options(selectinload(ConversationRow.messages))
                    )
                    result = row_to_conversation(row)
            span.set_attribute(ATTR_CONVERSATION_ID, public_id)
            span.set_attribute(ATTR_CONVERSATION_CREATED, created)
            return result

    async def _history_pk(self, user_id: str) -> int:
        """Primary key of the user's history row, creating it if absent."""
        query = select(ChatHistoryRow.id).where(ChatHistoryRow.user_id == user_id)
        with _store_errors("load-or-create history"):
            async with self._session_factory() as session:
                pk = await session.scalar(query)
                if pk is not None:
                    return pk
                row = ChatHistoryRow(user_id=user_id)
                session.add(row)
                try:
                    await session.commit()
                    return row.id
                except IntegrityError:
                    # Lost the creation race, or the user does not exist.
                    await session.rollback()
                    pk = await session.scalar(query)
                    if pk is None:
                        raise
                    return pk

    async def aclose(self) -> None:
        pass
