"""Chat orchestrator: prompt → completion → persisted message pair."""

import logging
from dataclasses import dataclass

from genchat.core.llm.completion import CompletionClient
from genchat.core.models import make_exchange
from genchat.infra.store.base import HistoryStore

from .history import HistoryService
from .validation import require

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatResult:
    """Assistant text plus the id of the conversation that received the pair.

    ``conversation_id`` differs from the requested id when a new
    conversation had to be created.
    """

    assistant_text: str
    conversation_id: str


class ChatOrchestrator:
    """Runs one chat round-trip for a user."""

    def __init__(
        self,
        completion: CompletionClient,
        histories: HistoryStore,
        history_service: HistoryService,
    ) -> None:
        self._completion = completion
        self._histories = histories
        self._history_service = history_service

    async def handle_chat(
        self, prompt: str | None, user_id: str | None, conversation_id: str | None
    ) -> ChatResult:
        """Ask the model, then append the exchange to the conversation.

        Raises:
            ValidationError: a required field is missing or blank.
            NotFoundError: ``user_id`` is unknown.
            UpstreamError: the completion call failed; nothing is stored.
            PersistenceError: the store rejected the write.
        """
        require(question=prompt, userId=user_id, messageId=conversation_id)
        await self._history_service.require_user(user_id)

        answer = await self._completion.complete(prompt)

        request, response = make_exchange(prompt, answer)
        conversation = await self._histories.append_exchange(
            user_id, conversation_id, request, response
        )
        if conversation.id != conversation_id:
            logger.info(
                "Conversation %s not found for user %s; created %s",
                conversation_id,
                user_id,
                conversation.id,
            )
        return ChatResult(assistant_text=answer, conversation_id=conversation.id)
