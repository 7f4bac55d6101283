"""Chat and conversation-history routes.

Every route acts on behalf of ``userId`` and requires the session
cookie of that same user.
"""

from fastapi import APIRouter

from .deps import ChatOrchestratorDep, HistoryServiceDep, SessionUserDep, ensure_owner
from .models import (
    ChatRequest,
    ChatResponse,
    ConversationListResponse,
    ConversationLookupRequest,
    ConversationLookupResponse,
    ConversationSummaryResponse,
    NewConversationResponse,
    SummaryListResponse,
)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    session_user_id: SessionUserDep,
    orchestrator: ChatOrchestratorDep,
) -> ChatResponse:
    """Send ``question`` to the model and record the exchange.

    The response names the conversation that received the exchange; a
    client continuing a conversation should send that id next time.
    """
    ensure_owner(session_user_id, body.user_id)
    result = await orchestrator.handle_chat(
        body.question, body.user_id, body.message_id
    )
    return ChatResponse(
        ai_response=result.assistant_text,
        conversation_id=result.conversation_id,
    )


@router.get("/chat/history/{user_id}", response_model=ConversationListResponse)
async def chat_history(
    user_id: str, session_user_id: SessionUserDep, history: HistoryServiceDep
) -> ConversationListResponse:
    ensure_owner(session_user_id, user_id)
    return ConversationListResponse(conversations=await history.get_history(user_id))


@router.get("/chat/summaries/{user_id}", response_model=SummaryListResponse)
async def chat_summaries(
    user_id: str, session_user_id: SessionUserDep, history: HistoryServiceDep
) -> SummaryListResponse:
    ensure_owner(session_user_id, user_id)
    summaries = await history.list_summaries(user_id)
    return SummaryListResponse(
        conversations=[
            ConversationSummaryResponse(**s.model_dump()) for s in summaries
        ]
    )


@router.post("/chat/new/{user_id}", response_model=NewConversationResponse)
async def new_conversation(
    user_id: str, session_user_id: SessionUserDep, history: HistoryServiceDep
) -> NewConversationResponse:
    ensure_owner(session_user_id, user_id)
    conversation, user = await history.start_conversation(user_id)
    return NewConversationResponse(conversation=conversation, name=user.name)


@router.post("/user/history/{user_id}", response_model=ConversationLookupResponse)
async def conversation_lookup(
    user_id: str,
    body: ConversationLookupRequest,
    session_user_id: SessionUserDep,
    history: HistoryServiceDep,
) -> ConversationLookupResponse:
    ensure_owner(session_user_id, user_id)
    conversation = await history.get_conversation(user_id, body.message_id)
    return ConversationLookupResponse(data=conversation)
