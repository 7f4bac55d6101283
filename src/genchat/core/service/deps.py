"""FastAPI dependency factories for the services.

Services are cheap per-request objects; the expensive collaborators
they wrap (stores, LLM client) are process-wide and live on
``app.state``.
"""

from typing import Annotated

from fastapi import Depends

from genchat.configs.config import get_auth_config, get_google_config
from genchat.configs.system import AuthConfig, GoogleOAuthConfig
from genchat.core.llm import CompletionClient, get_completion_client
from genchat.infra.store import (
    HistoryStore,
    UserStore,
    get_history_store,
    get_user_store,
)

from .auth import AuthService
from .chat import ChatOrchestrator
from .history import HistoryService


def get_auth_service(
    users: Annotated[UserStore, Depends(get_user_store)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
    google_config: Annotated[GoogleOAuthConfig, Depends(get_google_config)],
) -> AuthService:
    return AuthService(users, config, google_config)


def get_history_service(
    users: Annotated[UserStore, Depends(get_user_store)],
    histories: Annotated[HistoryStore, Depends(get_history_store)],
) -> HistoryService:
    return HistoryService(users, histories)


def get_chat_orchestrator(
    completion: Annotated[CompletionClient, Depends(get_completion_client)],
    histories: Annotated[HistoryStore, Depends(get_history_store)],
    history_service: Annotated[HistoryService, Depends(get_history_service)],
) -> ChatOrchestrator:
    return ChatOrchestrator(completion, histories, history_service)
