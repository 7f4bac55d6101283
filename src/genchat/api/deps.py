"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of manually
writing ``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias
corresponds to a single ``get_*`` factory and can be overridden in
tests via ``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends, Request

from genchat.configs.config import get_auth_config
from genchat.configs.system import AuthConfig
from genchat.core.auth.google import GoogleOAuthClient, get_google_client
from genchat.core.exceptions import ForbiddenError
from genchat.core.service.auth import AuthService
from genchat.core.service.chat import ChatOrchestrator
from genchat.core.service.deps import (
    get_auth_service,
    get_chat_orchestrator,
    get_history_service,
)
from genchat.core.service.history import HistoryService

AuthConfigDep = Annotated[AuthConfig, Depends(get_auth_config)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
HistoryServiceDep = Annotated[HistoryService, Depends(get_history_service)]
ChatOrchestratorDep = Annotated[ChatOrchestrator, Depends(get_chat_orchestrator)]
GoogleClientDep = Annotated[GoogleOAuthClient, Depends(get_google_client)]


def get_session_user_id(
    request: Request, auth: AuthServiceDep, config: AuthConfigDep
) -> str:
    """User id of the session cookie (401 when absent, 403 when invalid)."""
    return auth.authenticate(request.cookies.get(config.cookie_name))


SessionUserDep = Annotated[str, Depends(get_session_user_id)]


def ensure_owner(session_user_id: str, user_id: str | None) -> None:
    """Reject a session acting on another user's data.

    A missing ``user_id`` is left for the service to report as a
    validation error.
    """
    if user_id and user_id.strip() and user_id != session_user_id:
        raise ForbiddenError()
