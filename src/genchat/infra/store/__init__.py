"""Credential and conversation stores.

``build_store`` is a lifespan builder that picks the backend:

* SQL (``SqlUserStore`` / ``SqlHistoryStore``) when ``build_db`` attached
  a session factory.
* Local (``LocalUserStore`` / ``LocalHistoryStore``) otherwise; data
  lives only as long as the process.

Per-request dependencies read the chosen backends from ``app.state``.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from genchat.infra.db import build_db
from genchat.infra.lifespan import get_app

from .base import HistoryStore, UserStore
from .local_backend import LocalHistoryStore, LocalUserStore
from .sql_backend import SqlHistoryStore, SqlUserStore

logger = logging.getLogger(__name__)


async def build_store(
    app: Annotated[FastAPI, Depends(get_app)],
    _db: Annotated[None, Depends(build_db)],
) -> AsyncGenerator[None, None]:
    """Attach ``user_store`` and ``history_store`` to ``app.state``.

    Depends on ``build_db`` so the session factory (or ``None``) is in
    place before the backend is chosen.
    """
    session_factory = app.state.session_factory
    if session_factory is not None:
        users: UserStore = SqlUserStore(session_factory)
        histories: HistoryStore = SqlHistoryStore(session_factory)
    else:
        logger.warning(
            "No database configured -- falling back to the in-process store; "
            "data will not survive a restart."
        )
        users = LocalUserStore()
        histories = LocalHistoryStore()

    app.state.user_store = users
    app.state.history_store = histories
    yield
    await histories.aclose()
    await users.aclose()


def get_user_store(request: Request) -> UserStore:
    """FastAPI dependency: reads from ``app.state``."""
    return request.app.state.user_store


def get_history_store(request: Request) -> HistoryStore:
    """FastAPI dependency: reads from ``app.state``."""
    return request.app.state.history_store


__all__ = [
    "build_store",
    "get_history_store",
    "get_user_store",
    "HistoryStore",
    "LocalHistoryStore",
    "LocalUserStore",
    "SqlHistoryStore",
    "SqlUserStore",
    "UserStore",
]
