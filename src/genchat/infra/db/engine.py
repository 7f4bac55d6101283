"""Async SQLAlchemy engine and session factory.

``build_db`` is a lifespan builder: it creates the engine + session
factory, attaches them to ``app.state``, and disposes the engine on
shutdown.  Without ``third_party.postgres_uri`` it attaches ``None``
and the in-process store backends are used instead.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from genchat.configs.config import AppConfig, get_app_config
from genchat.configs.system import ThirdPartyConfig
from genchat.infra.lifespan import get_app

logger = logging.getLogger(__name__)


def create_engine(config: ThirdPartyConfig) -> AsyncEngine:
    """Create the pooled async engine for ``config.postgres_uri``."""
    if not config.postgres_uri:
        raise ValueError("third_party.postgres_uri is not configured")
    return create_async_engine(
        config.postgres_uri,
        pool_pre_ping=True,
        pool_size=config.postgres_pool_size,
        max_overflow=config.postgres_max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Lifespan builder
# ---------------------------------------------------------------------------


async def build_db(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create engine + session factory, attach to ``app.state``."""
    if not config.third_party.postgres_uri:
        app.state.engine = None
        app.state.session_factory = None
        yield
        return

    engine = create_engine(config.third_party)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database engine created for %s", engine.url.render_as_string())
    yield
    await engine.dispose()
