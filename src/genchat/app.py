"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from genchat.api.auth import router as auth_router
from genchat.api.chat import router as chat_router
from genchat.api.exceptions import register_exception_handlers
from genchat.api.health import router as health_router
from genchat.configs.config import AppConfig, get_app_config
from genchat.core.auth.google import build_google_client
from genchat.core.llm import build_llm
from genchat.infra.lifespan import inject
from genchat.infra.logging import setup_logging
from genchat.infra.store import build_store


@inject
async def lifespan(
    app: FastAPI,
    _store: Annotated[None, Depends(build_store)],
    _llm: Annotated[None, Depends(build_llm)],
    _google: Annotated[None, Depends(build_google_client)],
) -> AsyncGenerator[None, None]:
    """Shared resources live for the whole process; see the builders."""
    yield


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``config`` only drives construction-time settings (CORS); runtime
    resources are built in the lifespan from ``get_app_config``.
    """
    if config is None:
        config = get_app_config()

    app = FastAPI(
        title="genchat",
        description="Generative-AI chat with per-user conversation history",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(chat_router)

    return app


def create_app() -> FastAPI:
    """Process entry point: configure logging, then build the app.

    Run with ``uvicorn genchat.app:create_app --factory``.
    """
    config = get_app_config()
    setup_logging(config.logging)
    return get_app(config)


def main() -> None:
    """Console entry point (``genchat``)."""
    import uvicorn

    config = get_app_config()
    uvicorn.run(
        "genchat.app:create_app",
        factory=True,
        host=config.api.host,
        port=config.api.port,
    )
