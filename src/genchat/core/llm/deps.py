"""LLM client construction and FastAPI dependencies.

The chat model is built **once** per process by ``build_llm`` and
shared by every request through ``app.state``.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from genchat.configs.config import AppConfig, get_app_config, get_llm_config
from genchat.configs.system import LLMConfig
from genchat.infra.lifespan import get_app

from .completion import CompletionClient

logger = logging.getLogger(__name__)


def create_llm(config: LLMConfig) -> ChatOpenAI:
    """Create a ChatOpenAI instance for an OpenAI-compatible endpoint.

    ``max_retries=0``: a failed completion fails the request; the user
    decides whether to retry.
    """
    api_key = config.api_key.get_secret_value() if config.api_key else "unused"
    return ChatOpenAI(
        base_url=config.endpoint,
        api_key=api_key,
        model=config.model_name,
        temperature=config.temperature,
        top_p=config.top_p,
        max_tokens=config.max_tokens,
        timeout=config.timeout.total_seconds(),
        max_retries=0,
    )


async def build_llm(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Lifespan builder: attach the shared chat model to ``app.state``."""
    if config.llm.api_key is None:
        logger.warning("llm.api_key is not set; completions will likely fail.")
    app.state.llm = create_llm(config.llm)
    yield


def get_llm(request: Request) -> BaseChatModel:
    """FastAPI dependency: reads from ``app.state``."""
    return request.app.state.llm


def get_completion_client(
    llm: Annotated[BaseChatModel, Depends(get_llm)],
    config: Annotated[LLMConfig, Depends(get_llm_config)],
) -> CompletionClient:
    return CompletionClient(
        llm,
        timeout=config.timeout.total_seconds(),
        model_name=config.model_name,
    )
