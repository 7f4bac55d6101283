"""Single-shot text completion over a LangChain chat model."""

import asyncio
import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from genchat.core.exceptions import UpstreamError
from genchat.infra.telemetry import (
    ATTR_LLM_MODEL,
    ATTR_LLM_PROMPT_LEN,
    ATTR_LLM_RESPONSE_LEN,
    SPAN_LLM_COMPLETE,
    tracer,
)

logger = logging.getLogger(__name__)


class CompletionClient:
    """Prompt in, text out.

    One attempt per call: any model error, an empty answer, or running
    past ``timeout`` seconds raises ``UpstreamError``.
    """

    def __init__(self, llm: BaseChatModel, timeout: float, model_name: str = "") -> None:
        self._llm = llm
        self._timeout = timeout
        self._model_name = model_name

    async def complete(self, prompt: str) -> str:
        with tracer.start_as_current_span(SPAN_LLM_COMPLETE) as span:
            span.set_attribute(ATTR_LLM_MODEL, self._model_name)
            span.set_attribute(ATTR_LLM_PROMPT_LEN, len(prompt))
            try:
                async with asyncio.timeout(self._timeout):
                    result = await self._llm.ainvoke([HumanMessage(content=prompt)])
            except TimeoutError as exc:
                logger.warning("Completion timed out after %.1fs", self._timeout)
                raise UpstreamError() from exc
            except Exception as exc:
                logger.warning("Completion failed: %s", exc, exc_info=True)
                raise UpstreamError() from exc

            text = _content_text(result.content)
            if not text:
                logger.warning("Completion returned no text")
                raise UpstreamError()
            span.set_attribute(ATTR_LLM_RESPONSE_LEN, len(text))
            return text


def _content_text(content: str | list) -> str:
    """Flatten message content (plain string or content blocks) to text."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
