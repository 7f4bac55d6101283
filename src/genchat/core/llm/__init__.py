"""Text-completion client over a LangChain chat model."""

from .completion import CompletionClient  # noqa: F401
from .deps import build_llm, create_llm, get_completion_client, get_llm  # noqa: F401
