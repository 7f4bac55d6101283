"""OpenTelemetry tracing helpers.

Only the API package is used here: when no SDK / exporter is installed
the tracer is a no-op, so spans cost nothing in local development.
Deployments that install ``opentelemetry-sdk`` and configure a provider
get the spans below for free.

Usage::

    from genchat.infra.telemetry import SPAN_LLM_COMPLETE, tracer

    with tracer.start_as_current_span(SPAN_LLM_COMPLETE) as span:
        ...
"""

from __future__ import annotations

from opentelemetry import trace

tracer = trace.get_tracer("genchat")

# ---------------------------------------------------------------------------
# Span names: single source of truth for all custom spans
# ---------------------------------------------------------------------------

SPAN_LLM_COMPLETE = "llm.complete"
SPAN_HISTORY_LOAD = "history.load"
SPAN_HISTORY_APPEND = "history.append"
SPAN_HISTORY_NEW_CONVERSATION = "history.new_conversation"
SPAN_GOOGLE_EXCHANGE = "oauth.google.exchange"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_USER_ID = "genchat.user_id"
ATTR_CONVERSATION_ID = "genchat.conversation_id"
ATTR_CONVERSATION_CREATED = "genchat.conversation_created"
ATTR_HISTORY_CONVERSATION_COUNT = "history.conversation_count"
ATTR_LLM_MODEL = "llm.model"
ATTR_LLM_PROMPT_LEN = "llm.prompt_len"
ATTR_LLM_RESPONSE_LEN = "llm.response_len"
