"""Stream-json parsing — event models, line framing, decoding, dedup."""

from subagents.stream.decoder import decode_line
from subagents.stream.dedup import Deduplicator, canonical_key
from subagents.stream.framing import LineFramer
from subagents.stream.models import (
    AssistantMessageEvent,
    ResultEvent,
    StreamEvent,
    SystemInitEvent,
    ThinkingEvent,
    ToolCallCompletedEvent,
    ToolCallEvent,
    ToolCallPayload,
    ToolCallStartedEvent,
    UserMessageEvent,
)

__all__ = [
    "AssistantMessageEvent",
    "Deduplicator",
    "LineFramer",
    "ResultEvent",
    "StreamEvent",
    "SystemInitEvent",
    "ThinkingEvent",
    "ToolCallCompletedEvent",
    "ToolCallEvent",
    "ToolCallPayload",
    "ToolCallStartedEvent",
    "UserMessageEvent",
    "canonical_key",
    "decode_line",
]
