"""Delegated-invocation runtime: handlers, progress, process control."""

from subagents.runtime.cancellation import CancellationToken
from subagents.runtime.cursor import (
    CANCELLED_TEXT,
    MODEL_MAP,
    NO_OUTPUT_TEXT,
    CursorAgentRuntime,
    CursorInvocation,
    InvocationState,
    build_args,
    resolve_model,
)
from subagents.runtime.handlers import (
    AssistantMessageHandler,
    Effect,
    ProgressUpdate,
    default_handlers,
)
from subagents.runtime.processor import HandlerPipeline
from subagents.runtime.progress import ProgressNotification, ProgressReporter
from subagents.runtime.registry import build_runtimes, get_runtime
from subagents.runtime.types import (
    TIERS,
    AgentRuntime,
    ExecutionResult,
    InvocationRequest,
    Tier,
)

__all__ = [
    "CANCELLED_TEXT",
    "MODEL_MAP",
    "NO_OUTPUT_TEXT",
    "TIERS",
    "AgentRuntime",
    "AssistantMessageHandler",
    "CancellationToken",
    "CursorAgentRuntime",
    "CursorInvocation",
    "Effect",
    "ExecutionResult",
    "HandlerPipeline",
    "InvocationRequest",
    "InvocationState",
    "ProgressNotification",
    "ProgressReporter",
    "ProgressUpdate",
    "Tier",
    "build_args",
    "build_runtimes",
    "default_handlers",
    "get_runtime",
    "resolve_model",
]
