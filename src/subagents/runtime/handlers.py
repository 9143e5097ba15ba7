"""Stream event handlers.

Each handler looks at one event and returns an ``Effect`` (a progress
update and/or a final-result contribution) or ``None`` when the event is
not its concern.  Handlers never mutate events.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from subagents.stream.models import (
    AssistantMessageEvent,
    ResultEvent,
    StreamEvent,
    ThinkingEvent,
    ToolCallCompletedEvent,
    ToolCallEvent,
    ToolCallStartedEvent,
)

#: Status shown while partial assistant output has no visible line yet.
PROCESSING_PLACEHOLDER = "Processing..."

THINKING_STATUS = "thinking..."


@dataclass(frozen=True)
class ProgressUpdate:
    message: str
    increase_progress: bool = False
    increase_total: bool = False


@dataclass(frozen=True)
class Effect:
    progress: ProgressUpdate | None = None
    final_result: str | None = None


Handler = Callable[[StreamEvent], Effect | None]


def tool_name(event: ToolCallEvent) -> str:
    return event.tool_call.tool_name


def thinking_handler(event: StreamEvent) -> Effect | None:
    if not isinstance(event, ThinkingEvent):
        return None
    return Effect(progress=ProgressUpdate(THINKING_STATUS))


@dataclass
class AssistantBuffer:
    """Running text of the partial assistant message being streamed."""

    text: str = ""

    def append(self, fragment: str) -> None:
        self.text += fragment

    def reset(self) -> None:
        self.text = ""

    def last_line(self) -> str | None:
        lines = [line for line in self.text.split("\n") if line]
        return lines[-1] if lines else None


class AssistantMessageHandler:
    """Turns partial assistant output into status lines.

    Partial messages (those with a ``timestamp_ms`` marker) are appended to
    the buffer and the last non-empty buffered line becomes the status.
    A final message becomes both the status and the final result, and is
    not appended.  Any other event, except the terminal result record,
    resets the buffer.

    One instance per invocation; the buffer must not be shared.
    """

    def __init__(self) -> None:
        self.buffer = AssistantBuffer()

    def __call__(self, event: StreamEvent) -> Effect | None:
        if not isinstance(event, AssistantMessageEvent):
            if not isinstance(event, ResultEvent):
                self.buffer.reset()
            return None

        text = event.text
        if event.is_partial:
            self.buffer.append(text)
            status = self.buffer.last_line() or PROCESSING_PLACEHOLDER
            return Effect(progress=ProgressUpdate(status))

        return Effect(progress=ProgressUpdate(text), final_result=text)


def tool_call_started_handler(event: StreamEvent) -> Effect | None:
    if not isinstance(event, ToolCallStartedEvent):
        return None
    return Effect(
        progress=ProgressUpdate(f"Calling {tool_name(event)}", increase_total=True)
    )


def tool_call_completed_handler(event: StreamEvent) -> Effect | None:
    if not isinstance(event, ToolCallCompletedEvent):
        return None
    return Effect(
        progress=ProgressUpdate(
            f"Completed {tool_name(event)}", increase_progress=True
        )
    )


def default_handlers() -> list[Handler]:
    """Fresh handler list for one invocation, in dispatch order."""
    return [
        thinking_handler,
        AssistantMessageHandler(),
        tool_call_started_handler,
        tool_call_completed_handler,
    ]
