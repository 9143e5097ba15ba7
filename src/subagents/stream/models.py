"""Pydantic v2 models for the ``cursor-agent`` stream-json output.

The shapes below are derived from observed output and are best-effort.
Two schema generations are accepted: the current one (edit, delete and
semantic-search tool calls, ``timestamp_ms`` markers) and the older,
narrower one.  Every field that differs between them is optional, and
unknown keys are kept so they take part in duplicate detection.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator
from pydantic.alias_generators import to_camel

# ------------------------------------------------------------------ #
# Tool call payloads (camelCase on the wire)
# ------------------------------------------------------------------ #


class _PayloadBase(BaseModel):
    """Common config for tool-call payload parts."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ReadRange(_PayloadBase):
    start_line: int
    end_line: int


class ReadToolCallArgs(_PayloadBase):
    path: str
    offset: int | None = None
    limit: int | None = None


class ReadToolCallSuccess(_PayloadBase):
    content: str = ""
    is_empty: bool = False
    exceeded_limit: bool = False
    total_lines: int = 0
    total_chars: int | None = None
    file_size: int | None = None
    path: str | None = None
    read_range: ReadRange | None = None


class ReadToolCallResult(_PayloadBase):
    success: ReadToolCallSuccess | None = None


class ReadToolCall(_PayloadBase):
    args: ReadToolCallArgs
    result: ReadToolCallResult | None = None


class WriteToolCallArgs(_PayloadBase):
    path: str
    file_text: str = ""
    tool_call_id: str | None = None


class WriteToolCallSuccess(_PayloadBase):
    path: str
    lines_created: int = 0
    file_size: int = 0


class WriteToolCallResult(_PayloadBase):
    success: WriteToolCallSuccess | None = None


class WriteToolCall(_PayloadBase):
    args: WriteToolCallArgs
    result: WriteToolCallResult | None = None


class EditToolCallArgs(_PayloadBase):
    path: str
    stream_content: str = ""


class EditToolCallSuccess(_PayloadBase):
    path: str
    lines_added: int = 0
    lines_removed: int = 0
    diff_string: str = ""
    after_full_file_content: str | None = None
    message: str | None = None


class EditToolCallResult(_PayloadBase):
    success: EditToolCallSuccess | None = None


class EditToolCall(_PayloadBase):
    args: EditToolCallArgs
    result: EditToolCallResult | None = None


class DeleteToolCallArgs(_PayloadBase):
    path: str
    tool_call_id: str | None = None


class DeleteToolCallSuccess(_PayloadBase):
    path: str
    message: str | None = None


class DeleteToolCallRejection(_PayloadBase):
    path: str
    reason: str = ""


class DeleteToolCallResult(_PayloadBase):
    """Either ``success`` or ``rejected`` is populated."""

    success: DeleteToolCallSuccess | None = None
    rejected: DeleteToolCallRejection | None = None

    @property
    def is_rejected(self) -> bool:
        return self.rejected is not None


class DeleteToolCall(_PayloadBase):
    args: DeleteToolCallArgs
    result: DeleteToolCallResult | None = None


class SemSearchToolCallArgs(_PayloadBase):
    query: str
    target_directories: list[str] = Field(default_factory=list)
    explanation: str | None = None


class SemSearchToolCallSuccess(_PayloadBase):
    results: str = ""


class SemSearchToolCallResult(_PayloadBase):
    success: SemSearchToolCallSuccess | None = None


class SemSearchToolCall(_PayloadBase):
    args: SemSearchToolCallArgs
    result: SemSearchToolCallResult | None = None


class FunctionCall(_PayloadBase):
    name: str
    arguments: str = ""


#: Wire keys of the known payload variants, in declaration order.
TOOL_VARIANT_KEYS = (
    "readToolCall",
    "writeToolCall",
    "editToolCall",
    "deleteToolCall",
    "semSearchToolCall",
    "function",
)


class ToolCallPayload(_PayloadBase):
    """Tagged union keyed by the single populated variant key.

    Payloads for tools this model does not know about (e.g. a newer
    backend's ``grepToolCall``) are accepted and kept as extra keys.
    """

    read_tool_call: ReadToolCall | None = None
    write_tool_call: WriteToolCall | None = None
    edit_tool_call: EditToolCall | None = None
    delete_tool_call: DeleteToolCall | None = None
    sem_search_tool_call: SemSearchToolCall | None = None
    function: FunctionCall | None = None

    @model_validator(mode="after")
    def _require_variant(self) -> ToolCallPayload:
        if not self.variant_keys:
            msg = "Tool call payload has no populated variant"
            raise ValueError(msg)
        return self

    @property
    def variant_keys(self) -> list[str]:
        """Wire keys of every populated variant, known ones first."""
        known = [
            key
            for key in TOOL_VARIANT_KEYS
            if getattr(self, _field_for_key(key)) is not None
        ]
        return known + list(self.model_extra or {})

    @property
    def tool_name(self) -> str:
        """Variant tag, or the declared name for generic function calls."""
        for key in self.variant_keys:
            if key != "function":
                return key
        if self.function is not None and self.function.name:
            return self.function.name
        return "unknown"


def _field_for_key(key: str) -> str:
    if key == "function":
        return key
    return "".join("_" + c.lower() if c.isupper() else c for c in key)


# ------------------------------------------------------------------ #
# Stream events (snake_case on the wire)
# ------------------------------------------------------------------ #


class _StreamEventBase(BaseModel):
    """Envelope fields shared by every stream record."""

    model_config = ConfigDict(
        populate_by_name=True, extra="allow", protected_namespaces=()
    )

    session_id: str | None = None


class TextContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "text"
    text: str = ""


class UserMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Literal["user"] = "user"
    content: list[TextContent] = Field(default_factory=list)


class AssistantMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Literal["assistant"] = "assistant"
    content: list[TextContent] = Field(default_factory=list)


class SystemInitEvent(_StreamEventBase):
    """Session metadata, emitted once at startup."""

    type: Literal["system"] = "system"
    subtype: str | None = None
    api_key_source: str | None = Field(default=None, alias="apiKeySource")
    cwd: str | None = None
    model: str | None = None
    permission_mode: str | None = Field(default=None, alias="permissionMode")


class UserMessageEvent(_StreamEventBase):
    type: Literal["user"] = "user"
    message: UserMessage


class AssistantMessageEvent(_StreamEventBase):
    """Assistant output; partial when it carries a ``timestamp_ms`` marker."""

    type: Literal["assistant"] = "assistant"
    message: AssistantMessage
    timestamp_ms: float | None = None

    @property
    def is_partial(self) -> bool:
        return bool(self.timestamp_ms)

    @property
    def text(self) -> str:
        return "".join(block.text for block in self.message.content)


class ToolCallStartedEvent(_StreamEventBase):
    type: Literal["tool_call"] = "tool_call"
    subtype: Literal["started"] = "started"
    call_id: str
    model_call_id: str | None = None
    tool_call: ToolCallPayload
    timestamp_ms: float | None = None


class ToolCallCompletedEvent(_StreamEventBase):
    type: Literal["tool_call"] = "tool_call"
    subtype: Literal["completed"] = "completed"
    call_id: str
    model_call_id: str | None = None
    tool_call: ToolCallPayload
    timestamp_ms: float | None = None


class ThinkingEvent(_StreamEventBase):
    """Reasoning activity; ``subtype="delta"`` records carry the text."""

    type: Literal["thinking"] = "thinking"
    subtype: str | None = None
    text: str | None = None
    timestamp_ms: float | None = None


class ResultEvent(_StreamEventBase):
    """Terminal success record with the aggregated final text."""

    type: Literal["result"] = "result"
    subtype: str = "success"
    is_error: bool = False
    duration_ms: float | None = None
    duration_api_ms: float | None = None
    result: str = ""
    request_id: str | None = None


ToolCallEvent = ToolCallStartedEvent | ToolCallCompletedEvent


def _event_discriminator(v: Any) -> str:
    """Extract the tag from raw data or a model instance.

    ``tool_call`` records are told apart by their subtype.
    """
    if isinstance(v, dict):
        event_type = v.get("type")
        subtype = v.get("subtype")
    else:
        event_type = getattr(v, "type", None)
        subtype = getattr(v, "subtype", None)
    if event_type == "tool_call":
        return f"tool_call.{subtype}"
    return str(event_type)


StreamEvent = Annotated[
    Annotated[SystemInitEvent, Tag("system")]
    | Annotated[UserMessageEvent, Tag("user")]
    | Annotated[AssistantMessageEvent, Tag("assistant")]
    | Annotated[ToolCallStartedEvent, Tag("tool_call.started")]
    | Annotated[ToolCallCompletedEvent, Tag("tool_call.completed")]
    | Annotated[ThinkingEvent, Tag("thinking")]
    | Annotated[ResultEvent, Tag("result")],
    Discriminator(_event_discriminator),
]
"""Discriminated union of all stream record types."""
