"""Tests for the stream-json event models across schema generations."""

from __future__ import annotations

import json
from typing import Any

import pytest
from pydantic import ValidationError

from subagents.stream.decoder import decode_line
from subagents.stream.models import (
    AssistantMessageEvent,
    DeleteToolCall,
    EditToolCall,
    ReadToolCall,
    ResultEvent,
    SemSearchToolCall,
    SystemInitEvent,
    ThinkingEvent,
    ToolCallCompletedEvent,
    ToolCallPayload,
    ToolCallStartedEvent,
    UserMessageEvent,
    WriteToolCall,
)

# ------------------------------------------------------------------ #
# Fixtures: current schema generation
# ------------------------------------------------------------------ #

CURRENT_SYSTEM_INIT = {
    "type": "system",
    "subtype": "init",
    "apiKeySource": "login",
    "cwd": "/repo",
    "session_id": "sess-1",
    "model": "Auto",
    "permissionMode": "default",
}

CURRENT_PARTIAL_ASSISTANT = {
    "type": "assistant",
    "message": {"role": "assistant", "content": [{"type": "text", "text": "Wor"}]},
    "session_id": "sess-1",
    "timestamp_ms": 1730000000123,
}

CURRENT_READ_COMPLETED = {
    "type": "tool_call",
    "subtype": "completed",
    "call_id": "call-1",
    "model_call_id": "mc-1",
    "session_id": "sess-1",
    "timestamp_ms": 1730000000456,
    "tool_call": {
        "readToolCall": {
            "args": {"path": "/repo/a.py", "offset": 10, "limit": 50},
            "result": {
                "success": {
                    "content": "print('hi')\n",
                    "isEmpty": False,
                    "exceededLimit": False,
                    "totalLines": 1,
                    "fileSize": 12,
                    "path": "/repo/a.py",
                    "readRange": {"startLine": 10, "endLine": 11},
                }
            },
        }
    },
}

CURRENT_EDIT_COMPLETED = {
    "type": "tool_call",
    "subtype": "completed",
    "call_id": "call-2",
    "session_id": "sess-1",
    "tool_call": {
        "editToolCall": {
            "args": {"path": "/repo/a.py", "streamContent": "x = 1\n"},
            "result": {
                "success": {
                    "path": "/repo/a.py",
                    "linesAdded": 3,
                    "linesRemoved": 1,
                    "diffString": "@@ -1 +1,3 @@",
                    "afterFullFileContent": "x = 1\n",
                    "message": "ok",
                }
            },
        }
    },
}

CURRENT_DELETE_REJECTED = {
    "type": "tool_call",
    "subtype": "completed",
    "call_id": "call-3",
    "session_id": "sess-1",
    "tool_call": {
        "deleteToolCall": {
            "args": {"path": "/repo/b.py", "toolCallId": "t-3"},
            "result": {"rejected": {"path": "/repo/b.py", "reason": "user declined"}},
        }
    },
}

CURRENT_SEM_SEARCH_STARTED = {
    "type": "tool_call",
    "subtype": "started",
    "call_id": "call-4",
    "session_id": "sess-1",
    "tool_call": {
        "semSearchToolCall": {
            "args": {
                "query": "where is auth handled",
                "targetDirectories": ["src"],
                "explanation": "find auth",
            }
        }
    },
}

CURRENT_THINKING_DELTA = {
    "type": "thinking",
    "subtype": "delta",
    "text": "considering options",
    "session_id": "sess-1",
    "timestamp_ms": 1730000000500,
}

CURRENT_RESULT = {
    "type": "result",
    "subtype": "success",
    "is_error": False,
    "duration_ms": 1234,
    "duration_api_ms": 1000,
    "result": "All done",
    "session_id": "sess-1",
    "request_id": "req-1",
}

# ------------------------------------------------------------------ #
# Fixtures: older, narrower schema generation
# ------------------------------------------------------------------ #

LEGACY_FINAL_ASSISTANT = {
    "type": "assistant",
    "message": {"role": "assistant", "content": [{"type": "text", "text": "Done"}]},
    "session_id": "sess-0",
}

LEGACY_READ_COMPLETED = {
    "type": "tool_call",
    "subtype": "completed",
    "call_id": "call-9",
    "session_id": "sess-0",
    "tool_call": {
        "readToolCall": {
            "args": {"path": "README.md"},
            "result": {
                "success": {
                    "content": "# hi",
                    "isEmpty": False,
                    "exceededLimit": False,
                    "totalLines": 1,
                    "totalChars": 4,
                }
            },
        }
    },
}

LEGACY_WRITE_STARTED = {
    "type": "tool_call",
    "subtype": "started",
    "call_id": "call-10",
    "session_id": "sess-0",
    "tool_call": {
        "writeToolCall": {
            "args": {"path": "out.txt", "fileText": "hello", "toolCallId": "t-10"}
        }
    },
}

LEGACY_USER = {
    "type": "user",
    "message": {"role": "user", "content": [{"type": "text", "text": "do it"}]},
    "session_id": "sess-0",
}


def _decode(record: dict[str, Any]) -> Any:
    return decode_line(json.dumps(record))


class TestCurrentGeneration:
    def test_system_init(self) -> None:
        event = _decode(CURRENT_SYSTEM_INIT)
        assert isinstance(event, SystemInitEvent)
        assert event.api_key_source == "login"
        assert event.permission_mode == "default"
        assert event.session_id == "sess-1"

    def test_partial_assistant(self) -> None:
        event = _decode(CURRENT_PARTIAL_ASSISTANT)
        assert isinstance(event, AssistantMessageEvent)
        assert event.is_partial
        assert event.text == "Wor"
        assert event.message.role == "assistant"

    def test_read_completed_with_range(self) -> None:
        event = _decode(CURRENT_READ_COMPLETED)
        assert isinstance(event, ToolCallCompletedEvent)
        read = event.tool_call.read_tool_call
        assert isinstance(read, ReadToolCall)
        assert read.args.offset == 10
        assert read.result is not None and read.result.success is not None
        assert read.result.success.total_lines == 1
        assert read.result.success.total_chars is None
        assert read.result.success.read_range is not None
        assert read.result.success.read_range.end_line == 11
        assert event.tool_call.tool_name == "readToolCall"

    def test_edit_completed(self) -> None:
        event = _decode(CURRENT_EDIT_COMPLETED)
        edit = event.tool_call.edit_tool_call
        assert isinstance(edit, EditToolCall)
        assert edit.args.stream_content == "x = 1\n"
        assert edit.result is not None and edit.result.success is not None
        assert edit.result.success.lines_added == 3
        assert edit.result.success.lines_removed == 1
        assert edit.result.success.diff_string.startswith("@@")

    def test_delete_rejected(self) -> None:
        event = _decode(CURRENT_DELETE_REJECTED)
        delete = event.tool_call.delete_tool_call
        assert isinstance(delete, DeleteToolCall)
        assert delete.result is not None
        assert delete.result.is_rejected
        assert delete.result.rejected is not None
        assert delete.result.rejected.reason == "user declined"

    def test_sem_search_started(self) -> None:
        event = _decode(CURRENT_SEM_SEARCH_STARTED)
        assert isinstance(event, ToolCallStartedEvent)
        search = event.tool_call.sem_search_tool_call
        assert isinstance(search, SemSearchToolCall)
        assert search.args.target_directories == ["src"]
        assert search.result is None

    def test_thinking_delta(self) -> None:
        event = _decode(CURRENT_THINKING_DELTA)
        assert isinstance(event, ThinkingEvent)
        assert event.text == "considering options"

    def test_result(self) -> None:
        event = _decode(CURRENT_RESULT)
        assert isinstance(event, ResultEvent)
        assert event.result == "All done"
        assert event.is_error is False


class TestLegacyGeneration:
    def test_final_assistant_without_timestamp(self) -> None:
        event = _decode(LEGACY_FINAL_ASSISTANT)
        assert isinstance(event, AssistantMessageEvent)
        assert not event.is_partial
        assert event.text == "Done"

    def test_read_completed_with_total_chars(self) -> None:
        event = _decode(LEGACY_READ_COMPLETED)
        read = event.tool_call.read_tool_call
        assert read is not None and read.result is not None
        assert read.result.success is not None
        assert read.result.success.total_chars == 4
        assert read.args.offset is None

    def test_write_started(self) -> None:
        event = _decode(LEGACY_WRITE_STARTED)
        write = event.tool_call.write_tool_call
        assert isinstance(write, WriteToolCall)
        assert write.args.file_text == "hello"
        assert event.tool_call.tool_name == "writeToolCall"

    def test_user_message(self) -> None:
        event = _decode(LEGACY_USER)
        assert isinstance(event, UserMessageEvent)
        assert event.message.content[0].text == "do it"

    def test_thinking_without_subtype_or_text(self) -> None:
        event = _decode({"type": "thinking", "session_id": "sess-0"})
        assert isinstance(event, ThinkingEvent)
        assert event.text is None


class TestToolCallPayload:
    def test_function_name(self) -> None:
        payload = ToolCallPayload.model_validate(
            {"function": {"name": "myFunction", "arguments": "{}"}}
        )
        assert payload.tool_name == "myFunction"
        assert payload.variant_keys == ["function"]

    def test_unknown_tool_key_is_kept(self) -> None:
        payload = ToolCallPayload.model_validate(
            {"grepToolCall": {"args": {"pattern": "TODO"}}}
        )
        assert payload.tool_name == "grepToolCall"
        assert payload.model_extra == {"grepToolCall": {"args": {"pattern": "TODO"}}}

    def test_function_without_name_falls_back(self) -> None:
        payload = ToolCallPayload.model_validate({"function": {"name": ""}})
        assert payload.tool_name == "unknown"

    def test_empty_payload_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ToolCallPayload.model_validate({})

    def test_extra_keys_survive_dump(self) -> None:
        record = dict(CURRENT_SYSTEM_INIT, newField={"nested": True})
        event = _decode(record)
        dumped = event.model_dump(mode="json", by_alias=True, exclude_unset=True)
        assert dumped["newField"] == {"nested": True}
        assert dumped["apiKeySource"] == "login"
