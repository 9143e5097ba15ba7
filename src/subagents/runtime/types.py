"""Shared runtime types: requests, results and the runtime protocol."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from subagents.constants import DEFAULT_TIER, TIERS, Tier
from subagents.runtime.cancellation import CancellationToken
from subagents.runtime.progress import ProgressReporter

__all__ = [
    "DEFAULT_TIER",
    "TIERS",
    "AgentRuntime",
    "ExecutionResult",
    "InvocationRequest",
    "Tier",
]


@dataclass(frozen=True)
class InvocationRequest:
    """Immutable input for one delegated run."""

    prompt: str
    cwd: Path
    model: str | None = None
    cancel: CancellationToken | None = None


class ExecutionResult(BaseModel):
    """Terminal outcome of an invocation.  Errors are plain text too."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Final answer or error description")
    is_error: bool = Field(default=False, description="Whether text is an error")

    @classmethod
    def success(cls, text: str) -> ExecutionResult:
        return cls(text=text)

    @classmethod
    def error(cls, text: str) -> ExecutionResult:
        return cls(text=text, is_error=True)

    def to_content(self) -> dict[str, Any]:
        """Tool-result shape: a single text content block plus an error flag."""
        payload: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            payload["isError"] = True
        return payload


@runtime_checkable
class AgentRuntime(Protocol):
    """A backend able to run one delegated prompt to completion."""

    name: str

    async def run(
        self,
        request: InvocationRequest,
        reporter: ProgressReporter,
    ) -> ExecutionResult: ...
