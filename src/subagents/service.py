"""Delegate operation — resolves a persona and runs one task on a runtime."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from subagents.config.models import SubagentsConfig
from subagents.constants import Tier
from subagents.personas.discovery import discover_personas, find_persona
from subagents.personas.models import Persona
from subagents.runtime.cancellation import CancellationToken
from subagents.runtime.progress import ProgressReporter, ProgressSink
from subagents.runtime.registry import get_runtime
from subagents.runtime.types import AgentRuntime, ExecutionResult, InvocationRequest

logger = logging.getLogger(__name__)


class TaskRequest(BaseModel):
    """Arguments of the caller-facing ``task`` operation."""

    model_config = ConfigDict(extra="forbid")

    prompt: str = Field(description="The task for the agent to perform")
    subagent_type: str = Field(description="Persona to run the task as")
    model: Tier | None = Field(
        default=None,
        description="Intelligence tier; falls back to the persona's, then the default",
    )
    description: str = Field(
        default="",
        description="A short (3-5 word) description of the task",
    )


def build_prompt(persona: Persona, prompt: str) -> str:
    """Prefix the persona's system prompt, if it has one."""
    if not persona.system_prompt:
        return prompt
    return f"System Instruction:\n{persona.system_prompt}\n\nUser Task:\n{prompt}"


def persona_not_found(name: str, personas: list[Persona]) -> ExecutionResult:
    available = ", ".join(p.name for p in personas)
    return ExecutionResult.error(
        f"Error: Agent '{name}' not found. Available agents: {available}"
    )


class TaskService:
    """Runs delegated tasks for one working directory.

    Personas are re-discovered on every call so files added while the
    service is up are picked up.
    """

    def __init__(
        self,
        cwd: Path,
        runtimes: Mapping[str, AgentRuntime],
        config: SubagentsConfig | None = None,
        home: Path | None = None,
    ) -> None:
        self._cwd = cwd
        self._runtimes = runtimes
        self._config = config if config is not None else SubagentsConfig()
        self._home = home

    @property
    def cwd(self) -> Path:
        return self._cwd

    def personas(self) -> list[Persona]:
        return discover_personas(self._cwd, home=self._home)

    async def run(
        self,
        request: TaskRequest,
        *,
        progress_token: str | int | None = None,
        notify: ProgressSink | None = None,
        cancel: CancellationToken | None = None,
    ) -> ExecutionResult:
        personas = self.personas()
        persona = find_persona(personas, request.subagent_type)
        if persona is None:
            logger.warning("unknown agent %r requested", request.subagent_type)
            return persona_not_found(request.subagent_type, personas)

        full_prompt = build_prompt(persona, request.prompt)
        tier = request.model or persona.model or self._config.default_model
        logger.info(
            "executing agent %r (tier=%s, prompt=%d chars)",
            persona.name,
            tier,
            len(full_prompt),
        )

        reporter = ProgressReporter(progress_token, notify)
        reporter.report(f"{persona.name}: {request.description}")

        runtime = get_runtime(self._runtimes, self._config.runtime)
        return await runtime.run(
            InvocationRequest(
                prompt=full_prompt,
                cwd=self._cwd,
                model=tier,
                cancel=cancel,
            ),
            reporter,
        )
