"""Cursor runtime — runs ``cursor-agent`` and streams its stream-json output."""

from __future__ import annotations

import asyncio
import codecs
import contextlib
import enum
import logging
import os
from collections.abc import Mapping

from subagents.runtime.processor import HandlerPipeline
from subagents.runtime.progress import ProgressReporter
from subagents.runtime.types import DEFAULT_TIER, ExecutionResult, InvocationRequest
from subagents.stream.framing import LineFramer

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "cursor-agent"

#: Intelligence tier -> cursor-agent model identifier.
MODEL_MAP: dict[str, str] = {
    "auto": "auto",
    "smart": "sonnet-4.5",
    "fast": "composer-1",
    "deep": "opus-4.5-thinking",
}

CANCELLED_TEXT = "Task cancelled by user"
NO_OUTPUT_TEXT = "Task completed (no output captured)"

#: Bytes requested per stdout/stderr read.
_CHUNK_SIZE = 65_536

#: Seconds to wait after SIGTERM before SIGKILL on cancellation.
_SIGTERM_WAIT = 3.0


class InvocationState(enum.StrEnum):
    SPAWNING = "spawning"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


def resolve_model(tier: str | None, models: Mapping[str, str] | None = None) -> str:
    """Map a tier to a model identifier; unknown tiers fall back to ``auto``."""
    table = models if models is not None else MODEL_MAP
    if tier and tier in table:
        return table[tier]
    return table.get(DEFAULT_TIER, DEFAULT_TIER)


def build_args(prompt: str, model_id: str) -> list[str]:
    """Arguments for a non-interactive, partial-output stream-json run."""
    return [
        "agent",
        prompt,
        "--print",
        "--output-format",
        "stream-json",
        "--stream-partial-output",
        "--model",
        model_id,
    ]


class CursorInvocation:
    """One ``cursor-agent`` process from spawn to terminal result.

    State machine: spawning -> running -> completed | failed | cancelled,
    with spawn errors going straight to failed.  Owns the framer, the
    handler pipeline and the stderr buffer for this run only.
    """

    def __init__(
        self,
        request: InvocationRequest,
        reporter: ProgressReporter,
        binary: str = DEFAULT_BINARY,
        models: Mapping[str, str] | None = None,
    ) -> None:
        self._request = request
        self._binary = binary
        self._model_id = resolve_model(request.model, models)
        self._framer = LineFramer()
        self._pipeline = HandlerPipeline(reporter)
        self._stderr_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._stderr_parts: list[str] = []
        self._escalation: asyncio.Task[None] | None = None

        self.state = InvocationState.SPAWNING
        self.pid: int | None = None
        self.returncode: int | None = None
        self.result: ExecutionResult | None = None

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def args(self) -> list[str]:
        return build_args(self._request.prompt, self._model_id)

    @property
    def stderr_text(self) -> str:
        return "".join(self._stderr_parts)

    @property
    def pipeline(self) -> HandlerPipeline:
        return self._pipeline

    def _cancelled(self) -> bool:
        cancel = self._request.cancel
        return cancel is not None and cancel.is_cancelled()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def execute(self) -> ExecutionResult:
        """Run the process to completion.  Never raises for process errors."""
        if self.result is not None:
            return self.result

        if self._cancelled():
            logger.info("request cancelled before spawn, not starting agent")
            return self._finish(
                InvocationState.CANCELLED, ExecutionResult.error(CANCELLED_TEXT)
            )

        logger.info(
            "spawning %s (model=%s, cwd=%s, prompt=%d chars)",
            self._binary,
            self._model_id,
            self._request.cwd,
            len(self._request.prompt),
        )

        try:
            proc = await asyncio.create_subprocess_exec(
                self._binary,
                *self.args,
                cwd=str(self._request.cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(os.environ),
            )
        except (OSError, ValueError) as exc:
            logger.error("failed to start %s: %s", self._binary, exc)
            return self._finish(
                InvocationState.FAILED,
                ExecutionResult.error(f"Failed to start agent process: {exc}"),
            )

        self.state = InvocationState.RUNNING
        self.pid = proc.pid
        logger.info("agent process spawned with PID %s", proc.pid)

        def _on_cancel() -> None:
            logger.info("request cancelled, terminating agent PID %s", proc.pid)
            self._terminate(proc)

        cancel = self._request.cancel
        if cancel is not None:
            cancel.add_listener(_on_cancel)

        try:
            await asyncio.gather(
                self._pump_stdout(proc.stdout),
                self._pump_stderr(proc.stderr),
            )
            returncode = await proc.wait()
        except BaseException:
            # Task cancellation or a pump failure: never leave the child running.
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            raise
        finally:
            if cancel is not None:
                cancel.remove_listener(_on_cancel)
            if self._escalation is not None and not self._escalation.done():
                self._escalation.cancel()

        self.returncode = returncode
        logger.info("agent process closed with code %s", returncode)
        return self._conclude(returncode)

    def _conclude(self, returncode: int) -> ExecutionResult:
        if self._cancelled():
            return self._finish(
                InvocationState.CANCELLED, ExecutionResult.error(CANCELLED_TEXT)
            )

        if returncode == 0:
            text = self._pipeline.result or NO_OUTPUT_TEXT
            return self._finish(InvocationState.COMPLETED, ExecutionResult.success(text))

        stderr_text = self.stderr_text
        logger.error(
            "agent exited with code %s: %s", returncode, stderr_text.strip()[:2048]
        )
        return self._finish(
            InvocationState.FAILED,
            ExecutionResult.error(
                f"Error executing agent (exit code {returncode}): {stderr_text}"
            ),
        )

    def _finish(
        self, state: InvocationState, result: ExecutionResult
    ) -> ExecutionResult:
        self.state = state
        self.result = result
        return result

    def _terminate(self, proc: asyncio.subprocess.Process) -> None:
        """SIGTERM now, SIGKILL if the process is still alive after a grace period."""
        with contextlib.suppress(ProcessLookupError):
            proc.terminate()
        if self._escalation is None:
            self._escalation = asyncio.get_running_loop().create_task(
                self._kill_after_grace(proc)
            )

    async def _kill_after_grace(self, proc: asyncio.subprocess.Process) -> None:
        try:
            await asyncio.wait_for(proc.wait(), timeout=_SIGTERM_WAIT)
        except TimeoutError:
            logger.warning("agent PID %s ignored SIGTERM, killing", proc.pid)
            with contextlib.suppress(ProcessLookupError):
                proc.kill()

    # ------------------------------------------------------------------ #
    # Stream pumps
    # ------------------------------------------------------------------ #

    async def _pump_stdout(self, stream: asyncio.StreamReader | None) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            # Keep draining after cancellation so the process can exit,
            # but nothing read from here on reaches the caller.
            if self._cancelled():
                continue
            for line in self._framer.feed(chunk):
                if self._cancelled():
                    break
                self._pipeline.feed_line(line)
        self._framer.close()

    async def _pump_stderr(self, stream: asyncio.StreamReader | None) -> None:
        if stream is None:
            return
        while True:
            chunk = await stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            if self._cancelled():
                continue
            text = self._stderr_decoder.decode(chunk)
            if text:
                logger.debug("agent stderr: %s", text.rstrip())
                self._stderr_parts.append(text)
        tail = self._stderr_decoder.decode(b"", final=True)
        if tail and not self._cancelled():
            self._stderr_parts.append(tail)


class CursorAgentRuntime:
    """``AgentRuntime`` backed by the ``cursor-agent`` CLI.

    Stateless across invocations: every ``run`` gets its own process,
    framer, pipeline and dedup set, so concurrent runs never share state.
    """

    name = "cursor"

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        models: Mapping[str, str] | None = None,
    ) -> None:
        self._binary = binary
        self._models = {**MODEL_MAP, **(models or {})}

    @property
    def models(self) -> dict[str, str]:
        return dict(self._models)

    def create_invocation(
        self, request: InvocationRequest, reporter: ProgressReporter
    ) -> CursorInvocation:
        return CursorInvocation(
            request, reporter, binary=self._binary, models=self._models
        )

    async def run(
        self,
        request: InvocationRequest,
        reporter: ProgressReporter,
    ) -> ExecutionResult:
        return await self.create_invocation(request, reporter).execute()
