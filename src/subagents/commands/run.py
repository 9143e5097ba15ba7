"""subagents run — delegate one task and stream its progress."""

from __future__ import annotations

import asyncio
import contextlib
import json
import signal
from pathlib import Path

import click

from subagents.config.parser import ConfigError, load_config
from subagents.constants import TIERS
from subagents.personas.builtin import GENERAL_PURPOSE
from subagents.runtime.cancellation import CancellationToken
from subagents.runtime.progress import ProgressNotification
from subagents.runtime.registry import build_runtimes
from subagents.runtime.types import ExecutionResult
from subagents.service import TaskRequest, TaskService

#: Progress token used for the CLI's own progress stream.
_CLI_PROGRESS_TOKEN = "cli"


def _echo_progress(notification: ProgressNotification) -> None:
    click.echo(
        f"[{notification.progress}/{notification.total}] {notification.message}",
        err=True,
    )


async def _run_task(
    service: TaskService,
    request: TaskRequest,
    quiet: bool,
) -> ExecutionResult:
    """Run *request*, turning Ctrl-C into a cancellation request."""
    cancel = CancellationToken()
    loop = asyncio.get_running_loop()
    installed = False
    with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGINT, cancel.cancel, "interrupted")
        installed = True

    try:
        return await service.run(
            request,
            progress_token=None if quiet else _CLI_PROGRESS_TOKEN,
            notify=None if quiet else _echo_progress,
            cancel=cancel,
        )
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)


@click.command()
@click.argument("prompt")
@click.option(
    "--agent",
    "-a",
    "agent_name",
    default=GENERAL_PURPOSE.name,
    show_default=True,
    help="Persona to delegate to.",
)
@click.option(
    "--model",
    "-m",
    type=click.Choice(TIERS),
    default=None,
    help="Intelligence tier (default: persona's tier, then config).",
)
@click.option(
    "--description",
    "-d",
    default="",
    help="Short description shown in the first progress line.",
)
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Working directory for the agent (default: current directory).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to subagents.yaml (default: <cwd>/subagents.yaml if present).",
)
@click.option("--quiet", "-q", is_flag=True, help="Do not stream progress.")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the result as a JSON tool-result object.",
)
def run(
    prompt: str,
    agent_name: str,
    model: str | None,
    description: str,
    cwd: Path | None,
    config_path: Path | None,
    quiet: bool,
    as_json: bool,
) -> None:
    """Delegate PROMPT to an agent and print its final answer."""
    root = (cwd if cwd is not None else Path.cwd()).resolve()
    try:
        config = load_config(config_path, base_dir=root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    service = TaskService(cwd=root, runtimes=build_runtimes(config), config=config)
    request = TaskRequest(
        prompt=prompt,
        subagent_type=agent_name,
        model=model,
        description=description,
    )

    result = asyncio.run(_run_task(service, request, quiet))
    if as_json:
        click.echo(json.dumps(result.to_content()))
        if result.is_error:
            raise SystemExit(1)
        return
    if result.is_error:
        click.echo(result.text, err=True)
        raise SystemExit(1)
    click.echo(result.text)
