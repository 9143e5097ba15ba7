"""Builds the name -> runtime map at startup."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from subagents.config.models import SubagentsConfig
from subagents.runtime.cursor import CursorAgentRuntime
from subagents.runtime.types import AgentRuntime

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME = "cursor"


def build_runtimes(config: SubagentsConfig | None = None) -> dict[str, AgentRuntime]:
    """Construct every available runtime from *config*."""
    if config is None:
        config = SubagentsConfig()
    return {
        "cursor": CursorAgentRuntime(binary=config.binary, models=config.models),
    }


def get_runtime(runtimes: Mapping[str, AgentRuntime], name: str) -> AgentRuntime:
    """Look up *name*, falling back to the default runtime."""
    runtime = runtimes.get(name)
    if runtime is None:
        logger.warning("unknown runtime %r, using %r", name, DEFAULT_RUNTIME)
        runtime = runtimes[DEFAULT_RUNTIME]
    return runtime
