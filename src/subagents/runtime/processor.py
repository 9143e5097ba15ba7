"""Dedups stream events and dispatches them to the handlers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from subagents.runtime.handlers import Handler, default_handlers
from subagents.runtime.progress import ProgressReporter
from subagents.stream.decoder import decode_line
from subagents.stream.dedup import Deduplicator
from subagents.stream.models import StreamEvent

logger = logging.getLogger(__name__)


class HandlerPipeline:
    """Feeds each new event to every handler, in order.

    Repeated records are dropped before any handler sees them.  Progress
    effects go to the reporter; final-result effects overwrite the
    accumulated result.  Owned by exactly one invocation.
    """

    def __init__(
        self,
        reporter: ProgressReporter,
        handlers: Sequence[Handler] | None = None,
    ) -> None:
        self._reporter = reporter
        self._handlers = list(handlers) if handlers is not None else default_handlers()
        self._dedup = Deduplicator()
        self._result = ""
        self._processed = 0

    @property
    def result(self) -> str:
        """Text of the latest final assistant message, or ``""``."""
        return self._result

    @property
    def processed(self) -> int:
        """Number of events forwarded to the handlers."""
        return self._processed

    def feed_line(self, line: str) -> bool:
        """Decode *line* and process it.  Returns ``True`` if forwarded."""
        event = decode_line(line)
        if event is None:
            return False
        return self.process(event)

    def process(self, event: StreamEvent) -> bool:
        """Dispatch *event* unless it repeats one already seen."""
        if not self._dedup.admit(event):
            return False

        self._processed += 1
        for handler in self._handlers:
            effect = handler(event)
            if effect is None:
                continue
            if effect.progress is not None:
                update = effect.progress
                self._reporter.report(
                    update.message,
                    increase_progress=update.increase_progress,
                    increase_total=update.increase_total,
                )
            if effect.final_result:
                self._result = effect.final_result
        return True
