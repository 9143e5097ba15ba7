"""Progress reporting for a single delegated invocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressNotification:
    """One progress update forwarded to the caller."""

    progress_token: str | int
    progress: int
    total: int
    message: str


#: Receives notifications synchronously, in emission order.
ProgressSink = Callable[[ProgressNotification], None]


class ProgressReporter:
    """Completed/total counters plus the latest status message.

    Both counters start at 1, the invocation itself being the first unit
    of work, and only ever grow.  Notifications are forwarded only when
    the caller supplied a progress token; without one the caller opted
    out of streaming and ``report`` just updates local state.
    """

    def __init__(
        self,
        progress_token: str | int | None = None,
        sink: ProgressSink | None = None,
    ) -> None:
        self._token = progress_token
        self._sink = sink
        self._completed = 1
        self._total = 1
        self._message = ""

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def total(self) -> int:
        return self._total

    @property
    def message(self) -> str:
        return self._message

    @property
    def streaming(self) -> bool:
        """Whether notifications reach the caller."""
        return self._token is not None and self._sink is not None

    def report(
        self,
        message: str,
        *,
        increase_progress: bool = False,
        increase_total: bool = False,
    ) -> ProgressNotification | None:
        """Record a status update and forward it if streaming is on."""
        if increase_progress:
            self._completed += 1
        if increase_total:
            self._total += 1
        self._message = message

        if self._token is None or self._sink is None:
            return None

        notification = ProgressNotification(
            progress_token=self._token,
            progress=self._completed,
            total=self._total,
            message=message,
        )
        self._sink(notification)
        return notification
