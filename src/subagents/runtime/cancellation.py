"""Cancellation primitives for delegated invocations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


@dataclass
class CancellationToken:
    """Cooperative cancellation token shared between caller and runtime.

    Listeners run synchronously, at most once, when ``cancel`` is first
    called.  A listener added after cancellation runs immediately.
    """

    reason: str | None = None
    cancelled_at: datetime | None = None
    _cancelled: bool = False
    _listeners: list[Callable[[], None]] = field(default_factory=list, repr=False)

    def cancel(self, reason: str = "requested") -> None:
        """Mark token as cancelled (idempotent) and notify listeners."""
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason
        self.cancelled_at = datetime.now(UTC)
        logger.debug("cancellation requested: %s", reason)
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener()

    def is_cancelled(self) -> bool:
        """Return True if cancellation was requested."""
        return self._cancelled

    def add_listener(self, listener: Callable[[], None]) -> None:
        if self._cancelled:
            listener()
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
