"""Per-invocation duplicate suppression.

Some backend models re-emit the exact same record more than once.  Without
suppression the repeats would double-count tool calls and repeat status
text.
"""

from __future__ import annotations

import json
import logging

from subagents.stream.models import StreamEvent

logger = logging.getLogger(__name__)


def canonical_key(event: StreamEvent) -> str:
    """Byte-stable encoding of the full record, extra keys included."""
    payload = event.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class Deduplicator:
    """Remembers every record seen during one invocation."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def admit(self, event: StreamEvent) -> bool:
        """Return ``True`` the first time *event* is seen, ``False`` after."""
        key = canonical_key(event)
        if key in self._seen:
            logger.debug("dropping duplicate %s record", event.type)
            return False
        self._seen.add(key)
        return True
