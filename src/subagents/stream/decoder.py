"""Decode one text line into at most one stream event."""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from subagents.stream.models import StreamEvent

logger = logging.getLogger(__name__)

_EVENT_ADAPTER: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def decode_line(line: str) -> StreamEvent | None:
    """Parse *line* into a stream event.

    Returns ``None`` for blank lines, non-JSON diagnostics interleaved on
    stdout, JSON that is not an object, unknown record types and records
    that do not fit their declared shape.  Never raises.
    """
    stripped = line.strip()
    if not stripped:
        return None

    try:
        raw = json.loads(stripped)
    except (json.JSONDecodeError, RecursionError):
        logger.debug("skipping non-JSON stdout line: %s", stripped[:200])
        return None

    if not isinstance(raw, dict):
        logger.debug("skipping non-object JSON record: %s", stripped[:200])
        return None

    try:
        return _EVENT_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        logger.debug(
            "skipping unrecognised %r record (%d validation errors)",
            raw.get("type"),
            exc.error_count(),
        )
        return None
    except RecursionError:
        logger.debug("skipping %r record nested too deeply", raw.get("type"))
        return None
