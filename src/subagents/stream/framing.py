"""Line framer — turns raw stdout chunks into complete text lines."""

from __future__ import annotations

import codecs
import logging

logger = logging.getLogger(__name__)


class LineFramer:
    """Split an unbounded chunk stream into newline-terminated lines.

    Chunks may break anywhere, including inside a line or inside a
    multi-byte UTF-8 character.  Every complete line is returned exactly
    once, in arrival order, without its trailing newline.  The trailing
    unterminated fragment is held back until the next chunk completes it.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._parts: list[str] = []

    @property
    def pending(self) -> str:
        """The incomplete trailing fragment held back so far."""
        return "".join(self._parts)

    def feed(self, chunk: bytes) -> list[str]:
        """Append *chunk* and return every line it completes."""
        text = self._decoder.decode(chunk)
        if "\n" not in text:
            if text:
                self._parts.append(text)
            return []
        first, *lines, rest = text.split("\n")
        self._parts.append(first)
        lines.insert(0, "".join(self._parts))
        self._parts = [rest] if rest else []
        return lines

    def close(self) -> bool:
        """End of stream.  Discard any pending fragment.

        A fragment still pending at EOF was never terminated, so it is not
        a guaranteed-complete record and is dropped rather than decoded.
        Returns ``True`` if a non-empty fragment was discarded.
        """
        pending = self.pending + self._decoder.decode(b"", final=True)
        dropped = bool(pending.strip())
        if dropped:
            logger.debug(
                "discarding unterminated trailing fragment (%d chars)",
                len(pending),
            )
        self._parts = []
        return dropped
