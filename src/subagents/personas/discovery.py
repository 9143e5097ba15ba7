"""Persona discovery from ``.claude/agents`` directories.

Each persona file is Markdown with a ``---`` delimited front-matter block::

    ---
    name: code-reviewer
    description: Use after writing a significant piece of code
    model: smart
    ---
    You are a meticulous reviewer...

The body becomes the persona's system prompt.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from subagents.constants import TIERS
from subagents.personas.builtin import BUILTIN_PERSONAS
from subagents.personas.models import Persona

logger = logging.getLogger(__name__)

#: Persona directory, relative to both the repo root and the home directory.
AGENTS_SUBDIR = Path(".claude") / "agents"

_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---(?:\n(.*))?\Z", re.DOTALL)
_FIELD_RE = {
    key: re.compile(rf"^{key}:\s*(.+)$", re.MULTILINE)
    for key in ("name", "description", "model")
}


def parse_persona_file(path: Path) -> Persona | None:
    """Parse one persona file.  Returns ``None`` if it is not usable."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("cannot read persona file %s: %s", path, exc)
        return None

    match = _FRONTMATTER_RE.match(content.replace("\r\n", "\n"))
    if match is None:
        logger.debug("no front matter in %s, skipping", path)
        return None

    meta = _parse_metadata(match.group(1))
    name = meta.get("name")
    if not name:
        logger.debug("persona file %s has no name, skipping", path)
        return None

    description = meta.get("description") or f"Sub-agent: {name}"
    model = meta.get("model")
    if model not in TIERS:
        model = None

    return Persona(
        name=name,
        when_to_use=description,
        path=str(path),
        model=model,
        system_prompt=(match.group(2) or "").strip(),
    )


def _parse_metadata(block: str) -> dict[str, str]:
    """Read name/description/model from the front-matter block.

    Falls back to per-line matching when the block is not valid YAML, which
    is common for hand-written descriptions containing bare colons.
    """
    try:
        data: Any = yaml.safe_load(block)
    except yaml.YAMLError:
        data = None

    if isinstance(data, dict):
        return {
            key: str(value).strip()
            for key, value in data.items()
            if key in _FIELD_RE and value is not None
        }

    fields: dict[str, str] = {}
    for key, pattern in _FIELD_RE.items():
        found = pattern.search(block)
        if found:
            fields[key] = found.group(1).strip()
    return fields


def scan_directory(
    directory: Path,
    personas: list[Persona],
    seen: set[str],
) -> None:
    """Append every new persona found in *directory*.

    A missing or unreadable directory contributes nothing.  Names already
    in *seen* are skipped, so earlier sources take precedence.
    """
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return

    for entry in entries:
        if not entry.is_file() or entry.suffix != ".md":
            continue
        persona = parse_persona_file(entry)
        if persona is None or persona.name in seen:
            continue
        personas.append(persona)
        seen.add(persona.name)


def discover_personas(cwd: Path, home: Path | None = None) -> list[Persona]:
    """Built-ins, then repo-local personas, then user-global personas."""
    personas = list(BUILTIN_PERSONAS)
    seen = {p.name for p in personas}

    scan_directory(cwd / AGENTS_SUBDIR, personas, seen)
    home_dir = home if home is not None else Path.home()
    scan_directory(home_dir / AGENTS_SUBDIR, personas, seen)

    logger.debug("discovered %d personas", len(personas))
    return personas


def find_persona(personas: Iterable[Persona], name: str) -> Persona | None:
    return next((p for p in personas if p.name == name), None)


def render_agent_list(personas: Iterable[Persona]) -> str:
    """One ``- name: guidance (Tools: All)`` line per persona."""
    return "\n".join(f"- {p.name}: {p.when_to_use} (Tools: All)" for p in personas)
