"""Agent personas — built-ins plus ``.claude/agents`` discovery."""

from subagents.personas.builtin import BUILTIN_PERSONAS, EXPLORE, GENERAL_PURPOSE
from subagents.personas.discovery import (
    discover_personas,
    find_persona,
    parse_persona_file,
    render_agent_list,
)
from subagents.personas.models import Persona

__all__ = [
    "BUILTIN_PERSONAS",
    "EXPLORE",
    "GENERAL_PURPOSE",
    "Persona",
    "discover_personas",
    "find_persona",
    "parse_persona_file",
    "render_agent_list",
]
