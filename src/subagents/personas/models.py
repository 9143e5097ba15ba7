"""A named agent flavour the caller can delegate to."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from subagents.constants import Tier


class Persona(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Identifier the caller passes as subagent_type")
    when_to_use: str = Field(description="Usage guidance advertised to the caller")
    path: str = Field(default="", description="Source file, empty for built-ins")
    model: Tier | None = Field(default=None, description="Preferred tier, if any")
    system_prompt: str | None = Field(
        default=None,
        description="Instructions prepended to every delegated task",
    )

    @property
    def builtin(self) -> bool:
        return not self.path
