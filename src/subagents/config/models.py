"""Pydantic v2 models for subagents.yaml configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from subagents.constants import Tier


class SubagentsConfig(BaseModel):
    """Top-level subagents.yaml configuration.  Every field has a default."""

    model_config = ConfigDict(extra="forbid")

    runtime: Literal["cursor"] = Field(
        default="cursor",
        description="Agent runtime used to execute delegated tasks",
    )
    binary: str = Field(
        default="cursor-agent",
        description="Executable spawned for each task",
    )
    default_model: Tier = Field(
        default="auto",
        description="Tier used when neither the caller nor the persona picks one",
    )
    models: dict[Tier, str] = Field(
        default_factory=dict,
        description="Tier -> backend model identifier overrides",
    )

    @field_validator("binary")
    @classmethod
    def _binary_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "binary must not be empty"
            raise ValueError(msg)
        return value.strip()
