"""Shared constants and type aliases for the subagents runtime."""

from __future__ import annotations

from typing import Literal

#: Intelligence tiers a caller may request.
Tier = Literal["auto", "smart", "fast", "deep"]

TIERS: tuple[str, ...] = ("auto", "smart", "fast", "deep")

#: Tier used when neither the caller nor the persona picks one.
DEFAULT_TIER = "auto"

#: Name of the optional project configuration file.
CONFIG_FILENAME = "subagents.yaml"
