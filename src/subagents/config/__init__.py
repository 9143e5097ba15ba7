"""Configuration model and parser for subagents.yaml."""

from subagents.config.models import SubagentsConfig
from subagents.config.parser import ConfigError, load_config

__all__ = [
    "ConfigError",
    "SubagentsConfig",
    "load_config",
]
