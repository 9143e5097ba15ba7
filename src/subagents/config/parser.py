"""Load, validate, and resolve subagents.yaml configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from subagents.config.models import SubagentsConfig
from subagents.constants import CONFIG_FILENAME, TIERS


class ConfigError(Exception):
    """User-facing configuration error."""


def load_config(path: Path | None = None, base_dir: Path | None = None) -> SubagentsConfig:
    """Load and validate a subagents.yaml file.

    Args:
        path: Explicit config file path.  Must exist when given.
        base_dir: Directory searched for subagents.yaml when *path* is
                  None.  Defaults to the current directory.  A missing
                  file there means "use defaults".

    Returns:
        A validated SubagentsConfig instance.

    Raises:
        ConfigError: On missing explicit file, bad YAML, or validation failure.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise ConfigError(msg)
    else:
        directory = base_dir if base_dir is not None else Path.cwd()
        config_path = directory / CONFIG_FILENAME
        if not config_path.is_file():
            _load_env(directory)
            return SubagentsConfig()

    raw = _read_yaml(config_path)
    _load_env(config_path.parent)
    return _validate(raw)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read config file: {exc}"
        raise ConfigError(msg) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        detail = ""
        if hasattr(exc, "problem_mark") and exc.problem_mark is not None:
            mark = exc.problem_mark
            detail = f" (line {mark.line + 1}, column {mark.column + 1})"
        msg = f"Invalid YAML in {path.name}{detail}"
        raise ConfigError(msg) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping in {path.name}, got {type(data).__name__}"
        raise ConfigError(msg)

    return data


def _load_env(config_dir: Path) -> None:
    env_path = config_dir / ".env"
    if env_path.is_file():
        load_dotenv(env_path)


def _validate(raw: dict[str, Any]) -> SubagentsConfig:
    try:
        return SubagentsConfig.model_validate(raw)
    except ValidationError as exc:
        parts: list[str] = []
        for err in exc.errors():
            loc_parts = [str(s) for s in err["loc"]]
            msg = err["msg"]
            if loc_parts and loc_parts[-1] == "[key]":
                # dict[Tier, str] key that is not a tier
                loc_parts = loc_parts[:1]
                msg = f"Unknown tier {err['input']!r}, expected one of: {', '.join(TIERS)}"
            elif err["type"] == "extra_forbidden":
                msg = "Unknown setting"
            elif err["type"] == "value_error":
                msg = msg.removeprefix("Value error, ")
            elif "input should be" in msg.lower():
                msg = f"Invalid value: {msg}"
            loc = " → ".join(loc_parts) or "(root)"
            parts.append(f"  {loc}: {msg}")
        joined = "\n".join(parts)
        msg = f"Config validation failed:\n{joined}"
        raise ConfigError(msg) from exc
