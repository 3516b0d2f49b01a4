from __future__ import annotations

import os
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field

CONFIG_ENV_VAR = "ALLEQ_CONFIG"
DEBUG_ASSERTIONS_ENV_VAR = "ALLEQ_DEBUG_ASSERTIONS"


class AllEqConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # Mirrors the interpreter: disabled under `python -O`.
    debug_assertions: bool = Field(default_factory=lambda: __debug__)


def load_config(path: Path) -> AllEqConfig:
    """Load and validate an alleq config from a YAML file.

    ``${VAR}`` and ``${VAR:-default}`` references are expanded before parsing.
    """
    with open(path) as f:
        raw = yaml.safe_load(expandvars(f.read()))

    return AllEqConfig(**(raw or {}))


def _resolve_config() -> AllEqConfig:
    config_path = os.environ.get(CONFIG_ENV_VAR)
    config = load_config(Path(config_path)) if config_path else AllEqConfig()

    override = os.environ.get(DEBUG_ASSERTIONS_ENV_VAR)
    if override is not None and override.strip():
        config = AllEqConfig(
            **{**config.model_dump(), "debug_assertions": override.strip()}
        )
    return config


_current: AllEqConfig | None = None


def get_config() -> AllEqConfig:
    """Return the process-wide config, resolving it on first use."""
    global _current
    if _current is None:
        _current = _resolve_config()
    return _current


def configure(config: AllEqConfig) -> AllEqConfig | None:
    """Install ``config`` as the process-wide config and return the previous one."""
    global _current
    previous = _current
    _current = config
    return previous


def reset_config() -> None:
    global _current
    _current = None


def debug_assertions_enabled() -> bool:
    return get_config().debug_assertions
