"""
Configuration constants interpolated into usage text.

Values come from the built-in defaults, then from the ``defaults`` mapping of a
``.opdocrc`` YAML file in the working directory, then from ``OPDOC_*``
environment variables (highest precedence).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from . import (
    DEFAULT_FORMAT_NAME,
    DEFAULT_TARGET_FILEPATH,
    DEFAULT_TILE_CACHE_SIZE_MB,
    DEFAULT_TOOL_NAME,
)
from .errors import ConfigError

logger = logging.getLogger(__name__)

OPDOCRC_FILENAME = ".opdocrc"

# environment variable -> config field
ENV_OVERRIDES = {
    "OPDOC_TOOL_NAME": "tool_name",
    "OPDOC_TARGET_FILEPATH": "target_filepath",
    "OPDOC_FORMAT_NAME": "format_name",
    "OPDOC_TILE_CACHE_SIZE": "tile_cache_size_mb",
    "OPDOC_PARALLELISM": "tile_scheduler_parallelism",
}

_INT_FIELDS = {"tile_cache_size_mb", "tile_scheduler_parallelism"}


def _default_parallelism() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class UsageConfig:
    tool_name: str = DEFAULT_TOOL_NAME
    target_filepath: str = DEFAULT_TARGET_FILEPATH
    format_name: str = DEFAULT_FORMAT_NAME
    tile_cache_size_mb: int = DEFAULT_TILE_CACHE_SIZE_MB
    tile_scheduler_parallelism: int = field(default_factory=_default_parallelism)


def _coerce(name: str, value: Any, source: str) -> Any:
    if name in _INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"{source}: '{name}' must be an integer, got {value!r}")
    return str(value)


def _read_rc_defaults(rc_path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(rc_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid {OPDOCRC_FILENAME} at {rc_path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {OPDOCRC_FILENAME} at {rc_path}: expected a mapping")
    defaults = data.get("defaults") or {}
    if not isinstance(defaults, dict):
        raise ConfigError(f"Invalid {OPDOCRC_FILENAME} at {rc_path}: 'defaults' must be a mapping")
    return defaults


def load_config(cwd: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> UsageConfig:
    """Resolve the effective usage configuration.

    Args:
        cwd: Directory searched for ``.opdocrc``; defaults to the current directory.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        UsageConfig: The resolved configuration.

    Raises:
        ConfigError: If the rc file or an environment override is invalid.
    """
    cwd = Path.cwd() if cwd is None else Path(cwd)
    environ = os.environ if environ is None else environ
    config = UsageConfig()
    known = set(config.__dataclass_fields__)

    rc_path = cwd / OPDOCRC_FILENAME
    if rc_path.is_file():
        overrides = {}
        for key, value in _read_rc_defaults(rc_path).items():
            if key not in known:
                logger.warning(f"Ignoring unknown key '{key}' in {rc_path}")
                continue
            overrides[key] = _coerce(key, value, str(rc_path))
        logger.debug(f"Loaded {len(overrides)} setting(s) from {rc_path}")
        config = replace(config, **overrides)

    env_overrides = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            env_overrides[field_name] = _coerce(field_name, value, env_name)
    if env_overrides:
        config = replace(config, **env_overrides)
    return config
