"""
config.py

Responsibility: Load optional user defaults from a YAML file into a typed model.

Lookup order:
- an explicit path (`--config`), which must exist
- `$GENPKGBUILD_CONFIG`
- `$XDG_CONFIG_HOME/genpkgbuild/config.yaml` (or `~/.config/genpkgbuild/config.yaml`)

A missing default file is not an error; defaults apply.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from genpkgbuild.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "PKGBUILD"
DEFAULT_TIMEOUT = 30.0
CONFIG_ENV_VAR = "GENPKGBUILD_CONFIG"


@dataclass(frozen=True)
class Config:
    """Defaults applied before prompting."""

    output: str = DEFAULT_OUTPUT
    depends: list[str] = field(default_factory=list)
    timeout: float = DEFAULT_TIMEOUT


def default_config_path() -> Path:
    config_root = os.getenv("XDG_CONFIG_HOME")
    if config_root:
        return Path(config_root) / "genpkgbuild" / "config.yaml"
    return Path.home() / ".config" / "genpkgbuild" / "config.yaml"


def _parse_depends(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split()
    if isinstance(raw, list) and all(isinstance(item, str) for item in raw):
        return [item.strip() for item in raw if item.strip()]
    raise ConfigError("`depends` must be a list of strings or a space-separated string.")


def _parse_config(data: dict[str, Any]) -> Config:
    output = str(data.get("output") or DEFAULT_OUTPUT).strip() or DEFAULT_OUTPUT

    timeout_raw = data.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout_raw, bool) or not isinstance(timeout_raw, (int, float)) or timeout_raw <= 0:
        raise ConfigError("`timeout` must be a positive number of seconds.")

    return Config(output=output, depends=_parse_depends(data.get("depends")), timeout=float(timeout_raw))


def load_config(config_path: str | Path | None = None) -> Config:
    """
    Load the configuration file, or return defaults when there is none.

    An explicitly requested file (argument or environment variable) must exist.
    """
    explicit = config_path or os.getenv(CONFIG_ENV_VAR)
    path = Path(explicit) if explicit else default_config_path()

    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file does not exist: {path}")
        return Config()

    logger.debug("loading config from %s", path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must be a mapping at the top level.")
    return _parse_config(data)
