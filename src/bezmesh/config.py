"""Tessellation settings with YAML file and environment override support.

Settings are looked up in this order:

1. An explicit path passed to :func:`load_config`
2. The file named by the ``BEZMESH_CONFIG`` environment variable
3. ``~/.config/bezmesh/config.yaml`` (``%APPDATA%\\bezmesh`` on Windows)
4. Built-in defaults

Example ``config.yaml``::

    budget: 20000
    split: 0.5
    strict: false
    default_color: "#c8d0e6"
"""

from __future__ import annotations

import dataclasses
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from bezmesh.errors import ConfigError
from bezmesh.io.scene import parse_color
from bezmesh.subdivision import DEFAULT_BUDGET, DEFAULT_SPLIT

logger = logging.getLogger(__name__)

BEZMESH_CONFIG = "BEZMESH_CONFIG"


@dataclass(frozen=True)
class TessellationConfig:
    """Runtime knobs of the tessellation pipeline."""

    budget: int = DEFAULT_BUDGET
    split: float = DEFAULT_SPLIT
    strict: bool = False
    default_color: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    def replace(self, **overrides: Any) -> "TessellationConfig":
        """Return a copy with every non-``None`` override applied."""

        changes = {k: v for k, v in overrides.items() if v is not None}
        return _validated(dataclasses.replace(self, **changes))


def user_config_path() -> Path:
    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    return config_base / "bezmesh" / "config.yaml"


def find_config(path: Optional[os.PathLike] = None) -> Optional[Path]:
    """Return the configuration file that :func:`load_config` would read."""

    if path is not None:
        explicit = Path(path).expanduser()
        if not explicit.exists():
            raise FileNotFoundError(f"Config file not found: {explicit}")
        return explicit

    env_path = os.environ.get(BEZMESH_CONFIG)
    if env_path:
        candidate = Path(env_path).expanduser()
        if candidate.is_file():
            return candidate
        logger.warning("%s points to a missing file: %s", BEZMESH_CONFIG, candidate)

    user_config = user_config_path()
    if user_config.is_file():
        return user_config
    return None


def load_config(path: Optional[os.PathLike] = None) -> TessellationConfig:
    """Load settings, falling back to defaults when no file is found."""

    found = find_config(path)
    if found is None:
        return TessellationConfig()
    logger.debug("loading tessellation config from %s", found)
    with open(found, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Invalid YAML in {found}: {exc}") from exc
    return config_from_dict(data or {}, source=str(found))


def config_from_dict(data: Dict[str, Any], *, source: str = "<dict>") -> TessellationConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config format in {source}: expected a mapping at root")

    known = {f.name for f in dataclasses.fields(TessellationConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {source}: {', '.join(unknown)}",
                          details={"unknown": unknown})

    values = dict(data)
    color = values.get("default_color")
    if isinstance(color, str):
        try:
            values["default_color"] = parse_color(color)
        except ValueError as exc:
            raise ConfigError(f"{source}: {exc}") from exc
    elif color is not None:
        if not isinstance(color, (list, tuple)):
            raise ConfigError(f"{source}: default_color must be a hex string or an RGB list")
        values["default_color"] = tuple(color)

    return _validated(TessellationConfig(**values))


def _validated(cfg: TessellationConfig) -> TessellationConfig:
    if isinstance(cfg.budget, bool) or not isinstance(cfg.budget, int) or cfg.budget < 1:
        raise ConfigError(f"budget must be a positive integer, got {cfg.budget!r}")
    if isinstance(cfg.split, bool) or not isinstance(cfg.split, (int, float)):
        raise ConfigError(f"split must be a number, got {cfg.split!r}")
    if not isinstance(cfg.strict, bool):
        raise ConfigError(f"strict must be true or false, got {cfg.strict!r}")
    color = cfg.default_color
    if len(color) != 3 or not all(isinstance(c, (int, float)) for c in color):
        raise ConfigError(f"default_color must have three numeric components, got {color!r}")
    return dataclasses.replace(cfg, split=float(cfg.split),
                               default_color=tuple(float(c) for c in color))


__all__ = [
    "BEZMESH_CONFIG",
    "TessellationConfig",
    "user_config_path",
    "find_config",
    "load_config",
    "config_from_dict",
]
