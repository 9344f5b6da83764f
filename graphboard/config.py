"""
Configuration management for GraphBoard.

Handles persistent editor preferences:
- Grid size and snapping
- Edge weight labels
- History (undo/redo) and local cache switches
- Log level

Config is stored in config.json next to the executable/project root.
Environment variables (GRAPHBOARD_*) override the stored values; app.py
loads a .env file into the environment before reading them.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from graphboard import constants
from graphboard.paths import get_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRAPHBOARD_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class EditorConfig:
    """Editor preferences shared by the state container and the shell."""
    grid_size: int = constants.GRID_SIZE
    snap_to_grid: bool = constants.GRID_ENABLED
    show_weights: bool = constants.DEFAULT_SHOW_WEIGHTS
    history: bool = constants.DEFAULT_ENABLE_MEMENTO
    cache: bool = constants.DEFAULT_ENABLE_CACHE
    default_tool: str = constants.DEFAULT_TOOL
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "EditorConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)

    def apply_env(self, environ: Optional[dict] = None) -> "EditorConfig":
        """
        Override values from GRAPHBOARD_* environment variables.

        Invalid values are logged and ignored.
        """
        environ = os.environ if environ is None else environ
        for f in fields(self):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            current = getattr(self, f.name)
            try:
                setattr(self, f.name, _coerce(raw, type(current)))
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}{f.name.upper()}={raw!r}")
        return self


def _coerce(raw: str, target: type):
    if target is bool:
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(raw)
    if target is int:
        return int(raw)
    return raw


def load_config(path: Optional[Path] = None) -> dict:
    """Load configuration from config.json."""
    config_path = path or get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}")
            return {}
    return {}


def save_config(config: dict, path: Optional[Path] = None) -> None:
    """Save configuration to config.json."""
    config_path = path or get_config_path()
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)


def get_editor_config(path: Optional[Path] = None, environ: Optional[dict] = None) -> EditorConfig:
    """
    Resolve the effective editor configuration.

    Priority:
    1. Environment variables GRAPHBOARD_*
    2. Stored in config.json
    3. Defaults from graphboard.constants
    """
    return EditorConfig.from_dict(load_config(path)).apply_env(environ)
