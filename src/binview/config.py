"""Configuration for the viewer. Reads ~/.binview/config.json if present."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

_SGR_PARAMS_RE = re.compile(r"^[0-9;]*$")


def sgr(params: str) -> str:
    """Build an SGR escape sequence from a parameter string like ``"0;33;1"``."""
    return f"\x1b[{params}m"


@dataclass
class Theme:
    """SGR sequences for the four display roles."""

    cursor: str = sgr("0;40;37;1;7")
    cell1: str = sgr("0;40;37")
    cell2: str = sgr("0;40;37;1")
    status: str = sgr("0;33;1")


@dataclass
class Config:
    """Viewer configuration."""

    theme: Theme = field(default_factory=Theme)
    tty_path: str = "/dev/tty"
    key_timeout: float = 0.01
    write_log: str = ""


def _get_config_dir() -> Path:
    return Path(os.environ.get("BINVIEW_CONFIG_DIR", Path.home() / ".binview"))


def _get_config_path() -> Path:
    return _get_config_dir() / CONFIG_FILE_NAME


def _theme_from_dict(data: Any) -> Theme:
    theme = Theme()
    if not isinstance(data, dict):
        logger.warning("Ignoring theme: expected an object, got %r", data)
        return theme
    for role, params in data.items():
        if not hasattr(theme, role):
            logger.warning("Ignoring unknown theme role %r", role)
            continue
        if not isinstance(params, str) or not _SGR_PARAMS_RE.match(params):
            logger.warning("Ignoring theme %s: invalid SGR parameters %r", role, params)
            continue
        setattr(theme, role, sgr(params))
    return theme


def config_from_dict(data: dict) -> Config:
    """Build a :class:`Config` from parsed JSON, keeping defaults for bad fields."""
    config = Config()
    if "theme" in data:
        config.theme = _theme_from_dict(data["theme"])

    tty_path = data.get("tty_path")
    if isinstance(tty_path, str) and tty_path:
        config.tty_path = tty_path
    elif tty_path is not None:
        logger.warning("Ignoring tty_path: %r", tty_path)

    key_timeout = data.get("key_timeout")
    if isinstance(key_timeout, (int, float)) and not isinstance(key_timeout, bool) and key_timeout > 0:
        config.key_timeout = float(key_timeout)
    elif key_timeout is not None:
        logger.warning("Ignoring key_timeout: %r", key_timeout)

    return config


def load_config() -> Config:
    """Load the config file and apply ``BINVIEW_*`` environment overrides."""
    config_path = _get_config_path()
    config = Config()
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Error reading config %s: %s", config_path, e)
        else:
            if isinstance(data, dict):
                config = config_from_dict(data)
            else:
                logger.warning("Ignoring config %s: top level is not an object", config_path)

    tty_path = os.environ.get("BINVIEW_TTY")
    if tty_path:
        config.tty_path = tty_path
    config.write_log = os.environ.get("BINVIEW_WRITE_LOG", config.write_log)
    return config
