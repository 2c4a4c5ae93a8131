"""
VialRGB — optional user configuration (vialctl/config.toml in the user config dir).

Example::

    white_point = [200, 255, 230]
"""

import logging
import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vialrgb.color import WhitePoint
from vialrgb.errors import InvalidInput

log = logging.getLogger(__name__)

APP_NAME = "vialctl"
CONFIG_FILE = "config.toml"


@dataclass(frozen=True)
class Config:
    white_point: Optional[WhitePoint] = None


def _config_root() -> Path:
    """Per-user config directory for the running platform."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    base = os.environ.get("XDG_CONFIG_HOME")
    return Path(base) if base else Path.home() / ".config"


def config_path() -> Path:
    return _config_root() / APP_NAME / CONFIG_FILE


def load_config(path=None) -> Config:
    """Load the config file; any problem degrades to defaults with a warning."""
    path = Path(path) if path is not None else config_path()

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError:
        return Config()
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning("ignoring invalid config %s: %s", path, e)
        return Config()

    rgb = raw.get("white_point")
    if rgb is None:
        return Config()

    if not isinstance(rgb, list) or len(rgb) != 3:
        log.warning("ignoring white_point in %s: expected an array of 3 integers", path)
        return Config()

    try:
        white_point = WhitePoint(*rgb)
    except InvalidInput as e:
        log.warning("ignoring white_point in %s: %s", path, e)
        return Config()

    return Config(white_point=white_point)
