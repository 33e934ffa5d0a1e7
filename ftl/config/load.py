from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import EngineConfig
from .typed import load_typed
from ..errors import ConfigError

CONFIG_FILE_NAME = "ftl.yaml"

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must contain a mapping (an empty file is {})."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_config(path: Optional[Path]) -> EngineConfig:
    """
    Loads engine settings from a YAML file.

    A missing file (or None) yields the defaults.

    Raises:
        ConfigError: On invalid YAML, unknown keys, values of the wrong type
                     or a recursion_limit out of range
    """
    if path is None or not path.is_file():
        logger.debug(f"No config file at {path}, using defaults")
        return EngineConfig()

    raw = _read_yaml_map(path)
    try:
        cfg = load_typed(EngineConfig, raw)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e

    logger.debug(f"Loaded config from {path}: {cfg}")
    return cfg


def find_config(root: Path) -> Optional[Path]:
    """Returns `root/ftl.yaml` if it exists."""
    candidate = root / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


__all__ = ["load_config", "find_config", "CONFIG_FILE_NAME"]
