"""
Engine configuration.
"""

from __future__ import annotations

from .load import CONFIG_FILE_NAME, find_config, load_config
from .model import MAX_RECURSION_LIMIT, EngineConfig
from .typed import load_typed

__all__ = [
    "EngineConfig",
    "MAX_RECURSION_LIMIT",
    "load_config",
    "find_config",
    "load_typed",
    "CONFIG_FILE_NAME",
]
