"""
Shared test infrastructure.

Modules:
- file_utils: Utilities for creating template files and directories
- engine_utils: Helpers for building engines, environments and nodes
"""

from .file_utils import write, write_bytes
from .engine_utils import make_engine, make_environment, parse_single

__all__ = [
    "write", "write_bytes",
    "make_engine", "make_environment", "parse_single",
]
