"""
Utilities for creating files and directories in tests.
"""

from __future__ import annotations

from pathlib import Path


def write(p: Path, text: str) -> Path:
    """
    Writes text to a file, creating parent directories when needed.

    Args:
        p: File path
        text: Content to write (UTF-8)

    Returns:
        Path of the created file
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_bytes(p: Path, data: bytes) -> Path:
    """Same as write(), for raw bytes (non UTF-8 templates)."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


__all__ = ["write", "write_bytes"]
