"""
Template loaders.

A loader maps root-based template names to raw bytes. It knows nothing
about parsing or encodings; the resolver takes care of those.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pathspec


class TemplateLoader(ABC):
    """Source of template bytes, addressed by normalized names."""

    @abstractmethod
    def find_template_source(self, name: str) -> Optional[Any]:
        """
        Looks up a template.

        Returns:
            An opaque source handle, or None if the template does not exist
        """
        pass

    @abstractmethod
    def read_bytes(self, source: Any) -> bytes:
        """
        Reads the content of a source returned by find_template_source.

        Raises:
            OSError: If the source cannot be read
        """
        pass

    def source_name(self, source: Any) -> str:
        """Human readable description of a source, for diagnostics."""
        return str(source)


class DictTemplateLoader(TemplateLoader):
    """In-memory loader; values may be text (encoded as UTF-8) or bytes."""

    def __init__(self, templates: Optional[Mapping[str, Union[str, bytes]]] = None):
        self.templates: Dict[str, Union[str, bytes]] = dict(templates or {})

    def put(self, name: str, content: Union[str, bytes]) -> None:
        self.templates[name] = content

    def find_template_source(self, name: str) -> Optional[str]:
        return name if name in self.templates else None

    def read_bytes(self, source: str) -> bytes:
        content = self.templates[source]
        if isinstance(content, str):
            return content.encode("utf-8")
        return content

    def source_name(self, source: str) -> str:
        return f"dict:{source}"


class FileTemplateLoader(TemplateLoader):
    """
    Loads templates from a directory.

    Names are resolved strictly inside the root directory. Names matching
    one of the `exclude` patterns (gitwildmatch syntax) behave as if the
    template did not exist.
    """

    def __init__(self, root: Union[str, Path], exclude: Optional[List[str]] = None):
        self.root = Path(root).resolve()
        self.exclude = list(exclude or [])
        self._exclude_spec = pathspec.PathSpec.from_lines("gitwildmatch", self.exclude) if self.exclude else None

    def find_template_source(self, name: str) -> Optional[Path]:
        if self._exclude_spec is not None and self._exclude_spec.match_file(name):
            return None

        path = (self.root / name).resolve()
        # Symlinks and the like must not lead out of the root
        if path != self.root and self.root not in path.parents:
            return None
        if not path.is_file():
            return None
        return path

    def read_bytes(self, source: Path) -> bytes:
        return source.read_bytes()

    def source_name(self, source: Path) -> str:
        return source.as_posix()


__all__ = ["TemplateLoader", "DictTemplateLoader", "FileTemplateLoader"]
