"""
Loaded template.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .nodes import TemplateElement, TextNode
from .parser import parse_template


@dataclass(frozen=True)
class Template:
    """
    A parsed (or raw) template.

    Attributes:
        name: Normalized root-based name; relative includes resolve against it
        root: Root elements, visited in order
        source_name: Where the source came from (path or loader key)
        encoding: Charset the source was decoded with, None for text input
        parsed: False for templates included with parse=false
    """
    name: str
    root: Tuple[TemplateElement, ...]
    source_name: str = ""
    encoding: Optional[str] = None
    parsed: bool = True

    @classmethod
    def from_text(
        cls,
        text: str,
        name: str = "",
        source_name: str = "",
        encoding: Optional[str] = None,
    ) -> Template:
        """
        Parses template source.

        Raises:
            ParseError: On syntax errors
        """
        return cls(
            name=name,
            root=parse_template(text, name),
            source_name=source_name or name,
            encoding=encoding,
        )

    @classmethod
    def raw(
        cls,
        text: str,
        name: str = "",
        source_name: str = "",
        encoding: Optional[str] = None,
    ) -> Template:
        """Wraps text that is output verbatim, without interpreting directives."""
        root = (TextNode(text=text, line=1, column=1),) if text else ()
        return cls(
            name=name,
            root=root,
            source_name=source_name or name,
            encoding=encoding,
            parsed=False,
        )

    def dump(self, canonical: bool = True) -> str:
        """
        Canonical dump re-parses to an equivalent template; the
        non-canonical one lists root elements one per line.
        """
        if canonical:
            return "".join(element.dump(True) for element in self.root)
        return "\n".join(element.dump(False) for element in self.root)


__all__ = ["Template"]
