"""
Engine: public entry point tying configuration, loading and rendering
together.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from .config import EngineConfig
from .errors import BugError, TemplateError, TemplateUserError
from .template.environment import Environment
from .template.loader import FileTemplateLoader, TemplateLoader
from .template.resolver import TemplateResolver
from .template.template import Template

logger = logging.getLogger(__name__)


class Engine:
    """
    Template engine.

    Holds the loader and the template cache; every render gets its own
    Environment. Without an explicit loader, templates are read from
    `config.template_root`.
    """

    def __init__(self, config: Optional[EngineConfig] = None, loader: Optional[TemplateLoader] = None):
        self.config = config or EngineConfig()
        if loader is None:
            loader = FileTemplateLoader(Path(self.config.template_root), exclude=self.config.exclude)
        self.loader = loader
        self.resolver = TemplateResolver(loader, default_encoding=self.config.default_encoding)

    def get_template(self, name: str, encoding: Optional[str] = None, parse: bool = True) -> Template:
        """
        Loads a template by root-based name.

        Raises:
            MalformedNameError: If the name breaks the naming rules
            TemplateNotFoundError: If no such template exists
            TemplateLoadError: If it cannot be read, decoded or parsed
        """
        template = self.resolver.get_template(name, encoding, parse, ignore_missing=False)
        if template is None:
            raise BugError(f"Resolver returned no template for {name!r} with ignore_missing off")
        return template

    def parse_template(self, text: str, name: str = "") -> Template:
        """
        Parses template text that does not come from the loader.

        Relative #include names resolve against `name`.
        """
        return Template.from_text(text, name=name)

    def create_environment(
        self,
        template: Template,
        data_model: Optional[Mapping[str, Any]] = None,
        out: Optional[TextIO] = None,
    ) -> Environment:
        return Environment(template, self.resolver, self.config, data_model=data_model, out=out)

    def render(self, name: str, data_model: Optional[Mapping[str, Any]] = None) -> str:
        """
        Loads and renders a template.

        Raises:
            TemplateUserError: Any user-facing error (logged at debug level)
        """
        return self._render(lambda: self.get_template(name), data_model, name)

    def render_text(self, text: str, name: str = "", data_model: Optional[Mapping[str, Any]] = None) -> str:
        """Parses and renders template text."""
        return self._render(lambda: self.parse_template(text, name), data_model, name)

    def _render(self, get_template, data_model: Optional[Mapping[str, Any]], name: str) -> str:
        try:
            template = get_template()
            out = io.StringIO()
            self.create_environment(template, data_model=data_model, out=out).process()
            return out.getvalue()
        except TemplateError as e:
            logger.debug(f"Rendering {name!r} failed:\n{e.format_with_stack()}")
            raise
        except TemplateUserError as e:
            logger.debug(f"Rendering {name!r} failed: {e}")
            raise


__all__ = ["Engine"]
