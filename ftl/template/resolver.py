"""
Template resolver: name -> loaded Template, with caching.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from .loader import TemplateLoader
from .names import normalize_root_based_name
from .template import Template
from ..errors import ParseError, TemplateLoadError, TemplateNotFoundError

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, bool]


class TemplateResolver:
    """
    Loads, decodes and parses templates by name.

    Loaded templates are cached per (name, encoding, parse) for the
    lifetime of the resolver. Missing templates are not cached.
    """

    def __init__(self, loader: TemplateLoader, default_encoding: str = "utf-8"):
        self.loader = loader
        self.default_encoding = default_encoding
        self._template_cache: Dict[CacheKey, Template] = {}

    def get_template(
        self,
        name: str,
        encoding: Optional[str] = None,
        parse: bool = True,
        ignore_missing: bool = False,
    ) -> Optional[Template]:
        """
        Returns the template for a root-based name.

        Args:
            name: Template name (normalized here)
            encoding: Charset of the source; None means the default encoding
            parse: False to treat the source as plain text
            ignore_missing: Return None instead of raising for a missing template

        Raises:
            MalformedNameError: If the name breaks the naming rules
            TemplateNotFoundError: If the template does not exist
            TemplateLoadError: If it exists but cannot be read, decoded or parsed
        """
        name = normalize_root_based_name(name)
        encoding = encoding or self.default_encoding
        cache_key = (name, encoding, parse)

        cached = self._template_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Template cache hit: {name!r} ({encoding}, parse={parse})")
            return cached

        source = self.loader.find_template_source(name)
        if source is None:
            if ignore_missing:
                logger.debug(f"Template {name!r} not found, ignored")
                return None
            raise TemplateNotFoundError(template_name=name)

        template = self._load(name, source, encoding, parse)
        self._template_cache[cache_key] = template
        return template

    def _load(self, name: str, source, encoding: str, parse: bool) -> Template:
        source_name = self.loader.source_name(source)
        logger.debug(f"Loading template {name!r} from {source_name} ({encoding}, parse={parse})")

        try:
            data = self.loader.read_bytes(source)
        except OSError as e:
            raise TemplateLoadError(template_name=name, reason=f"I/O error: {e}") from e

        try:
            text = data.decode(encoding)
        except LookupError as e:
            raise TemplateLoadError(template_name=name, reason=f"Unknown encoding {encoding!r}") from e
        except UnicodeDecodeError as e:
            raise TemplateLoadError(template_name=name, reason=f"Cannot decode as {encoding}: {e}") from e

        if not parse:
            return Template.raw(text, name=name, source_name=source_name, encoding=encoding)

        try:
            return Template.from_text(text, name=name, source_name=source_name, encoding=encoding)
        except ParseError as e:
            raise TemplateLoadError(template_name=name, reason=str(e)) from e

    def clear_cache(self) -> None:
        self._template_cache.clear()


__all__ = ["TemplateResolver"]
