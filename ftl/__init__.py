"""
ftl: template engine core.

Typical use:

    from ftl import Engine, EngineConfig

    engine = Engine(EngineConfig(template_root="templates"))
    text = engine.render("main.ftl", {"user": "Ann"})
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .engine import Engine
from .errors import (
    BugError,
    ConfigError,
    FormatError,
    InclusionError,
    MalformedNameError,
    NonBooleanError,
    NonStringError,
    ParseError,
    RecursionLimitError,
    StaticSemanticError,
    TemplateError,
    TemplateLoadError,
    TemplateNotFoundError,
    TemplateUserError,
    UndefinedVariableError,
)
from .template import DictTemplateLoader, FileTemplateLoader, Template

__all__ = [
    "Engine",
    "EngineConfig",
    "load_config",
    "Template",
    "DictTemplateLoader",
    "FileTemplateLoader",
    "TemplateUserError",
    "BugError",
    "ParseError",
    "StaticSemanticError",
    "TemplateError",
    "MalformedNameError",
    "FormatError",
    "NonBooleanError",
    "NonStringError",
    "UndefinedVariableError",
    "InclusionError",
    "RecursionLimitError",
    "TemplateLoadError",
    "TemplateNotFoundError",
    "ConfigError",
]
