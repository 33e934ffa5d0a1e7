"""
Template elements, parsing, loading and execution.
"""

from __future__ import annotations

from .environment import Environment, StackFrame
from .include import IncludeNode
from .loader import DictTemplateLoader, FileTemplateLoader, TemplateLoader
from .names import normalize_root_based_name, to_root_based_name
from .nodes import (
    AssignNode,
    DefaultAttr,
    DeferredAttr,
    FoldedAttr,
    IfNode,
    InterpolationNode,
    ParameterRole,
    TemplateElement,
    TextNode,
    VariableScope,
)
from .parser import TemplateParser, parse_template
from .resolver import TemplateResolver
from .template import Template

__all__ = [
    "Environment",
    "StackFrame",
    "IncludeNode",
    "TemplateLoader",
    "DictTemplateLoader",
    "FileTemplateLoader",
    "to_root_based_name",
    "normalize_root_based_name",
    "ParameterRole",
    "DefaultAttr",
    "FoldedAttr",
    "DeferredAttr",
    "TemplateElement",
    "TextNode",
    "InterpolationNode",
    "IfNode",
    "AssignNode",
    "VariableScope",
    "TemplateParser",
    "parse_template",
    "TemplateResolver",
    "Template",
]
