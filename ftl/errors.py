"""
Exception hierarchy for the template engine.

All expected errors that should be displayed to the template author
as clean messages (without Python stack traces) inherit from
TemplateUserError.

Programming errors and bugs should NOT inherit from TemplateUserError;
they propagate with full tracebacks. BugError marks the places where
the engine detects such a defect itself.

Messages are assembled lazily in __str__, so that quoting the offending
values only happens when the error is actually reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .utils import jquote


class TemplateUserError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    These errors indicate problems that the template author can fix:
    syntax errors, invalid names, missing templates, bad attribute values.
    """
    pass


class BugError(RuntimeError):
    """
    Internal defect of the engine.

    Raised when an invariant the engine relies on does not hold, for
    example when evaluating a literal expression fails.
    """
    pass


# ---------------------------------------------------------------------------
# Parse-time errors
# ---------------------------------------------------------------------------

class ParseError(TemplateUserError):
    """Syntax error in a template."""

    def __init__(self, message: str, line: int = 0, column: int = 0, template_name: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.template_name = template_name
        super().__init__(message)

    def __str__(self) -> str:
        where = f" in template {jquote(self.template_name)}" if self.template_name else ""
        if self.line:
            where += f" at line {self.line}, column {self.column}"
        return f"{self.message}{where}"


class StaticSemanticError(ParseError):
    """
    A directive attribute has a literal value of the wrong shape.

    Detected while the node is constructed, so it aborts the compilation
    of the whole template.
    """

    def __init__(self, message: str, expression: str = "", line: int = 0, column: int = 0):
        super().__init__(message, line=line, column=column)
        self.expression = expression

    def __str__(self) -> str:
        text = super().__str__()
        if self.expression:
            text += f"\nThe failing expression: {self.expression}"
        if self.__cause__ is not None:
            text += f"\nCaused by: {self.__cause__}"
        return text


# ---------------------------------------------------------------------------
# Render-time errors
# ---------------------------------------------------------------------------

class TemplateError(TemplateUserError):
    """
    Base class for errors raised while a template is being executed.

    `ftl_stack` is filled by the Environment with the instruction stack
    at the moment the error first crossed a template element.
    """
    ftl_stack: Optional[List[str]] = None

    def __str__(self) -> str:
        return self.describe()

    def describe(self) -> str:
        return super().__str__()

    def format_with_stack(self) -> str:
        """Message followed by the FTL stack trace, when one is attached."""
        text = str(self)
        if self.ftl_stack:
            text += "\n\nFTL stack trace (\"~\" means nesting-related):\n"
            text += "\n".join(self.ftl_stack)
        return text


@dataclass
class MalformedNameError(TemplateError):
    """A template name violates the naming rules."""
    template_name: str
    malformedness: str

    def describe(self) -> str:
        return f"Malformed template name {jquote(self.template_name)}:\n{self.malformedness}"


@dataclass
class FormatError(TemplateError):
    """A legacy yes/no string is not one of the accepted tokens."""
    value: str
    accepted: Sequence[str] = ()
    expression: str = ""

    def describe(self) -> str:
        tokens = ", ".join(jquote(t) for t in self.accepted)
        msg = f"Value must be boolean (or one of these strings: {tokens}), but it was {jquote(self.value)}."
        if self.expression:
            msg += f"\nThe failing expression: {self.expression}"
        return msg


@dataclass
class NonBooleanError(TemplateError):
    """A boolean was required but the value has no boolean capability."""
    expression: str
    actual_type: str

    def describe(self) -> str:
        return (
            f"Expected a boolean, but this has evaluated to {self.actual_type}:\n"
            f"==> {self.expression}"
        )


@dataclass
class NonStringError(TemplateError):
    """A string (or number) was required but something else was found."""
    expression: str
    actual_type: str

    def describe(self) -> str:
        return (
            f"Expected a string or number, but this has evaluated to {self.actual_type}:\n"
            f"==> {self.expression}"
        )


@dataclass
class UndefinedVariableError(TemplateError):
    """An identifier refers to a variable that is not defined anywhere."""
    name: str

    def describe(self) -> str:
        return f"The following has evaluated to null or missing:\n==> {self.name}"


@dataclass
class InclusionError(TemplateError):
    """
    Loading the target of an #include failed.

    `template_name` is the name exactly as the template author supplied
    it (before resolution against the including template).
    """
    template_name: str
    cause: Optional[BaseException] = None

    def describe(self) -> str:
        reason = str(self.cause) if self.cause is not None else "unknown reason"
        return f"Template inclusion failed (for parameter value {jquote(self.template_name)}):\n{reason}"


@dataclass
class RecursionLimitError(TemplateError):
    """Nested inclusion went deeper than the configured limit."""
    limit: int
    chain: List[str] = field(default_factory=list)

    def describe(self) -> str:
        msg = f"Template inclusion nested deeper than {self.limit} levels"
        if self.chain:
            msg += f": {' -> '.join(self.chain)}"
        return msg


# ---------------------------------------------------------------------------
# Loading errors
# ---------------------------------------------------------------------------

@dataclass
class TemplateLoadError(TemplateUserError):
    """A template exists (or may exist) but could not be loaded."""
    template_name: str
    reason: str = ""

    def __str__(self) -> str:
        msg = f"Failed to load template {jquote(self.template_name)}"
        if self.reason:
            msg += f": {self.reason}"
        return msg


@dataclass
class TemplateNotFoundError(TemplateLoadError):
    """No template source exists for the name."""

    def __str__(self) -> str:
        msg = f"Template not found for name {jquote(self.template_name)}."
        if self.reason:
            msg += f"\nReason given: {self.reason}"
        return msg


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigError(TemplateUserError, ValueError):
    """Invalid engine configuration (with the path of the offending field)."""
    pass


__all__ = [
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
