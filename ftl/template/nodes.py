"""
Template elements: the executable nodes of a parsed template.

Every element implements the same protocol, used by the Environment to
execute a template and by tooling to inspect it:

- accept(env): performs the element's effect and optionally returns child
  elements the caller must visit next (block directives)
- dump(canonical): source syntax (canonical) or a one-line trace form
- parameter_count / parameter_value / parameter_role: introspection
- is_nested_block_repeater / is_shown_in_stack_trace: hints for the engine

Elements are frozen dataclasses; they are created once per parse and
shared by every render of the owning template.
"""

from __future__ import annotations

import enum
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Tuple, TypeVar, Union

from ..expressions import Expression
from ..utils import jquote

if typing.TYPE_CHECKING:
    from .environment import Environment


class ParameterRole(enum.Enum):
    """Semantic role of an element parameter; the value is a display label."""

    TEMPLATE_NAME = "template name"
    PARSE_PARAMETER = "\"parse\" parameter"
    ENCODING_PARAMETER = "\"encoding\" parameter"
    IGNORE_MISSING_PARAMETER = "\"ignore_missing\" parameter"
    CONTENT = "content"
    CONDITION = "condition"
    ASSIGNMENT_TARGET = "assignment target"
    ASSIGNMENT_SOURCE = "assignment source"
    VARIABLE_SCOPE = "variable scope"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Attribute states
# ---------------------------------------------------------------------------

T = TypeVar("T")


@dataclass(frozen=True)
class DefaultAttr(Generic[T]):
    """The attribute was not written; `value` is its default."""
    value: T


@dataclass(frozen=True)
class FoldedAttr(Generic[T]):
    """The attribute expression is literal and was evaluated at parse time."""
    value: T
    expression: Expression


@dataclass(frozen=True)
class DeferredAttr:
    """The attribute expression depends on runtime state."""
    expression: Expression


Attr = Union[DefaultAttr, FoldedAttr, DeferredAttr]


def attr_expression(attr: Attr) -> Optional[Expression]:
    """Source expression of an attribute, None when it was not written."""
    if isinstance(attr, (FoldedAttr, DeferredAttr)):
        return attr.expression
    return None


# ---------------------------------------------------------------------------
# Base element
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TemplateElement(ABC):
    """Base class of all template elements."""

    line: int = field(default=0, kw_only=True, compare=False)
    column: int = field(default=0, kw_only=True, compare=False)

    @abstractmethod
    def accept(self, env: Environment) -> Optional[List[TemplateElement]]:
        """
        Executes the element.

        Returns:
            Child elements the caller must visit next, or None
        """
        pass

    @abstractmethod
    def dump(self, canonical: bool) -> str:
        pass

    @property
    def canonical_form(self) -> str:
        return self.dump(True)

    @property
    @abstractmethod
    def node_type_symbol(self) -> str:
        pass

    def parameter_count(self) -> int:
        return 0

    def parameter_value(self, index: int) -> Any:
        """
        Returns the parameter at `index` (usually an Expression or None).

        Raises:
            IndexError: If index is outside [0, parameter_count())
        """
        self._check_parameter_index(index)
        return self._parameter_value(index)

    def parameter_role(self, index: int) -> ParameterRole:
        self._check_parameter_index(index)
        return self._parameter_role(index)

    def _check_parameter_index(self, index: int) -> None:
        count = self.parameter_count()
        if not 0 <= index < count:
            raise IndexError(
                f"Parameter index {index} out of range for {self.node_type_symbol} "
                f"(parameter count: {count})"
            )

    def _parameter_value(self, index: int) -> Any:
        raise IndexError(index)

    def _parameter_role(self, index: int) -> ParameterRole:
        raise IndexError(index)

    def is_nested_block_repeater(self) -> bool:
        return False

    def is_shown_in_stack_trace(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.canonical_form


# ---------------------------------------------------------------------------
# Concrete elements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextNode(TemplateElement):
    """Static text, written to the output as is."""
    text: str

    def accept(self, env: Environment) -> None:
        env.out.write(self.text)
        return None

    def dump(self, canonical: bool) -> str:
        if canonical:
            return self.text
        return f"text {jquote(_abbreviate(self.text))}"

    @property
    def node_type_symbol(self) -> str:
        return "#text"

    def parameter_count(self) -> int:
        return 1

    def _parameter_value(self, index: int) -> Any:
        return self.text

    def _parameter_role(self, index: int) -> ParameterRole:
        return ParameterRole.CONTENT

    def is_shown_in_stack_trace(self) -> bool:
        return False


@dataclass(frozen=True)
class InterpolationNode(TemplateElement):
    """`${expression}`: writes the value of the expression as text."""
    expression: Expression

    def accept(self, env: Environment) -> None:
        env.out.write(self.expression.eval_and_coerce_to_plain_text(env))
        return None

    def dump(self, canonical: bool) -> str:
        return f"${{{self.expression.canonical_form}}}"

    @property
    def node_type_symbol(self) -> str:
        return "${...}"

    def parameter_count(self) -> int:
        return 1

    def _parameter_value(self, index: int) -> Any:
        return self.expression

    def _parameter_role(self, index: int) -> ParameterRole:
        return ParameterRole.CONTENT


@dataclass(frozen=True)
class IfNode(TemplateElement):
    """
    `<#if condition>...<#else>...</#if>`.

    Does not write anything itself; `accept` hands the selected branch back
    to the Environment.
    """
    condition: Expression
    then_elements: Tuple[TemplateElement, ...] = ()
    else_elements: Optional[Tuple[TemplateElement, ...]] = None

    def accept(self, env: Environment) -> Optional[List[TemplateElement]]:
        if self.condition.eval_to_boolean(env):
            return list(self.then_elements)
        if self.else_elements is not None:
            return list(self.else_elements)
        return None

    def dump(self, canonical: bool) -> str:
        if not canonical:
            return f"{self.node_type_symbol} {self.condition.canonical_form}"
        parts = [f"<#if {self.condition.canonical_form}>"]
        parts.extend(e.canonical_form for e in self.then_elements)
        if self.else_elements is not None:
            parts.append("<#else>")
            parts.extend(e.canonical_form for e in self.else_elements)
        parts.append("</#if>")
        return "".join(parts)

    @property
    def node_type_symbol(self) -> str:
        return "#if"

    def parameter_count(self) -> int:
        return 1

    def _parameter_value(self, index: int) -> Any:
        return self.condition

    def _parameter_role(self, index: int) -> ParameterRole:
        return ParameterRole.CONDITION


class VariableScope(enum.Enum):
    LOCAL = "assign"
    GLOBAL = "global"


@dataclass(frozen=True)
class AssignNode(TemplateElement):
    """`<#assign name = expr/>` or `<#global name = expr/>`."""
    name: str
    expression: Expression
    scope: VariableScope = VariableScope.LOCAL

    def accept(self, env: Environment) -> None:
        value = self.expression.eval(env)
        if self.scope is VariableScope.GLOBAL:
            env.set_global(self.name, value)
        else:
            env.set_local(self.name, value)
        return None

    def dump(self, canonical: bool) -> str:
        text = f"{self.node_type_symbol} {self.name} = {self.expression.canonical_form}"
        return f"<{text}/>" if canonical else text

    @property
    def node_type_symbol(self) -> str:
        return f"#{self.scope.value}"

    def parameter_count(self) -> int:
        return 3

    def _parameter_value(self, index: int) -> Any:
        return (self.name, self.expression, self.scope.value)[index]

    def _parameter_role(self, index: int) -> ParameterRole:
        return (
            ParameterRole.ASSIGNMENT_TARGET,
            ParameterRole.ASSIGNMENT_SOURCE,
            ParameterRole.VARIABLE_SCOPE,
        )[index]


def _abbreviate(text: str, limit: int = 40) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


__all__ = [
    "ParameterRole",
    "DefaultAttr",
    "FoldedAttr",
    "DeferredAttr",
    "Attr",
    "attr_expression",
    "TemplateElement",
    "TextNode",
    "InterpolationNode",
    "IfNode",
    "VariableScope",
    "AssignNode",
]
