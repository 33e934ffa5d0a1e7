"""
The #include directive.

    <#include target [encoding=e] [parse=e] [ignore_missing=e]/>

Literal attribute expressions are folded when the node is constructed;
the target name is always evaluated at render time, because resolving it
needs the identity of the including template.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Optional

from .nodes import (
    Attr,
    DefaultAttr,
    DeferredAttr,
    FoldedAttr,
    ParameterRole,
    TemplateElement,
    attr_expression,
)
from ..coercion import ACCEPTED_TOKENS, to_boolean
from ..errors import (
    BugError,
    FormatError,
    InclusionError,
    NonBooleanError,
    StaticSemanticError,
    TemplateError,
    TemplateLoadError,
)
from ..expressions import Expression
from ..model import TemplateModel, is_boolean, is_scalar, type_description

if typing.TYPE_CHECKING:
    from .environment import Environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncludeNode(TemplateElement):
    """
    Includes another template into the output of the current one.

    Attributes:
        template_name: Target name expression (resolved relative to the
                       including template)
        encoding: Charset used to decode the included template; None means
                  the Environment's default encoding
        parse: Whether to parse the target as a template (default true);
               also accepts the legacy yes/no strings
        ignore_missing: Silently skip a non-existent target (default false)
    """
    template_name: Expression
    encoding: Optional[Expression] = None
    parse: Optional[Expression] = None
    ignore_missing: Optional[Expression] = None

    # Folded attribute states, computed in __post_init__
    encoding_attr: Attr = field(init=False, repr=False, compare=False)
    parse_attr: Attr = field(init=False, repr=False, compare=False)
    ignore_missing_attr: Attr = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "encoding_attr", self._fold_encoding())
        object.__setattr__(self, "parse_attr", self._fold_parse())
        object.__setattr__(self, "ignore_missing_attr", self._fold_ignore_missing())

    # ---------------------------------------------------------------
    # Literal folding
    # ---------------------------------------------------------------

    def _fold_encoding(self) -> Attr:
        exp = self.encoding
        if exp is None:
            return DefaultAttr(None)
        if not exp.is_literal:
            return DeferredAttr(exp)

        value = self._eval_literal(exp)
        if not is_scalar(value):
            raise self._static_error('Expected a string as the value of the "encoding" argument', exp)
        return FoldedAttr(value.get_as_string(), exp)

    def _fold_parse(self) -> Attr:
        exp = self.parse
        if exp is None:
            return DefaultAttr(True)
        if not exp.is_literal:
            return DeferredAttr(exp)

        value = self._eval_literal(exp)
        try:
            flag = _parse_flag(exp, value)
        except FormatError as e:
            raise self._static_error('Invalid legacy value of the "parse" attribute', exp) from e
        except NonBooleanError as e:
            raise self._static_error('Expected a boolean or string as the value of the "parse" attribute', exp) from e
        logger.debug(f"Folded parse={flag} for include of {self.template_name.canonical_form}")
        return FoldedAttr(flag, exp)

    def _fold_ignore_missing(self) -> Attr:
        exp = self.ignore_missing
        if exp is None:
            return DefaultAttr(False)
        if not exp.is_literal:
            return DeferredAttr(exp)

        value = self._eval_literal(exp)
        try:
            flag = exp.model_to_boolean(value)
        except NonBooleanError as e:
            raise self._static_error('Expected a boolean as the value of the "ignore_missing" attribute', exp) from e
        return FoldedAttr(flag, exp)

    def _eval_literal(self, exp: Expression) -> Optional[TemplateModel]:
        # Literal expressions never depend on the environment
        try:
            return exp.eval(None)
        except TemplateError as e:
            raise BugError(f"Evaluation of literal expression {exp.canonical_form} failed: {e}") from e

    def _static_error(self, message: str, exp: Expression) -> StaticSemanticError:
        return StaticSemanticError(
            message,
            expression=exp.canonical_form,
            line=self.line,
            column=self.column,
        )

    # ---------------------------------------------------------------
    # Execution
    # ---------------------------------------------------------------

    def accept(self, env: Environment) -> None:
        included_name = self.template_name.eval_and_coerce_to_plain_text(env)
        # MalformedNameError propagates as is
        full_name = env.to_full_template_name(env.current_template.name, included_name)

        encoding = self._effective_encoding(env)
        parse = self._effective_parse(env)
        ignore_missing = self._effective_ignore_missing(env)

        try:
            template = env.get_template_for_inclusion(full_name, encoding, parse, ignore_missing)
        except TemplateLoadError as e:
            raise InclusionError(template_name=included_name, cause=e) from e

        if template is None:
            logger.debug(f"Skipping missing template {full_name!r} (ignore_missing)")
            return None

        env.include(template)
        return None

    def _effective_encoding(self, env: Environment) -> Optional[str]:
        attr = self.encoding_attr
        if isinstance(attr, DeferredAttr):
            return attr.expression.eval_and_coerce_to_plain_text(env)
        return attr.value

    def _effective_parse(self, env: Environment) -> bool:
        attr = self.parse_attr
        if isinstance(attr, DeferredAttr):
            exp = attr.expression
            return _parse_flag(exp, exp.eval(env))
        return attr.value

    def _effective_ignore_missing(self, env: Environment) -> bool:
        attr = self.ignore_missing_attr
        if isinstance(attr, DeferredAttr):
            return attr.expression.eval_to_boolean(env)
        return attr.value

    # ---------------------------------------------------------------
    # Introspection
    # ---------------------------------------------------------------

    def dump(self, canonical: bool) -> str:
        parts = [self.node_type_symbol, " ", self.template_name.canonical_form]
        for label, attr in (
            ("encoding", self.encoding_attr),
            ("parse", self.parse_attr),
            ("ignore_missing", self.ignore_missing_attr),
        ):
            exp = attr_expression(attr)
            if exp is not None:
                parts.append(f" {label}={exp.canonical_form}")
        text = "".join(parts)
        return f"<{text}/>" if canonical else text

    @property
    def node_type_symbol(self) -> str:
        return "#include"

    def parameter_count(self) -> int:
        # ignore_missing is not exposed as a positional parameter
        return 3

    def _parameter_value(self, index: int) -> Any:
        return (self.template_name, self.parse, self.encoding)[index]

    def _parameter_role(self, index: int) -> ParameterRole:
        return (
            ParameterRole.TEMPLATE_NAME,
            ParameterRole.PARSE_PARAMETER,
            ParameterRole.ENCODING_PARAMETER,
        )[index]

    def is_nested_block_repeater(self) -> bool:
        return False

    def is_shown_in_stack_trace(self) -> bool:
        return True


def _parse_flag(exp: Expression, value: Optional[TemplateModel]) -> bool:
    """
    Interprets the value of the parse attribute.

    A string goes through the legacy yes/no coercion; anything else must
    have the boolean capability.

    Raises:
        FormatError: Unknown legacy string (names the expression)
        NonBooleanError: Neither a string nor a boolean
    """
    if is_scalar(value):
        s = value.get_as_string()
        try:
            return to_boolean(s)
        except FormatError as e:
            raise FormatError(value=s, accepted=ACCEPTED_TOKENS, expression=exp.canonical_form) from e
    if is_boolean(value):
        return value.get_as_boolean()
    raise NonBooleanError(expression=exp.canonical_form, actual_type=type_description(value))


__all__ = ["IncludeNode"]
