"""
Expression nodes.

Expressions are immutable and shared by every render of the template that
owns them. Each expression knows whether it is a literal, i.e. whether its
value can be computed without an environment; literal expressions must
evaluate with `env=None`.
"""

from __future__ import annotations

import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..errors import BugError, NonBooleanError, NonStringError, TemplateError, UndefinedVariableError
from ..model import (
    FALSE,
    TRUE,
    Number,
    SimpleNumber,
    SimpleScalar,
    TemplateModel,
    format_number,
    is_boolean,
    is_number,
    is_scalar,
    type_description,
)
from ..utils import jquote

if typing.TYPE_CHECKING:
    from ..template.environment import Environment


@dataclass(frozen=True)
class Expression(ABC):
    """Base class of all expressions."""

    @property
    @abstractmethod
    def is_literal(self) -> bool:
        """True when the value never depends on the environment."""
        pass

    @abstractmethod
    def eval(self, env: Optional[Environment]) -> Optional[TemplateModel]:
        pass

    @property
    @abstractmethod
    def canonical_form(self) -> str:
        """Source syntax that re-parses to an equivalent expression."""
        pass

    def __str__(self) -> str:
        return self.canonical_form

    def eval_to_boolean(self, env: Optional[Environment]) -> bool:
        """
        Evaluates and requires a boolean.

        Raises:
            NonBooleanError: If the value has no boolean capability
        """
        return self.model_to_boolean(self.eval(env))

    def model_to_boolean(self, model: Optional[TemplateModel]) -> bool:
        if is_boolean(model):
            return model.get_as_boolean()
        raise NonBooleanError(expression=self.canonical_form, actual_type=type_description(model))

    def eval_and_coerce_to_plain_text(self, env: Optional[Environment]) -> str:
        """
        Evaluates and converts the value to text.

        Strings are returned as is, numbers are formatted.

        Raises:
            NonStringError: For booleans and other values
        """
        return self.model_to_plain_text(self.eval(env))

    def model_to_plain_text(self, model: Optional[TemplateModel]) -> str:
        if is_scalar(model):
            return model.get_as_string()
        if is_number(model):
            return format_number(model.get_as_number())
        raise NonStringError(expression=self.canonical_form, actual_type=type_description(model))


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str

    @property
    def is_literal(self) -> bool:
        return True

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        return SimpleScalar(self.value)

    @property
    def canonical_form(self) -> str:
        return jquote(self.value)


@dataclass(frozen=True)
class NumberLiteral(Expression):
    value: Number
    text: str

    @property
    def is_literal(self) -> bool:
        return True

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        return SimpleNumber(self.value)

    @property
    def canonical_form(self) -> str:
        return self.text


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool

    @property
    def is_literal(self) -> bool:
        return True

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        return TRUE if self.value else FALSE

    @property
    def canonical_form(self) -> str:
        return "true" if self.value else "false"


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Identifier(Expression):
    """Reference to a variable; resolved through the environment's scopes."""
    name: str

    @property
    def is_literal(self) -> bool:
        return False

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        if env is None:
            raise BugError(f"Variable {self.name!r} evaluated without an environment")
        value = env.get_variable(self.name)
        if value is None:
            raise UndefinedVariableError(name=self.name)
        return value

    @property
    def canonical_form(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParenthesizedExpression(Expression):
    expression: Expression

    @property
    def is_literal(self) -> bool:
        return self.expression.is_literal

    def eval(self, env: Optional[Environment]) -> Optional[TemplateModel]:
        return self.expression.eval(env)

    @property
    def canonical_form(self) -> str:
        return f"({self.expression.canonical_form})"


@dataclass(frozen=True)
class NotExpression(Expression):
    operand: Expression

    @property
    def is_literal(self) -> bool:
        return self.operand.is_literal

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        return FALSE if self.operand.eval_to_boolean(env) else TRUE

    @property
    def canonical_form(self) -> str:
        return f"!{self.operand.canonical_form}"


@dataclass(frozen=True)
class AndExpression(Expression):
    left: Expression
    right: Expression

    @property
    def is_literal(self) -> bool:
        return self.left.is_literal and self.right.is_literal

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        # Short-circuit
        if not self.left.eval_to_boolean(env):
            return FALSE
        return TRUE if self.right.eval_to_boolean(env) else FALSE

    @property
    def canonical_form(self) -> str:
        return f"{self.left.canonical_form} && {self.right.canonical_form}"


@dataclass(frozen=True)
class OrExpression(Expression):
    left: Expression
    right: Expression

    @property
    def is_literal(self) -> bool:
        return self.left.is_literal and self.right.is_literal

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        if self.left.eval_to_boolean(env):
            return TRUE
        return TRUE if self.right.eval_to_boolean(env) else FALSE

    @property
    def canonical_form(self) -> str:
        return f"{self.left.canonical_form} || {self.right.canonical_form}"


@dataclass(frozen=True)
class ComparisonExpression(Expression):
    """`==` / `!=` between two strings, two numbers or two booleans."""
    left: Expression
    right: Expression
    operator: str

    @property
    def is_literal(self) -> bool:
        return self.left.is_literal and self.right.is_literal

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        lhs = self.left.eval(env)
        rhs = self.right.eval(env)
        if is_number(lhs) and is_number(rhs):
            equal = lhs.get_as_number() == rhs.get_as_number()
        elif is_scalar(lhs) and is_scalar(rhs):
            equal = lhs.get_as_string() == rhs.get_as_string()
        elif is_boolean(lhs) and is_boolean(rhs):
            equal = lhs.get_as_boolean() == rhs.get_as_boolean()
        else:
            raise TemplateError(
                f"Can't compare values of these types. Left hand operand is {type_description(lhs)}, "
                f"right hand operand is {type_description(rhs)}:\n==> {self.canonical_form}"
            )
        result = equal if self.operator == "==" else not equal
        return TRUE if result else FALSE

    @property
    def canonical_form(self) -> str:
        return f"{self.left.canonical_form} {self.operator} {self.right.canonical_form}"


@dataclass(frozen=True)
class AddExpression(Expression):
    """Numeric addition, or string concatenation when either side is a string."""
    left: Expression
    right: Expression

    @property
    def is_literal(self) -> bool:
        return self.left.is_literal and self.right.is_literal

    def eval(self, env: Optional[Environment]) -> TemplateModel:
        lhs = self.left.eval(env)
        rhs = self.right.eval(env)
        if is_number(lhs) and is_number(rhs):
            return SimpleNumber(lhs.get_as_number() + rhs.get_as_number())
        return SimpleScalar(self.left.model_to_plain_text(lhs) + self.right.model_to_plain_text(rhs))

    @property
    def canonical_form(self) -> str:
        return f"{self.left.canonical_form} + {self.right.canonical_form}"


__all__ = [
    "Expression",
    "StringLiteral",
    "NumberLiteral",
    "BooleanLiteral",
    "Identifier",
    "ParenthesizedExpression",
    "NotExpression",
    "AndExpression",
    "OrExpression",
    "ComparisonExpression",
    "AddExpression",
]
