"""
Expression language used inside interpolations and directive attributes.
"""

from __future__ import annotations

from .lexer import ExpressionLexer, Token
from .model import (
    AddExpression,
    AndExpression,
    BooleanLiteral,
    ComparisonExpression,
    Expression,
    Identifier,
    NotExpression,
    NumberLiteral,
    OrExpression,
    ParenthesizedExpression,
    StringLiteral,
)
from .parser import ExpressionParser, parse_expression

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
    "ExpressionLexer",
    "ExpressionParser",
    "Token",
    "parse_expression",
]
