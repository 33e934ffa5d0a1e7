"""
Recursive descent parser for template expressions.

Grammar:
expression → or_expr
or_expr    → and_expr ("||" and_expr)*
and_expr   → not_expr ("&&" not_expr)*
not_expr   → "!" not_expr | equality
equality   → additive (("==" | "!=") additive)?
additive   → primary ("+" primary)*
primary    → STRING | NUMBER | "true" | "false" | IDENTIFIER | "(" expression ")"
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Tuple

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
from ..errors import ParseError
from ..utils import unquote


class ExpressionParser:
    """
    Builds expression trees from token lists.

    `parse` handles a standalone expression string; `parse_at` continues
    from a position inside an existing token list, so that a directive
    parser can read several attribute expressions from one tag.
    """

    def __init__(self):
        self.lexer = ExpressionLexer()
        self._tokens: List[Token] = []
        self._position = 0

    def parse(self, text: str) -> Expression:
        """
        Parses a complete expression.

        Raises:
            ParseError: On a syntax error or trailing tokens
        """
        tokens = self.lexer.tokenize(text)
        if len(tokens) == 1:
            raise ParseError("Empty expression")

        expression, position = self.parse_at(tokens, 0)
        if tokens[position].type != 'EOF':
            raise ParseError(
                f"Unexpected token '{tokens[position].value}' at position {tokens[position].position}"
            )
        return expression

    def parse_at(self, tokens: List[Token], position: int) -> Tuple[Expression, int]:
        """
        Parses one expression starting at `tokens[position]`.

        Returns:
            (expression, index of the first token after it)
        """
        self._tokens = tokens
        self._position = position
        expression = self._parse_or()
        return expression, self._position

    def _parse_or(self) -> Expression:
        left = self._parse_and()
        while self._match_operator("||"):
            left = OrExpression(left=left, right=self._parse_and())
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_not()
        while self._match_operator("&&"):
            left = AndExpression(left=left, right=self._parse_not())
        return left

    def _parse_not(self) -> Expression:
        if self._match_operator("!"):
            return NotExpression(operand=self._parse_not())
        return self._parse_equality()

    def _parse_equality(self) -> Expression:
        left = self._parse_additive()
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value in ("==", "!="):
            self._advance()
            right = self._parse_additive()
            return ComparisonExpression(left=left, right=right, operator=current.value)
        return left

    def _parse_additive(self) -> Expression:
        left = self._parse_primary()
        while self._match_operator("+"):
            left = AddExpression(left=left, right=self._parse_primary())
        return left

    def _parse_primary(self) -> Expression:
        current = self._current_token()

        if current.type == 'SYMBOL' and current.value == "(":
            self._advance()
            inner = self._parse_or()
            closing = self._current_token()
            if closing.type != 'SYMBOL' or closing.value != ")":
                raise ParseError(f"Expected ')' at position {closing.position}")
            self._advance()
            return ParenthesizedExpression(expression=inner)

        if current.type == 'STRING':
            self._advance()
            return StringLiteral(value=unquote(current.value[1:-1]))

        if current.type == 'NUMBER':
            self._advance()
            value = Decimal(current.value) if "." in current.value else int(current.value)
            return NumberLiteral(value=value, text=current.value)

        if current.type == 'KEYWORD':
            self._advance()
            return BooleanLiteral(value=current.value == "true")

        if current.type == 'IDENTIFIER':
            self._advance()
            return Identifier(name=current.value)

        if current.type == 'EOF':
            raise ParseError(f"Unexpected end of expression at position {current.position}")
        raise ParseError(f"Unexpected token '{current.value}' at position {current.position}")

    # Token helpers

    def _current_token(self) -> Token:
        if self._position >= len(self._tokens):
            last = self._tokens[-1].position if self._tokens else 0
            return Token(type='EOF', value='', position=last)
        return self._tokens[self._position]

    def _advance(self) -> Token:
        token = self._current_token()
        if self._position < len(self._tokens):
            self._position += 1
        return token

    def _match_operator(self, operator: str) -> bool:
        current = self._current_token()
        if current.type == 'OPERATOR' and current.value == operator:
            self._advance()
            return True
        return False


def parse_expression(text: str) -> Expression:
    """Convenience wrapper around ExpressionParser.parse."""
    return ExpressionParser().parse(text)


__all__ = ["ExpressionParser", "parse_expression"]
